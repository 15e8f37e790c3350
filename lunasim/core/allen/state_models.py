# lunasim/core/allen/state_models.py

from pydantic import BaseModel, Field
from enum import Enum
from typing import List, Optional


class Approach(str, Enum):
    """玩家每回合对 Allen 采取的接近方式"""

    FRIENDLY = "friendly"
    AGGRESSIVE = "aggressive"
    CONFUSED = "confused"
    SAD = "sad"
    FEARFUL = "fearful"
    NEUTRAL = "neutral"


class Mood(str, Enum):
    """定义 Allen 可能的情绪状态"""

    HAPPY = "happy"
    NEUTRAL = "neutral"
    ANGRY = "angry"
    CONFUSED = "confused"
    SAD = "sad"
    FEARFUL = "fearful"


class MoodContext(BaseModel):
    """
    状态机的共享上下文。
    所有状态共用同一个 mood_level，而不是每个状态各自一份。
    """

    mood_level: int = Field(default=0, description="Allen 的情绪值，约定范围 -2 (很难过) 到 +2 (很开心)，不强制")


class StateDecision(BaseModel):
    """update_mood 的返回值：留在原状态、转换到目标状态，或结束整个会话"""

    target: Optional[Mood] = Field(default=None, description="要转换到的情绪，None 表示保持不变")
    terminate_session: bool = Field(default=False, description="是否结束整个会话")
    narration: List[str] = Field(default_factory=list, description="决策本身产生的叙述文本")

    @classmethod
    def stay(cls) -> "StateDecision":
        return cls()

    @classmethod
    def go(cls, target: Mood, *lines: str) -> "StateDecision":
        return cls(target=target, narration=list(lines))

    @classmethod
    def terminate(cls, line: str) -> "StateDecision":
        return cls(terminate_session=True, narration=[line])


class TurnOutcome(str, Enum):
    CONTINUES = "continues"
    TERMINATES_SESSION = "terminates_session"


class TurnResult(BaseModel):
    """一回合处理完后交还给驱动层的结果"""

    outcome: TurnOutcome
    mood: Mood = Field(..., description="回合结束后的当前情绪")
    narration: List[str] = Field(default_factory=list, description="按顺序输出的叙述文本")

    @property
    def continues(self) -> bool:
        return self.outcome == TurnOutcome.CONTINUES
