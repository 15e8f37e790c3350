# lunasim/core/allen/states.py

import random
from loguru import logger
from pydantic import BaseModel, Field
from typing import ClassVar, Dict, Type

from .state_models import Approach, Mood, MoodContext, StateDecision


class MoodStateBase(BaseModel):
    """
    所有情绪状态的基类。
    子类通过 DIRECT_TRANSITIONS 声明 "接近方式 -> 目标情绪" 的直接转换，
    需要额外逻辑 (随机事件、mood_level) 的状态覆盖 update_mood。
    """

    mood: ClassVar[Mood]
    enter_line: ClassVar[str] = ""
    express_line: ClassVar[str] = ""
    DIRECT_TRANSITIONS: ClassVar[Dict[Approach, Mood]] = {}

    released: bool = Field(default=False, description="是否已在 teardown 中释放")

    def enter(self) -> str:
        """进入状态时调用，返回进入叙述"""
        logger.debug(f"进入状态: {self.mood.value}")
        return self.enter_line

    def exit(self) -> None:
        """离开状态时调用，目前所有状态都不需要清理"""
        logger.trace(f"离开状态: {self.mood.value}")

    def update_mood(self, approach: Approach, context: MoodContext, rng: random.Random) -> StateDecision:
        target = self.DIRECT_TRANSITIONS.get(approach)
        if target is None:
            logger.trace(f"状态 '{self.mood.value}' 对 '{approach.value}' 没有反应，保持不变")
            return StateDecision.stay()
        return StateDecision.go(target)

    def express_mood(self) -> str:
        return self.express_line

    def release(self) -> None:
        if self.released:
            raise RuntimeError(f"状态 '{self.mood.value}' 已被释放过")
        self.released = True


class HappyState(MoodStateBase):
    mood: ClassVar[Mood] = Mood.HAPPY
    enter_line: ClassVar[str] = (
        "A warm, genuine smile lights up Allen's face as he greets you. "
        "His eyes sparkle with an infectious joy, reflecting a sense of contentment and well-being."
    )
    express_line: ClassVar[str] = (
        "Allen hums a cheerful tune, his steps light and carefree. "
        "'Life's full of wonders, don't you think?' he says with a beaming smile, inviting you to share in his joy."
    )
    # friendly / neutral 不改变心情
    DIRECT_TRANSITIONS: ClassVar[Dict[Approach, Mood]] = {
        Approach.AGGRESSIVE: Mood.NEUTRAL,
        Approach.CONFUSED: Mood.CONFUSED,
        Approach.SAD: Mood.SAD,
        Approach.FEARFUL: Mood.FEARFUL,
    }


class NeutralState(MoodStateBase):
    mood: ClassVar[Mood] = Mood.NEUTRAL
    enter_line: ClassVar[str] = "Allen takes a deep breath, steadying himself as he assesses his surroundings with a thoughtful gaze."
    express_line: ClassVar[str] = (
        "Allen appears contemplative, responding to your presence with a measured curiosity. "
        "'What's next?' he seems to ponder, neither anxious nor overly joyous."
    )
    artifact_line: ClassVar[str] = "Suddenly, Allen stumbles upon a mysterious lunar artifact, sparking joy and excitement."
    ARTIFACT_ROLL_SIDES: ClassVar[int] = 50
    DIRECT_TRANSITIONS: ClassVar[Dict[Approach, Mood]] = {
        Approach.FRIENDLY: Mood.HAPPY,
        Approach.AGGRESSIVE: Mood.ANGRY,
        Approach.CONFUSED: Mood.CONFUSED,
        Approach.SAD: Mood.SAD,
        Approach.FEARFUL: Mood.FEARFUL,
    }

    def update_mood(self, approach: Approach, context: MoodContext, rng: random.Random) -> StateDecision:
        # 先掷骰子：1/50 的概率捡到神器，无论玩家做什么都直接变开心
        roll = rng.randint(0, self.ARTIFACT_ROLL_SIDES - 1)
        if roll == 0:
            logger.info("🌙 Allen 发现了月球神器，直接转为开心")
            return StateDecision.go(Mood.HAPPY, self.artifact_line)
        return super().update_mood(approach, context, rng)


class AngryState(MoodStateBase):
    """愤怒状态下只有友好能让 Allen 平静下来，但每回合都有 1/10 的概率直接结束游戏"""

    mood: ClassVar[Mood] = Mood.ANGRY
    enter_line: ClassVar[str] = (
        "Allen's demeanor shifts abruptly, his brows furrowing and his jaw setting firm. "
        "A stormy expression takes over, signaling a brewing tempest of anger."
    )
    express_line: ClassVar[str] = (
        "With each word, Allen's voice grows sharper, his frustration palpable. "
        "'Why does it have to be this way?' he demands, struggling to keep his composure."
    )
    raygun_line: ClassVar[str] = "Allen has had enough! He pulls out a ray gun and shoots you. Game over."
    RAYGUN_ROLL_SIDES: ClassVar[int] = 10
    DIRECT_TRANSITIONS: ClassVar[Dict[Approach, Mood]] = {
        Approach.FRIENDLY: Mood.NEUTRAL,
    }

    def update_mood(self, approach: Approach, context: MoodContext, rng: random.Random) -> StateDecision:
        roll = rng.randint(0, self.RAYGUN_ROLL_SIDES - 1)
        if roll == 0:
            logger.warning("💥 Allen 掏出了射线枪，会话结束")
            return StateDecision.terminate(self.raygun_line)
        return super().update_mood(approach, context, rng)


class ConfusedState(MoodStateBase):
    mood: ClassVar[Mood] = Mood.CONFUSED
    enter_line: ClassVar[str] = (
        "Allen pauses, a look of perplexity crossing his features. "
        "He scratches his head, clearly puzzled by the situation at hand."
    )
    express_line: ClassVar[str] = (
        "'I'm not quite sure what to make of this,' Allen admits, "
        "his confusion evident as he tries to piece together the puzzle before him."
    )
    DIRECT_TRANSITIONS: ClassVar[Dict[Approach, Mood]] = {
        Approach.FRIENDLY: Mood.HAPPY,
        Approach.AGGRESSIVE: Mood.ANGRY,
        Approach.SAD: Mood.SAD,
        Approach.FEARFUL: Mood.FEARFUL,
    }


class SadState(MoodStateBase):
    mood: ClassVar[Mood] = Mood.SAD
    enter_line: ClassVar[str] = (
        "A shadow falls over Allen's demeanor, his shoulders slumping slightly as he lets out a deep, wistful sigh. "
        "His eyes, once bright, now carry a hint of sorrow."
    )
    express_line: ClassVar[str] = (
        "Allen's voice is soft, tinged with melancholy. "
        "'Sometimes, I just feel a bit lost,' he confides, looking away to hide the vulnerability in his gaze."
    )
    DIRECT_TRANSITIONS: ClassVar[Dict[Approach, Mood]] = {
        Approach.FEARFUL: Mood.FEARFUL,
        Approach.SAD: Mood.SAD,
        Approach.CONFUSED: Mood.CONFUSED,
        Approach.AGGRESSIVE: Mood.ANGRY,
        Approach.FRIENDLY: Mood.NEUTRAL,
    }

    def update_mood(self, approach: Approach, context: MoodContext, rng: random.Random) -> StateDecision:
        if approach in self.DIRECT_TRANSITIONS:
            return StateDecision.go(self.DIRECT_TRANSITIONS[approach])

        # 只有 neutral 会走到这里。悲伤状态下没有任何东西会增加 mood_level，
        # 所以实际上总是回到 Neutral
        if context.mood_level > 2:
            return StateDecision.go(Mood.HAPPY)
        elif context.mood_level > -2:
            return StateDecision.go(Mood.NEUTRAL)
        return StateDecision.stay()


class FearfulState(MoodStateBase):
    mood: ClassVar[Mood] = Mood.FEARFUL
    enter_line: ClassVar[str] = (
        "Allen's eyes dart around nervously, a visible tension in his posture. "
        "He seems on edge, as if expecting something unsettling at any moment."
    )
    express_line: ClassVar[str] = (
        "Allen's movements are jittery, a clear indication of his unease. "
        "'It's hard to shake this feeling,' he murmurs, glancing around as if expecting something to emerge from the shadows."
    )
    DIRECT_TRANSITIONS: ClassVar[Dict[Approach, Mood]] = {
        Approach.SAD: Mood.SAD,
        Approach.NEUTRAL: Mood.NEUTRAL,
        Approach.CONFUSED: Mood.CONFUSED,
        Approach.AGGRESSIVE: Mood.ANGRY,
    }

    def update_mood(self, approach: Approach, context: MoodContext, rng: random.Random) -> StateDecision:
        match approach:
            case Approach.FRIENDLY:
                # 友好能缓解恐惧，但不会立即转换
                context.mood_level += 2
                logger.debug(f"Allen 的恐惧被缓解，mood_level -> {context.mood_level}")
            case _ if approach in self.DIRECT_TRANSITIONS:
                return StateDecision.go(self.DIRECT_TRANSITIONS[approach])
            case _:
                pass

        if context.mood_level > 0:
            return StateDecision.go(Mood.NEUTRAL)
        return StateDecision.stay()


STATE_MAPPING: Dict[Mood, Type[MoodStateBase]] = {
    Mood.HAPPY: HappyState,
    Mood.NEUTRAL: NeutralState,
    Mood.ANGRY: AngryState,
    Mood.CONFUSED: ConfusedState,
    Mood.SAD: SadState,
    Mood.FEARFUL: FearfulState,
}
