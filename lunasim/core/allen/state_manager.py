# lunasim/core/allen/state_manager.py

import random
from loguru import logger
from typing import Any, Callable, Dict, List, Optional

from .registry import StateRegistry, build_default_registry
from .state_models import Approach, Mood, MoodContext, TurnOutcome, TurnResult
from .states import MoodStateBase

# --- 类型定义 ---
EventCallback = Callable[..., Any]
ListenerDict = Dict[str, List[EventCallback]]


class StateMachineError(RuntimeError):
    """状态机尚未启动或已经 teardown"""


class StateManager:
    """
    Allen 的情绪状态机。
    持有注册表、当前状态和共享的 MoodContext，负责执行状态转换。
    """

    def __init__(
        self,
        registry: StateRegistry,
        rng: Optional[random.Random] = None,
        context: Optional[MoodContext] = None,
    ):
        self._registry = registry
        self._rng = rng or random.Random()
        self._context = context or MoodContext()
        self._current: Optional[MoodStateBase] = None
        self._opening_narration: Optional[str] = None
        self._is_torn_down: bool = False

        self._listeners: ListenerDict = {
            "on_transition": [],
            "on_session_terminated": [],
            "on_teardown": [],
        }
        logger.info(f"StateManager 已初始化，共 {len(registry)} 个情绪状态。")

    # --- 1. 事件系统 (发布-订阅) ---

    def subscribe(self, event_name: str, callback: EventCallback):
        """
        【公开】订阅状态机事件。
        """
        if event_name in self._listeners:
            self._listeners[event_name].append(callback)
            callback_name = getattr(callback, "name", repr(callback))
            logger.debug(f"订阅成功: 回调 '{callback_name}' 订阅了 '{event_name}'")
        else:
            logger.warning(f"尝试订阅一个不存在的事件: '{event_name}'")

    def _publish(self, event_name: str, *args, **kwargs):
        for callback in self._listeners.get(event_name, []):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                callback_name = getattr(callback, "name", repr(callback))
                logger.opt(exception=True).error(f"在执行 '{event_name}' 的回调 '{callback_name}' 时出错: {e}")

    # --- 2. 状态查询 ---

    @property
    def context(self) -> MoodContext:
        return self._context

    @property
    def current_state(self) -> Optional[MoodStateBase]:
        return self._current

    @property
    def current_mood(self) -> Optional[Mood]:
        return self._current.mood if self._current else None

    @property
    def opening_narration(self) -> Optional[str]:
        return self._opening_narration

    @property
    def is_torn_down(self) -> bool:
        return self._is_torn_down

    def _require_running(self) -> MoodStateBase:
        if self._is_torn_down:
            raise StateMachineError("状态机已经 teardown，不能再使用。")
        if self._current is None:
            raise StateMachineError("状态机尚未启动，请先调用 start()。")
        return self._current

    # --- 3. 状态转换 ---

    def start(self, initial: Mood = Mood.NEUTRAL) -> str:
        """【公开】进入初始状态，返回进入叙述。"""
        if self._is_torn_down:
            raise StateMachineError("状态机已经 teardown，不能再启动。")
        self._opening_narration = self.transition(initial)
        logger.info(f"状态机已启动，初始情绪: {initial.value}")
        return self._opening_narration

    def transition(self, target: Mood) -> str:
        """
        【公开】转换到目标状态：先对旧状态调用 exit，再切换，最后对新状态调用 enter。
        目标未注册时抛出 UnregisteredStateError，当前状态保持不变。
        """
        if self._is_torn_down:
            raise StateMachineError("状态机已经 teardown，不能再转换状态。")

        new_state = self._registry.get_state(target)
        old_state = self._current
        if old_state is not None:
            old_state.exit()

        self._current = new_state
        enter_line = new_state.enter()

        old_mood = old_state.mood if old_state else None
        logger.debug(f"状态转换: {old_mood.value if old_mood else 'None'} -> {target.value}")
        self._publish("on_transition", old_mood, target)
        return enter_line

    def handle_approach(self, approach: Approach) -> TurnResult:
        """【公开】把玩家本回合的接近方式交给当前状态处理。"""
        state = self._require_running()
        logger.debug(f"当前情绪 '{state.mood.value}' 收到接近方式 '{approach.value}' (mood_level={self._context.mood_level})")

        decision = state.update_mood(approach, self._context, self._rng)
        narration = list(decision.narration)

        if decision.terminate_session:
            logger.info(f"会话在情绪 '{state.mood.value}' 下被终止")
            self._publish("on_session_terminated", state.mood)
            return TurnResult(outcome=TurnOutcome.TERMINATES_SESSION, mood=state.mood, narration=narration)

        if decision.target is not None:
            narration.append(self.transition(decision.target))

        return TurnResult(outcome=TurnOutcome.CONTINUES, mood=self._current.mood, narration=narration)

    def express_current_mood(self) -> str:
        """【公开】返回当前情绪的表现文本，不修改任何状态。"""
        return self._require_running().express_mood()

    # --- 4. 清理 ---

    def teardown(self) -> int:
        """【公开】释放所有状态实例。重复调用返回 0。"""
        if self._is_torn_down:
            logger.warning("StateManager 已经 teardown 过，跳过。")
            return 0

        released = self._registry.release_all()
        self._current = None
        self._is_torn_down = True
        self._publish("on_teardown", released)
        return released


def initialize(rng: Optional[random.Random] = None) -> StateManager:
    """创建注册了全部六个状态的状态机，并以 Neutral 开始"""
    manager = StateManager(build_default_registry(), rng=rng)
    manager.start(Mood.NEUTRAL)
    return manager
