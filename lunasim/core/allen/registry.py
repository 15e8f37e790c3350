# lunasim/core/allen/registry.py

from loguru import logger
from typing import Dict, List

from .state_models import Mood
from .states import MoodStateBase, STATE_MAPPING


class UnregisteredStateError(KeyError):
    """请求转换到一个没有注册的情绪状态"""


class StateRegistry:
    """情绪 -> 状态实例 的映射，独占所有状态实例的所有权"""

    def __init__(self):
        self._states: Dict[Mood, MoodStateBase] = {}
        logger.info("StateRegistry 模块已初始化。")

    def register_state(self, state: MoodStateBase):
        if state.mood in self._states:
            logger.error(f"尝试注册已存在的情绪状态: {state.mood.value}")
            raise ValueError(f"情绪状态 {state.mood.value} 已存在。")

        self._states[state.mood] = state
        logger.debug(f"情绪状态 '{state.mood.value}' ({state.__class__.__name__}) 已在 Registry 注册。")

    def get_state(self, mood: Mood) -> MoodStateBase:
        state = self._states.get(mood)
        if state is None:
            logger.error(f"尝试获取未注册的情绪状态: {mood}")
            raise UnregisteredStateError(mood)
        return state

    def get_all_states(self) -> List[MoodStateBase]:
        return list(self._states.values())

    def __contains__(self, mood: object) -> bool:
        return mood in self._states

    def __len__(self) -> int:
        return len(self._states)

    def release_all(self) -> int:
        """释放所有状态实例并清空注册表，返回本次释放的数量"""
        if not self._states:
            logger.warning("StateRegistry 已为空，没有可释放的状态。")
            return 0

        released = 0
        for state in self._states.values():
            state.release()
            released += 1
        self._states.clear()
        logger.info(f"StateRegistry 已释放 {released} 个情绪状态。")
        return released


def build_default_registry() -> StateRegistry:
    """注册全部六个情绪状态"""
    registry = StateRegistry()
    for state_class in STATE_MAPPING.values():
        registry.register_state(state_class())
    return registry
