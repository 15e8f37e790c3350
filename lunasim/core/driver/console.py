# lunasim/core/driver/console.py

import random
from enum import Enum
from loguru import logger
from typing import Callable

from ..allen.state_manager import StateManager
from . import prompts


class SessionEnd(str, Enum):
    """会话结束的原因"""

    LEFT = "left"
    TERMINATED = "terminated"
    INPUT_CLOSED = "input_closed"


class ConsoleSession:
    """
    控制台交互循环：显示菜单、读取选择、把接近方式交给状态机并输出叙述。
    """

    def __init__(
        self,
        manager: StateManager,
        rng: random.Random,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.manager = manager
        self._rng = rng
        self._input = input_fn
        self._output = output_fn
        self.turns: int = 0

    def run(self) -> SessionEnd:
        """运行到玩家离开、Allen 结束会话或输入关闭为止。结束时总会 teardown。"""
        try:
            if self.manager.opening_narration:
                self._output(self.manager.opening_narration)
            return self._loop()
        finally:
            self.manager.teardown()
            logger.info(f"会话结束，共进行了 {self.turns} 回合。")

    def _loop(self) -> SessionEnd:
        while True:
            self._output(prompts.DIVIDER)
            self._output(prompts.INTRO_LINE)
            for line in prompts.build_menu(self._rng):
                self._output(line)

            try:
                raw = self._input(prompts.CHOICE_PROMPT)
            except (EOFError, KeyboardInterrupt):
                logger.info("输入已关闭，结束会话。")
                return SessionEnd.INPUT_CLOSED

            self._output("")
            self._output(prompts.DIVIDER)

            choice = prompts.parse_choice(raw)
            if choice is None:
                logger.debug(f"无效的菜单选择: {raw!r}")
                self._output(prompts.INVALID_CHOICE_LINE)
                continue

            if choice == prompts.LEAVE_CHOICE:
                self._output(prompts.LEAVE_LINE)
                return SessionEnd.LEFT

            self.turns += 1
            result = self.manager.handle_approach(prompts.CHOICE_TO_APPROACH[choice])
            for line in result.narration:
                self._output(line)

            if not result.continues:
                return SessionEnd.TERMINATED

            self._output(self.manager.express_current_mood())
