"""Allen 月球情绪模拟的命令行入口。"""

import argparse
import random
from typing import List, Optional

from loguru import logger

from lunasim.core.allen.state_manager import initialize
from lunasim.core.config import LunaSimSettings
from lunasim.core.driver.console import ConsoleSession, SessionEnd
from lunasim.core.engine.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LunaSim: meet Allen on an alien moon")
    parser.add_argument("--seed", type=int, default=None, help="随机数种子 (覆盖 LUNASIM_SEED)")
    parser.add_argument("--log-level", type=str, default=None, help="日志级别 (覆盖 LUNASIM_LOG_LEVEL)")
    parser.add_argument("--no-console-log", action="store_true", help="不把日志输出到 stderr")
    return parser


def run(argv: Optional[List[str]] = None) -> SessionEnd:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.no_console_log:
        overrides["console_log"] = False
    settings = LunaSimSettings(**overrides)

    setup_logging(level=settings.log_level, log_dir=settings.log_dir, console=settings.console_log)
    logger.debug(f"配置: {settings.model_dump()}")

    rng = random.Random(settings.seed)
    manager = initialize(rng=rng)
    return ConsoleSession(manager, rng).run()


def main() -> None:
    """Entry point for the command-line interface."""
    run()


if __name__ == "__main__":
    main()
