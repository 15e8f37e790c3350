import sys
from loguru import logger
from pathlib import Path
from typing import Optional


def setup_logging(level: str = "INFO", log_dir: Optional[Path] = None, console: bool = True):
    """
    配置 Loguru 的全局记录器。
    控制台处理器写到 stderr，stdout 留给游戏文本。
    """
    logger.remove()

    # [配置] 默认日志目录在项目根目录下
    log_path = log_dir if log_dir is not None else Path(__file__).parent.parent.parent.parent / "logs"
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / "lunasim.log"

    if console:
        logger.add(
            sys.stderr,
            level=level,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
            colorize=True,
            enqueue=True,
        )

    logger.add(
        log_file,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        enqueue=True,
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )

    logger.info(f"Logger 配置已加载。级别: {level}，日志文件: {log_file}")
