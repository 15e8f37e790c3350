# lunasim/core/config.py

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional
from pathlib import Path


class LunaSimSettings(BaseSettings):
    seed: Optional[int] = Field(default=None, description="随机数种子，None 表示每次运行都不同 (从 .env 加载 LUNASIM_SEED)")
    log_level: str = Field(default="INFO", description="日志级别 (TRACE/DEBUG/INFO/WARNING/ERROR)")
    log_dir: Path = Field(default=Path("logs"), description="日志文件目录")
    console_log: bool = Field(default=True, description="是否把日志同时输出到 stderr")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"不支持的日志级别: {value}")
        return level

    class Config:
        env_prefix = "LUNASIM_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        case_sensitive = False
