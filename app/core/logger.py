# app/core/logger.py
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from app.config.config_settings.config_schema import LoggingConfig

# 获取运行环境
ENV = os.getenv("ENV", "development").lower()

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def _add_console_sink(level: str) -> None:
    logger.add(
        sys.stderr,
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=False,
        format=CONSOLE_FORMAT,
    )


# 清除默认 handler，先挂一个控制台输出，配置加载后由 setup_logging 重新配置
logger.remove()
_add_console_sink("DEBUG" if ENV == "development" else "INFO")


def setup_logging(config: "LoggingConfig") -> None:
    """根据 LoggingConfig 重新配置所有 sink。"""
    logger.remove()
    _add_console_sink(config.level.upper())

    if not config.enable_file:
        return

    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    # 普通文本日志输出到文件
    logger.add(
        log_dir / "app.log",
        level="DEBUG",
        rotation=config.rotation,
        retention=config.retention,
        encoding="utf-8",
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )

    # JSON 结构化日志输出，只记录警告及以上 (孤儿对象/悬挂记录等对账线索都在这里)
    logger.add(
        log_dir / "app.json",
        level="WARNING",
        rotation=config.rotation,
        retention=config.retention,
        serialize=True,
        encoding="utf-8",
        enqueue=True,
    )
    logger.debug(f"Log system initialized in {ENV} mode, file logs at {log_dir}.")


def get_logger(name: str = None):
    """仿 logging.getLogger() 实现的 loguru logger 工厂方法"""
    if name:
        return logger.bind(module=name)
    return logger
