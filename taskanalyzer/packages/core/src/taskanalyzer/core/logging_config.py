"""structlog 配置模块

structlog 事件经由标准库 logging 的单一 handler 输出（默认 stderr），
CLI 的 stdout 只留给命令结果。渲染模式与级别来自 config：
- dev: 控制台可读输出
- json: 每行一个 JSON 对象
"""

import logging
import sys
from typing import TextIO

import structlog

from .config import get_log_format, get_log_level

# 第三方库日志只保留警告以上
_QUIET_LOGGERS = ("aiosqlite", "asyncio")


def setup_logging(default_level: str = "INFO", stream: TextIO | None = None) -> None:
    """初始化 structlog + logging

    可重复调用：每次都会替换 root logger 的 handler。

    Args:
        default_level: TASKANALYZER_LOG_LEVEL 未设置时使用的级别
        stream: 输出流，默认 sys.stderr
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(),
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(get_log_level(default_level))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer() -> structlog.types.Processor:
    if get_log_format() == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=False)
