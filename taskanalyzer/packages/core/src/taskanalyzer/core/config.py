"""配置常量模块 -- 可通过环境变量覆盖

包含数据目录、数据库路径、身份文件路径、SQLite busy_timeout、日志格式与级别等可配置项。
"""

import logging
import os
import sys
from pathlib import Path
from typing import Literal

import structlog

log = structlog.get_logger()

APP_DIR_NAME = "task-analyzer"
DB_FILE_NAME = "tasks.db"
IDENTITY_FILE_NAME = "identity"

IdentityMode = Literal["persistent", "process"]
LogFormat = Literal["dev", "json"]

_DEFAULT_BUSY_TIMEOUT_MS = 5000


def _platform_data_home() -> Path:
    """获取当前平台的应用私有数据根目录"""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".local" / "share"


def get_data_dir() -> Path:
    """获取应用数据目录"""
    if val := os.environ.get("TASKANALYZER_DATA_DIR"):
        return Path(val)
    return _platform_data_home() / APP_DIR_NAME


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKANALYZER_DB_PATH",
        str(get_data_dir() / DB_FILE_NAME),
    )


def get_identity_path() -> Path:
    """获取匿名身份持久化文件路径"""
    return get_data_dir() / IDENTITY_FILE_NAME


def get_identity_mode() -> IdentityMode:
    """获取身份模式

    - "persistent" (默认): 身份写入数据目录，重启后保持不变
    - "process": 每次进程启动生成新身份
    """
    val = os.environ.get("TASKANALYZER_IDENTITY_MODE", "persistent").lower()
    if val not in ("persistent", "process"):
        log.warning(
            "invalid_identity_mode_config",
            env_var="TASKANALYZER_IDENTITY_MODE",
            value=val,
            fallback="persistent",
        )
        return "persistent"
    return val  # type: ignore[return-value]


def get_busy_timeout_ms() -> int:
    """获取 SQLite busy_timeout（毫秒）"""
    val = os.environ.get("TASKANALYZER_BUSY_TIMEOUT_MS")
    if not val:
        return _DEFAULT_BUSY_TIMEOUT_MS
    try:
        timeout = int(val)
    except ValueError:
        timeout = -1
    if timeout < 0:
        log.warning(
            "invalid_busy_timeout_config",
            env_var="TASKANALYZER_BUSY_TIMEOUT_MS",
            value=val,
            fallback=_DEFAULT_BUSY_TIMEOUT_MS,
        )
        return _DEFAULT_BUSY_TIMEOUT_MS
    return timeout


def get_log_format() -> LogFormat:
    """获取日志渲染模式：dev（默认，可读输出）或 json"""
    val = os.environ.get("TASKANALYZER_LOG_FORMAT", "dev").lower()
    if val not in ("dev", "json"):
        log.warning(
            "invalid_log_format_config",
            env_var="TASKANALYZER_LOG_FORMAT",
            value=val,
            fallback="dev",
        )
        return "dev"
    return val  # type: ignore[return-value]


def get_log_level(default: str = "INFO") -> int:
    """获取日志级别（logging 数值级别）"""
    val = os.environ.get("TASKANALYZER_LOG_LEVEL", default).upper()
    level = logging.getLevelName(val)
    if not isinstance(level, int):
        log.warning(
            "invalid_log_level_config",
            env_var="TASKANALYZER_LOG_LEVEL",
            value=val,
            fallback=default,
        )
        return logging.getLevelName(default.upper())
    return level
