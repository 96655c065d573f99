"""Task Analyzer Core Store -- SQLite 持久化实现

提供工厂函数在启动时创建并打开 Store 实例。
"""

from pathlib import Path

from ..identity import IdentityProvider
from .protocols import TaskStore
from .sqlite_init import init_db, verify_wal_mode
from .task_store import SqliteTaskStore
from .transaction import write_transaction


async def create_task_store(
    db_path: str | Path,
    identity: IdentityProvider,
    busy_timeout_ms: int = 5000,
) -> SqliteTaskStore:
    """创建并打开 TaskStore

    Args:
        db_path: SQLite 数据库文件路径（所在目录不存在时自动创建）
        identity: 匿名身份提供者
        busy_timeout_ms: SQLite busy_timeout

    Returns:
        已完成 schema 初始化的 SqliteTaskStore 实例

    Raises:
        StoreSetupError: 目录、数据库文件或 schema 无法创建
    """
    store = SqliteTaskStore(db_path, identity, busy_timeout_ms=busy_timeout_ms)
    await store.open()
    return store


__all__ = [
    "TaskStore",
    "SqliteTaskStore",
    "create_task_store",
    "init_db",
    "verify_wal_mode",
    "write_transaction",
]
