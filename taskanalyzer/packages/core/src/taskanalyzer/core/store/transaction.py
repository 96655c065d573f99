"""写事务封装

在同一 SQLite 事务内原子提交一组写语句：要么全部生效，要么全部回滚。
使用 BEGIN IMMEDIATE 在事务开始时即获取写锁，
其他连接（包括其他进程）上的写事务由 SQLite 串行化。
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite
import structlog

from ..exceptions import StoreTransactionError

log = structlog.get_logger()


@asynccontextmanager
async def write_transaction(
    conn: aiosqlite.Connection,
    operation: str,
) -> AsyncIterator[aiosqlite.Connection]:
    """在 BEGIN IMMEDIATE ... COMMIT 中执行写操作

    Args:
        conn: 数据库连接（autocommit 模式，事务由此处显式管理）
        operation: 操作名，用于日志和错误信息

    Raises:
        StoreTransactionError: begin / 语句 / commit 失败，事务已回滚
    """
    try:
        await conn.execute("BEGIN IMMEDIATE")
    except aiosqlite.Error as e:
        log.error("transaction_begin_failed", operation=operation, error=str(e))
        raise StoreTransactionError(f"{operation}: 创建事务失败: {e}") from e

    try:
        yield conn
        await conn.commit()
    except aiosqlite.Error as e:
        await _rollback(conn, operation)
        log.error("transaction_failed", operation=operation, error=str(e))
        raise StoreTransactionError(f"{operation}: 事务执行失败: {e}") from e
    except BaseException:
        await _rollback(conn, operation)
        raise


async def _rollback(conn: aiosqlite.Connection, operation: str) -> None:
    try:
        await conn.rollback()
    except aiosqlite.Error as e:
        # 回滚失败时连接上不会残留已提交的数据，保留原始异常
        log.error("transaction_rollback_failed", operation=operation, error=str(e))
