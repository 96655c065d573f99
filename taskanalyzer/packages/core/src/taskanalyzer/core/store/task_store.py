"""TaskStore SQLite 实现

所有读写都隐式限定在当前匿名身份（owner）下，
任何操作都不会读取或修改其他 owner 的行。

Store 持有一个共享的 aiosqlite 连接（独立工作线程），首次操作时惰性打开；
进程内所有操作由 asyncio.Lock 串行化，事务之间不会交错，
读操作也不会看到其他操作尚未提交的写入。
"""

import asyncio
import time
from collections.abc import Sequence
from pathlib import Path

import aiosqlite
import structlog

from ..exceptions import StoreQueryError, StoreSetupError, TaskNotFoundError
from ..identity import IdentityProvider
from ..models.task import TaskRecord
from .sqlite_init import init_db
from .transaction import write_transaction

log = structlog.get_logger()

_SELECT_COLUMNS = (
    "id, description, creative_idea, estimated_time, priority, "
    "deadline, completed, timestamp, owner"
)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(
        self,
        db_path: str | Path,
        identity: IdentityProvider,
        busy_timeout_ms: int = 5000,
    ) -> None:
        self._db_path = Path(db_path)
        self._identity = identity
        self._busy_timeout_ms = busy_timeout_ms
        self._conn: aiosqlite.Connection | None = None
        self._owner_id: str | None = None
        self._lock = asyncio.Lock()
        self._last_timestamp = 0

    @property
    def db_path(self) -> Path:
        return self._db_path

    def current_identity(self) -> str:
        """当前 owner 标识"""
        return self._identity.current()

    async def open(self) -> None:
        """落定当前身份，打开连接并初始化 schema（幂等）

        Raises:
            StoreSetupError: 目录、数据库文件或 schema 无法创建
        """
        await self._owner()
        async with self._lock:
            await self._connection()

    async def close(self) -> None:
        async with self._lock:
            if self._conn is not None:
                await self._conn.close()
                self._conn = None
                log.info("task_store_closed", db_path=str(self._db_path))

    async def check_connection(self) -> None:
        """连通性检查（readiness 探针）"""
        async with self._lock:
            conn = await self._connection()
            cursor = await conn.execute("SELECT 1")
            await cursor.fetchone()

    async def replace_all(self, records: Sequence[TaskRecord]) -> None:
        """原子替换当前 owner 的全部任务

        在同一事务内删除 owner 的所有旧行，再插入全部新记录。
        整批记录使用同一个 timestamp。任何一行插入失败都会回滚整个事务。

        Raises:
            StoreTransactionError: 事务失败，已持久化的任务集保持不变
        """
        owner = await self._owner()
        async with self._lock:
            conn = await self._connection()
            timestamp = self._next_timestamp()
            async with write_transaction(conn, "replace_all"):
                await conn.execute("DELETE FROM tasks WHERE owner = ?", (owner,))
                for record in records:
                    await conn.execute(
                        f"""
                        INSERT INTO tasks ({_SELECT_COLUMNS})
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            record.id,
                            record.description,
                            record.creative_idea,
                            record.estimated_time,
                            record.priority,
                            record.deadline,
                            1 if record.completed else 0,
                            timestamp,
                            owner,
                        ),
                    )
        log.info("tasks_saved", count=len(records), timestamp=timestamp)

    async def load_all(self) -> list[TaskRecord]:
        """查询当前 owner 的全部任务，按 timestamp 倒序（同批次保持插入顺序）

        Raises:
            StoreQueryError: 读取失败
        """
        owner = await self._owner()
        async with self._lock:
            conn = await self._connection()
            try:
                cursor = await conn.execute(
                    f"""
                    SELECT {_SELECT_COLUMNS} FROM tasks
                    WHERE owner = ?
                    ORDER BY timestamp DESC, rowid ASC
                    """,
                    (owner,),
                )
                rows = await cursor.fetchall()
            except aiosqlite.Error as e:
                log.error("tasks_load_failed", error=str(e))
                raise StoreQueryError(f"查询任务失败: {e}") from e

        tasks = [self._row_to_record(row) for row in rows]
        log.info("tasks_loaded", count=len(tasks))
        return tasks

    async def delete_one(self, task_id: str) -> None:
        """删除当前 owner 下的单个任务

        Raises:
            TaskNotFoundError: 当前 owner 下没有该任务
            StoreTransactionError: 事务失败
        """
        owner = await self._owner()
        async with self._lock:
            conn = await self._connection()
            async with write_transaction(conn, "delete_one"):
                cursor = await conn.execute(
                    "DELETE FROM tasks WHERE owner = ? AND id = ?",
                    (owner, task_id),
                )
                deleted = cursor.rowcount

        if deleted == 0:
            log.info("task_not_found", task_id=task_id)
            raise TaskNotFoundError(task_id)
        log.info("task_deleted", task_id=task_id)

    async def delete_many(self, task_ids: Sequence[str]) -> int:
        """在一个事务内批量删除当前 owner 下的任务

        不存在的 id 不视为错误。

        Returns:
            实际删除的行数

        Raises:
            StoreTransactionError: 事务失败，整批删除均未生效
        """
        owner = await self._owner()
        deleted = 0
        async with self._lock:
            conn = await self._connection()
            async with write_transaction(conn, "delete_many"):
                for task_id in task_ids:
                    cursor = await conn.execute(
                        "DELETE FROM tasks WHERE owner = ? AND id = ?",
                        (owner, task_id),
                    )
                    deleted += cursor.rowcount

        log.info("tasks_deleted", deleted=deleted, requested=len(task_ids))
        return deleted

    async def _owner(self) -> str:
        """当前 owner；首次落定身份涉及文件读写，在工作线程中执行"""
        if self._owner_id is None:
            self._owner_id = await asyncio.to_thread(self._identity.current)
        return self._owner_id

    async def _connection(self) -> aiosqlite.Connection:
        """获取共享连接，首次调用时创建目录、数据库文件和 schema

        调用方必须持有 self._lock。
        """
        if self._conn is not None:
            return self._conn

        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log.error("data_dir_create_failed", path=str(self._db_path.parent), error=str(e))
            raise StoreSetupError(f"无法创建应用数据目录: {e}") from e

        conn: aiosqlite.Connection | None = None
        try:
            # isolation_level=None：事务由 write_transaction 显式管理
            conn = await aiosqlite.connect(str(self._db_path), isolation_level=None)
            conn.row_factory = aiosqlite.Row
            await init_db(conn, self._busy_timeout_ms)
        except aiosqlite.Error as e:
            if conn is not None:
                await conn.close()
            log.error("database_init_failed", db_path=str(self._db_path), error=str(e))
            raise StoreSetupError(f"数据库初始化失败: {e}") from e

        log.info("task_store_opened", db_path=str(self._db_path))
        self._conn = conn
        return conn

    def _next_timestamp(self) -> int:
        """本批次的写入时间（epoch 毫秒），同一 Store 内严格递增"""
        now = int(time.time() * 1000)
        self._last_timestamp = max(now, self._last_timestamp + 1)
        return self._last_timestamp

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> TaskRecord:
        """将数据库行转换为 TaskRecord 模型"""
        return TaskRecord(
            id=row["id"],
            description=row["description"],
            creative_idea=row["creative_idea"],
            estimated_time=row["estimated_time"],
            priority=row["priority"],
            deadline=row["deadline"],
            completed=row["completed"] == 1,
            timestamp=row["timestamp"],
            owner=row["owner"],
        )
