"""SQLite 数据库初始化

PRAGMA 配置 + tasks 表 DDL + 索引创建。
所有语句均为 IF NOT EXISTS，重复初始化不会报错，也不会丢失或重复已有数据。
"""

import aiosqlite

# tasks 表 DDL：主键为 (owner, id)，id 只在 owner 作用域内唯一
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id              TEXT NOT NULL,
    description     TEXT NOT NULL,
    creative_idea   TEXT NOT NULL,
    estimated_time  TEXT NOT NULL,
    priority        TEXT NOT NULL,
    deadline        TEXT,
    completed       INTEGER NOT NULL DEFAULT 0,
    timestamp       INTEGER NOT NULL,
    owner           TEXT NOT NULL,

    PRIMARY KEY (owner, id)
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_owner ON tasks(owner);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_timestamp ON tasks(timestamp);",
]


async def init_db(conn: aiosqlite.Connection, busy_timeout_ms: int = 5000) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
        busy_timeout_ms: 其他连接持有写锁时的等待时间
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)};")

    # 创建表
    await conn.execute(_TASKS_DDL)

    # 创建索引
    for idx_sql in _TASKS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
