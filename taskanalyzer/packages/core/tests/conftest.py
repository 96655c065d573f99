"""packages/core 测试配置 -- 核心层 fixture"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from taskanalyzer.core.identity import IdentityProvider
from taskanalyzer.core.models import TaskRecord
from taskanalyzer.core.store import SqliteTaskStore, create_task_store


@pytest_asyncio.fixture
async def core_db_path(tmp_path: Path) -> Path:
    """核心层临时数据库路径"""
    return tmp_path / "data" / "tasks.db"


@pytest_asyncio.fixture
async def task_store(core_db_path: Path) -> AsyncGenerator[SqliteTaskStore, None]:
    """核心层已初始化的 TaskStore（进程级身份）"""
    store = await create_task_store(core_db_path, IdentityProvider())
    yield store
    await store.close()


@pytest.fixture
def make_record() -> Callable[..., TaskRecord]:
    """构造测试用 TaskRecord"""

    def _make(task_id: str, **overrides) -> TaskRecord:
        data = {
            "id": task_id,
            "description": f"任务 {task_id}",
            "creative_idea": "先列提纲",
            "estimated_time": "30分钟",
            "priority": "中等",
            "deadline": None,
            "completed": False,
        }
        data.update(overrides)
        return TaskRecord(**data)

    return _make
