"""Store Protocol 接口定义

定义 TaskStore 的抽象接口，使用 Python Protocol 实现结构化子类型（duck typing）。
调度层（gateway 路由、CLI）只依赖此接口，不依赖具体的 SQLite 实现。
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from ..models.task import TaskRecord


class TaskStore(Protocol):
    """Task 存储接口"""

    @property
    def db_path(self) -> Path:
        """数据库文件路径"""
        ...

    def current_identity(self) -> str:
        """当前 owner 标识"""
        ...

    async def replace_all(self, records: Sequence[TaskRecord]) -> None:
        """原子替换当前 owner 的全部任务"""
        ...

    async def load_all(self) -> list[TaskRecord]:
        """查询当前 owner 的全部任务，按 timestamp 倒序"""
        ...

    async def delete_one(self, task_id: str) -> None:
        """删除单个任务，不存在时抛出 TaskNotFoundError"""
        ...

    async def delete_many(self, task_ids: Sequence[str]) -> int:
        """批量删除任务，返回实际删除行数"""
        ...

    async def check_connection(self) -> None:
        """连通性检查"""
        ...

    async def close(self) -> None:
        ...
