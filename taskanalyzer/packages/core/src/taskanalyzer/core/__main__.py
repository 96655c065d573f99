"""CLI 入口模块 -- python -m taskanalyzer.core <command>

支持的命令：
  whoami                  显示当前匿名身份
  list-tasks              列出当前身份的全部任务
  import-tasks <file>     用分解结果 JSON 替换全部任务
  delete-task <id>        删除单个任务
  delete-tasks <id>...    批量删除任务
"""

import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .config import get_busy_timeout_ms, get_db_path, get_identity_mode, get_identity_path
from .exceptions import TaskNotFoundError, TaskStoreError
from .identity import IdentityProvider
from .logging_config import setup_logging
from .models import DecompositionResult, TaskRecord

if TYPE_CHECKING:
    from .store import TaskStore

_USAGE = """用法: python -m taskanalyzer.core <command>
命令:
  whoami                  显示当前匿名身份
  list-tasks              列出当前身份的全部任务
  import-tasks <file>     用分解结果 JSON 替换全部任务
  delete-task <id>        删除单个任务
  delete-tasks <id>...    批量删除任务"""


def build_identity() -> IdentityProvider:
    """根据配置构造身份提供者"""
    if get_identity_mode() == "persistent":
        return IdentityProvider(get_identity_path())
    return IdentityProvider()


def main(argv: list[str] | None = None) -> None:
    """CLI 主入口"""
    args = sys.argv[1:] if argv is None else argv
    # 日志走 stderr，stdout 只保留命令输出
    setup_logging(default_level="WARNING")

    if not args:
        print(_USAGE)
        sys.exit(1)

    command, rest = args[0], args[1:]

    if command == "whoami":
        print(build_identity().current())
        return

    if command == "list-tasks":
        handler = list_tasks()
    elif command == "import-tasks" and len(rest) == 1:
        handler = import_tasks(read_decomposition(Path(rest[0])))
    elif command == "delete-task" and len(rest) == 1:
        handler = delete_task(rest[0])
    elif command == "delete-tasks" and rest:
        handler = delete_tasks(rest)
    else:
        print(f"未知命令或参数错误: {' '.join(args)}")
        print(_USAGE)
        sys.exit(1)

    try:
        asyncio.run(handler)
    except TaskNotFoundError as e:
        print(f"未找到任务: {e.task_id}")
        sys.exit(2)
    except TaskStoreError as e:
        print(f"存储错误 [{e.code}]: {e.message}")
        sys.exit(1)


async def _open_store() -> "TaskStore":
    from .store import create_task_store

    return await create_task_store(
        get_db_path(),
        build_identity(),
        busy_timeout_ms=get_busy_timeout_ms(),
    )


async def list_tasks() -> None:
    """列出当前身份的全部任务"""
    store = await _open_store()
    try:
        tasks = await store.load_all()
    finally:
        await store.close()

    if not tasks:
        print("没有任务")
        return
    for task in tasks:
        mark = "x" if task.completed else " "
        deadline = task.deadline or "-"
        print(f"[{mark}] {task.id}  {task.priority:<6} {deadline:<25} {task.description}")


def read_decomposition(path: Path) -> list[TaskRecord]:
    """读取分解结果 JSON（{"tasks": [...]}），为每个子任务分配 id"""
    try:
        result = DecompositionResult.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        print(f"无法读取分解结果: {e}")
        sys.exit(1)
    return result.to_records()


async def import_tasks(records: list[TaskRecord]) -> None:
    """用给定记录替换全部任务"""
    store = await _open_store()
    try:
        await store.replace_all(records)
    finally:
        await store.close()
    print(f"已保存 {len(records)} 个任务")


async def delete_task(task_id: str) -> None:
    """删除单个任务"""
    store = await _open_store()
    try:
        await store.delete_one(task_id)
    finally:
        await store.close()
    print(f"已删除任务: {task_id}")


async def delete_tasks(task_ids: list[str]) -> None:
    """批量删除任务"""
    store = await _open_store()
    try:
        deleted = await store.delete_many(task_ids)
    finally:
        await store.close()
    print(f"成功删除 {deleted} 个任务 (共尝试 {len(task_ids)})")


if __name__ == "__main__":
    main()
