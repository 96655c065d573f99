"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 实例

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request
from taskanalyzer.core.store import TaskStore


def get_task_store(request: Request) -> TaskStore:
    """从 app.state 获取 TaskStore 实例"""
    return request.app.state.task_store
