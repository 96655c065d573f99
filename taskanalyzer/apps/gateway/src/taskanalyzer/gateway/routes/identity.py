"""身份路由 -- GET /api/identity 返回当前匿名身份（展示/诊断用）"""

from fastapi import APIRouter, Depends
from taskanalyzer.core.store import TaskStore

from ..deps import get_task_store

router = APIRouter()


@router.get("/api/identity")
async def current_identity(store: TaskStore = Depends(get_task_store)):
    return {"user_id": store.current_identity()}
