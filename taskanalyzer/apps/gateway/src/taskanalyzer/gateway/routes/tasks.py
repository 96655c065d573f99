"""任务路由

GET    /api/tasks:               加载当前身份的全部任务（timestamp 倒序）
PUT    /api/tasks:               原子替换全部任务
DELETE /api/tasks/{task_id}:     删除单个任务（不存在返回 404）
POST   /api/tasks/batch-delete:  批量删除（不存在的 id 不报错）
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from taskanalyzer.core.models import TaskRecord
from taskanalyzer.core.store import TaskStore

from ..deps import get_task_store

router = APIRouter()


class TaskListResponse(BaseModel):
    """任务列表响应"""

    tasks: list[TaskRecord]


class ReplaceTasksRequest(BaseModel):
    """替换全部任务请求"""

    tasks: list[TaskRecord] = Field(default_factory=list)


class ReplaceTasksResponse(BaseModel):
    saved: int


class BatchDeleteRequest(BaseModel):
    """批量删除请求"""

    task_ids: list[str] = Field(default_factory=list)


class BatchDeleteResponse(BaseModel):
    requested: int
    deleted: int


@router.get("/api/tasks", response_model=TaskListResponse)
async def load_tasks(store: TaskStore = Depends(get_task_store)):
    """加载当前身份的全部任务"""
    tasks = await store.load_all()
    return TaskListResponse(tasks=tasks)


@router.put("/api/tasks", response_model=ReplaceTasksResponse)
async def save_tasks(body: ReplaceTasksRequest, store: TaskStore = Depends(get_task_store)):
    """原子替换当前身份的全部任务；空列表即清空"""
    await store.replace_all(body.tasks)
    return ReplaceTasksResponse(saved=len(body.tasks))


@router.delete("/api/tasks/{task_id}")
async def delete_task(task_id: str, store: TaskStore = Depends(get_task_store)):
    """删除单个任务

    - 删除成功返回 200
    - 当前身份下不存在该任务时 TaskNotFoundError 由全局处理器映射为 404
    """
    await store.delete_one(task_id)
    return {"deleted": task_id}


@router.post("/api/tasks/batch-delete", response_model=BatchDeleteResponse)
async def delete_tasks(body: BatchDeleteRequest, store: TaskStore = Depends(get_task_store)):
    """批量删除任务，返回实际删除数量"""
    deleted = await store.delete_many(body.task_ids)
    return BatchDeleteResponse(requested=len(body.task_ids), deleted=deleted)
