"""Task Domain Model

TaskDraft 是分解服务输出的子任务（尚无 id / completed），
TaskRecord 是持久化的任务行：调用方分配 id 和 completed，
timestamp 与 owner 由 Store 写入时盖章。
两者共享 TaskContent 中的任务内容字段。
"""

from pydantic import AliasChoices, BaseModel, Field, field_validator
from ulid import ULID


class TaskContent(BaseModel):
    """任务内容字段（分解结果与持久化记录共用）"""

    description: str = Field(description="任务摘要")
    creative_idea: str = Field(description="执行思路")
    estimated_time: str = Field(
        validation_alias=AliasChoices("estimated_time", "estimatedTime"),
        description="预计耗时（自由文本）",
    )
    priority: str = Field(description="优先级（自由文本）")
    deadline: str | None = Field(default=None, description="ISO-8601 截止时间")

    @field_validator("deadline", mode="before")
    @classmethod
    def _blank_deadline_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TaskDraft(TaskContent):
    """分解服务返回的单个子任务"""

    def to_record(self, task_id: str | None = None) -> "TaskRecord":
        """分配 id 和 completed=False，得到可写入 Store 的记录"""
        return TaskRecord(
            id=task_id or str(ULID()),
            completed=False,
            **self.model_dump(),
        )


class DecompositionResult(BaseModel):
    """分解服务的整体响应"""

    tasks: list[TaskDraft] = Field(default_factory=list)

    def to_records(self) -> list["TaskRecord"]:
        return [draft.to_record() for draft in self.tasks]


class TaskRecord(TaskContent):
    """持久化任务记录

    timestamp / owner 只由 Store 赋值，调用方传入的值会被覆盖。
    """

    id: str = Field(min_length=1, description="调用方分配的唯一标识")
    completed: bool = Field(default=False, description="是否已完成")
    timestamp: int | None = Field(default=None, description="写入时间（epoch 毫秒）")
    owner: str | None = Field(default=None, description="所属匿名身份")
