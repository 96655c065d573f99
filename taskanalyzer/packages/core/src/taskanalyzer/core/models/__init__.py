"""Task Analyzer Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .task import DecompositionResult, TaskContent, TaskDraft, TaskRecord

__all__ = [
    "TaskContent",
    "TaskRecord",
    "TaskDraft",
    "DecompositionResult",
]
