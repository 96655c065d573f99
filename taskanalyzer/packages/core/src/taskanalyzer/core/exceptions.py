"""Task Store 异常体系

所有存储层错误都以异常形式抛给直接调用方，携带可读的错误原因。
不做自动重试，由调用方决定是否重试。
"""


class TaskStoreError(Exception):
    """Task Store 基础异常"""

    code = "STORE_ERROR"

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 调用方是否可以通过重试恢复
        """
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable


class StoreSetupError(TaskStoreError):
    """数据目录 / 数据库文件 / schema 无法创建或打开

    对进程使用 Store 的能力是致命的，立即上抛，不重试。
    """

    code = "SETUP_FAILED"

    def __init__(self, message: str) -> None:
        super().__init__(message, recoverable=False)


class StoreTransactionError(TaskStoreError):
    """写操作中 begin / 语句 / commit 失败

    整个操作已回滚，不会出现部分生效的状态。
    """

    code = "TRANSACTION_FAILED"


class TaskNotFoundError(TaskStoreError):
    """单条删除时目标任务在当前 owner 下不存在"""

    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist")
        self.task_id = task_id


class StoreQueryError(TaskStoreError):
    """读路径（load_all）存储错误"""

    code = "QUERY_FAILED"
