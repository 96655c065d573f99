"""FastAPI 应用主文件

app 创建 + lifespan 管理：启动时构造唯一的 TaskStore 并挂到 app.state，
关闭时释放数据库连接；路由通过 deps.get_task_store 取得 Store。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse
from taskanalyzer.core.config import (
    get_busy_timeout_ms,
    get_db_path,
    get_identity_mode,
    get_identity_path,
)
from taskanalyzer.core.exceptions import TaskStoreError
from taskanalyzer.core.identity import IdentityProvider
from taskanalyzer.core.logging_config import setup_logging
from taskanalyzer.core.store import create_task_store

from .middleware.logging_mw import LoggingMiddleware
from .routes import health, identity, tasks

log = structlog.get_logger()

# 存储错误码 -> HTTP 状态码
_ERROR_STATUS = {
    "TASK_NOT_FOUND": 404,
    "SETUP_FAILED": 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 Store，关闭时清理连接"""
    identity_mode = get_identity_mode()
    identity_provider = (
        IdentityProvider(get_identity_path())
        if identity_mode == "persistent"
        else IdentityProvider()
    )

    # StoreSetupError 直接上抛，应用启动失败
    task_store = await create_task_store(
        get_db_path(),
        identity_provider,
        busy_timeout_ms=get_busy_timeout_ms(),
    )
    app.state.task_store = task_store
    log.info(
        "task_store_initialized",
        db_path=str(task_store.db_path),
        identity_mode=identity_mode,
    )

    yield

    # 关闭：清理数据库连接
    if getattr(app.state, "task_store", None) is not None:
        await app.state.task_store.close()


async def handle_store_error(request: Request, exc: TaskStoreError) -> JSONResponse:
    """将存储层异常映射为统一的错误响应"""
    status_code = _ERROR_STATUS.get(exc.code, 500)
    log.error(
        "store_error",
        code=exc.code,
        message=exc.message,
        recoverable=exc.recoverable,
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
            }
        },
    )


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Task Analyzer Gateway",
        version="0.1.0",
        description="Task Analyzer 本地任务存储 API",
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(TaskStoreError, handle_store_error)

    # 初始化日志
    setup_logging()

    # 注册路由
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(identity.router, tags=["identity"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
