"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性、数据目录、磁盘空间。
"""

import shutil

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. data_dir: 数据目录可访问性
    3. disk_space_mb: 数据目录所在磁盘剩余空间
    """
    checks = {}
    all_ok = True

    store = getattr(request.app.state, "task_store", None)

    # 1. SQLite 连通性检查
    try:
        await store.check_connection()
        checks["sqlite"] = "ok"
    except Exception as e:
        log.warning("readiness_sqlite_error", error=str(e))
        checks["sqlite"] = f"error: {str(e)}"
        all_ok = False

    # 2. 数据目录检查
    data_dir = store.db_path.parent if store is not None else None
    if data_dir is not None and data_dir.is_dir():
        checks["data_dir"] = "ok"
    else:
        checks["data_dir"] = "error: directory does not exist"
        all_ok = False

    # 3. 磁盘空间检查
    try:
        disk_usage = shutil.disk_usage(data_dir if data_dir is not None else "/")
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "checks": checks,
        },
    )
