"""apps/gateway 测试配置 -- FastAPI app + httpx AsyncClient fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskanalyzer.core.identity import IdentityProvider
from taskanalyzer.core.store import create_task_store


@pytest_asyncio.fixture
async def gateway_data_dir(tmp_path: Path, monkeypatch) -> Path:
    """Gateway 临时数据目录"""
    data_dir = tmp_path / "appdata"
    monkeypatch.setenv("TASKANALYZER_DATA_DIR", str(data_dir))
    monkeypatch.delenv("TASKANALYZER_DB_PATH", raising=False)
    monkeypatch.delenv("TASKANALYZER_IDENTITY_MODE", raising=False)
    return data_dir


@pytest_asyncio.fixture
async def app(gateway_data_dir: Path):
    """创建测试用 FastAPI app 实例（手动初始化 Store，绕过 lifespan）"""
    from taskanalyzer.gateway.main import create_app

    application = create_app()
    task_store = await create_task_store(
        gateway_data_dir / "tasks.db",
        IdentityProvider(gateway_data_dir / "identity"),
    )
    application.state.task_store = task_store

    yield application

    await task_store.close()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
