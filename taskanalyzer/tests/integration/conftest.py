"""集成测试共享 fixture"""

from pathlib import Path

import pytest


@pytest.fixture
def integration_data_dir(tmp_path: Path, monkeypatch) -> Path:
    """集成测试数据目录（persistent 身份模式）"""
    data_dir = tmp_path / "appdata"
    monkeypatch.setenv("TASKANALYZER_DATA_DIR", str(data_dir))
    monkeypatch.delenv("TASKANALYZER_DB_PATH", raising=False)
    monkeypatch.delenv("TASKANALYZER_IDENTITY_MODE", raising=False)
    return data_dir
