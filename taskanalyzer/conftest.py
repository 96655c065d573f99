"""全局 pytest 配置 -- 临时数据目录隔离"""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch) -> Path:
    """所有测试默认使用临时数据目录，避免写入真实的应用数据目录"""
    data_dir = tmp_path / "default-appdata"
    monkeypatch.setenv("TASKANALYZER_DATA_DIR", str(data_dir))
    monkeypatch.delenv("TASKANALYZER_DB_PATH", raising=False)
    return data_dir
