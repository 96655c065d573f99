"""匿名身份提供者

为当前设备用户提供稳定的匿名标识，所有任务行都以它作为 owner。
首次调用时惰性创建；创建过程由进程内互斥锁保护，
并发的首次调用只会落定同一个身份。

persistent 模式下身份写入数据目录中的文件，
通过硬链接的原子创建保证多个进程同样只落定一个值。
"""

import os
import threading
from pathlib import Path

import structlog
from ulid import ULID

log = structlog.get_logger()


def new_identity() -> str:
    """生成新的全局唯一随机标识"""
    return str(ULID())


class IdentityProvider:
    """进程级匿名身份

    Args:
        path: 身份持久化文件路径；None 表示仅在进程生命周期内有效
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._identity: str | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path | None:
        return self._path

    def current(self) -> str:
        """返回当前身份，首次调用时创建"""
        identity = self._identity
        if identity is not None:
            return identity

        with self._lock:
            # 加锁后再检查一次，避免竞争者重复创建
            if self._identity is None:
                self._identity = self._settle()
            return self._identity

    def _settle(self) -> str:
        if self._path is None:
            identity = new_identity()
            log.info("identity_created", persistent=False)
            return identity

        try:
            return self._load_or_create(self._path)
        except (OSError, ValueError) as e:
            identity = new_identity()
            log.warning(
                "identity_persist_failed",
                path=str(self._path),
                error=str(e),
                fallback="process",
            )
            return identity

    def _load_or_create(self, path: Path) -> str:
        existing = self._read(path)
        if existing:
            log.info("identity_loaded", path=str(path))
            return existing

        path.parent.mkdir(parents=True, exist_ok=True)
        candidate = new_identity()

        # 先写临时文件再 link 到目标路径：目标文件一旦出现就已包含完整内容
        tmp_path = path.with_name(f".{path.name}.{candidate}.tmp")
        tmp_path.write_text(candidate, encoding="utf-8")
        try:
            os.link(tmp_path, path)
        except FileExistsError:
            winner = self._read(path)
            if winner:
                # 另一个进程抢先创建
                return winner
            # 遗留的空文件或损坏文件，直接替换
            os.replace(tmp_path, path)
        finally:
            tmp_path.unlink(missing_ok=True)

        log.info("identity_created", persistent=True, path=str(path))
        return candidate

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            value = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            log.warning("identity_file_corrupt", path=str(path), error=str(e))
            return None
        return value or None
