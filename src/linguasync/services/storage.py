"""
Storage access for media and subtitle files.

Remote buckets and URL signing live outside LinguaSync; jobs only see this
narrow read/write interface. LocalStorage keeps objects on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from linguasync.exceptions import StorageError
from linguasync.utils.logging import get_logger

log = get_logger(__name__)


class StorageBackend(Protocol):
    def read_bytes(self, key: str) -> bytes: ...

    def read_text(self, key: str) -> str: ...

    def write_text(self, key: str, text: str) -> Path: ...

    def locate(self, key: str) -> Path: ...


class LocalStorage:
    """Objects are files; keys are paths relative to `root` (or absolute)."""

    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root).expanduser().resolve() if root is not None else None

    def locate(self, key: str) -> Path:
        path = Path(key).expanduser()
        if not path.is_absolute() and self.root is not None:
            path = self.root / path
        return path.resolve()

    def read_bytes(self, key: str) -> bytes:
        path = self.locate(key)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read {key}: {exc.strerror or exc}") from exc

    def read_text(self, key: str) -> str:
        data = self.read_bytes(key)
        # utf-8-sig drops a BOM some subtitle editors write
        return data.decode("utf-8-sig", errors="replace")

    def write_text(self, key: str, text: str) -> Path:
        path = self.locate(key)
        tmp = path.with_name(path.name + ".part")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(text, encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            raise StorageError(f"Failed to write {key}: {exc.strerror or exc}") from exc
        log.info("Stored %s (%d chars)", path, len(text))
        return path
