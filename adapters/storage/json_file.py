"""
File-backed key-value storage.

Each key maps to one UTF-8 file `<data_dir>/<key>.json`. Writes go to a
temporary file first and are moved into place with `os.replace`, so a crash
mid-write leaves the previous value intact. Blocking file I/O runs in a worker
thread to keep the event loop free.
"""

import asyncio
import os
import re
import tempfile
from pathlib import Path

from healthtwin.log import logger
from healthtwin.services.storage import InvalidStorageKeyError, StorageError

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStorage:
    """Directory-backed implementation of the KeyValueStorage protocol."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)
        self.logger = logger.bind(component="json_file_storage", data_dir=str(self.data_dir))

    def _path_for(self, key: str) -> Path:
        if not _VALID_KEY.match(key) or key in {".", ".."}:
            raise InvalidStorageKeyError(f"Invalid storage key {key!r}")
        return self.data_dir / f"{key}.json"

    async def get(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return await asyncio.to_thread(self._read_file, path)
        except OSError as e:
            raise StorageError(key, f"read failed: {e}") from e

    async def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write_file, path, value)
        except OSError as e:
            raise StorageError(key, f"write failed: {e}") from e
        self.logger.debug("storage_key_written", key=key, size=len(value))

    @staticmethod
    def _read_file(path: Path) -> str | None:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    @staticmethod
    def _write_file(path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
