"""JSON file key-value storage backend.

All keys live in one JSON object on disk. Every write replaces the file
atomically, so a crash mid-write leaves the previous state intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from tabshell.storage.base import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStorage):
    """Stores string values in a single JSON object file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise StorageError(f"Value for {key!r} in {self._path} is not a string", backend="file")
        return value

    def set(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read_for_update()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self._path}: {e}", backend="file") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self._path} does not hold a JSON object", backend="file")
        return data

    def _read_for_update(self) -> dict[str, object]:
        # A corrupt file is overwritten by the next write
        try:
            return self._read()
        except StorageError as e:
            logger.warning("Discarding unreadable state file: %s", e)
            return {}

    def _write(self, data: dict[str, object]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                    f.write("\n")
                os.replace(tmp, self._path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self._path}: {e}", backend="file") from e
        logger.debug("Wrote %d key(s) to %s", len(data), self._path)
