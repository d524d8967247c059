"""
Key-Value Store Implementations

DESIGN DECISION: A single JSON object file is the default medium.
It mirrors browser local storage (string values under string keys),
needs no setup, and users can open it in any editor.

TRADEOFFS:
- Every write rewrites the whole file (fine for a personal history)
- No locking (one process owns the file)

Writes go to a temporary file that is then renamed over the
original, so a crash mid-write never leaves a half-written file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from slacker.services.storage.interface import (
    KeyValueStoreInterface,
    PersistenceCorruptError,
    StorageWriteError,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store backed by one JSON object file.

    File layout: {"<key>": "<string value>", ...}
    A missing file is an empty store.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            raw = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceCorruptError(f"Cannot read {self._path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceCorruptError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceCorruptError(
                f"{self._path} must contain a JSON object, found {type(data).__name__}"
            )
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Cannot write {self._path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise PersistenceCorruptError(f"Value under {key!r} is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except PersistenceCorruptError:
            # An unreadable file is replaced rather than blocking every write
            data = {}
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
