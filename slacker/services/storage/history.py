"""
History Persistence over a Key-Value Store

The history is stored under one fixed key as a JSON array:

    [{"timestamp": "2024-01-01T10:00:00+08:00", "earned": 166.67, "seconds": 3600}, ...]

Array order is insertion order.
"""

import json
from typing import Optional

from pydantic import ValidationError

from slacker.models.session import SessionRecord
from slacker.services.storage.interface import (
    HistoryPersistenceInterface,
    KeyValueStoreInterface,
    PersistenceCorruptError,
)


DEFAULT_HISTORY_KEY = "slacker-history"


def encode_history(records: list[SessionRecord]) -> str:
    """Serialize records to the JSON payload."""
    return json.dumps(
        [record.to_payload() for record in records],
        ensure_ascii=False,
    )


def decode_history(raw: str) -> list[SessionRecord]:
    """
    Parse the JSON payload back into records.

    Raises:
        PersistenceCorruptError: If the payload is not a JSON array of
            well-formed records. One bad entry rejects the whole payload.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PersistenceCorruptError(f"History payload is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PersistenceCorruptError(
            f"History payload must be a JSON array, found {type(data).__name__}"
        )

    records = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            raise PersistenceCorruptError(f"History entry {position} is not an object")
        try:
            records.append(SessionRecord.from_payload(item))
        except ValidationError as e:
            raise PersistenceCorruptError(
                f"History entry {position} is malformed: {e.error_count()} errors"
            ) from e
    return records


class KeyValueHistoryPersistence(HistoryPersistenceInterface):
    """History port that keeps the whole sequence under one key."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key: str = DEFAULT_HISTORY_KEY,
    ):
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> Optional[list[SessionRecord]]:
        raw = self._store.get(self._key)
        if raw is None:
            return None
        return decode_history(raw)

    def save(self, records: list[SessionRecord]) -> None:
        self._store.set(self._key, encode_history(records))
