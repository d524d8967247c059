"""
History Store

Ordered log of committed sessions. Insertion order is commit order
and is never re-sorted.

GUARANTEES:
- load() never raises: missing or malformed data is an empty history
- Every append/delete persists the full sequence before returning
- A failed write leaves the in-memory history untouched
"""

from typing import Optional

from slacker.audit import ActivityLogger
from slacker.models.session import SessionRecord
from slacker.services.storage import (
    HistoryPersistenceInterface,
    PersistenceCorruptError,
    StorageError,
)


class HistoryIndexError(IndexError):
    """Delete requested for a position outside the history."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"No record at position {index} (history has {length})")


class HistoryStore:
    """
    Append-only (with explicit delete) sequence of SessionRecords.

    Backed by a persistence port; the whole sequence is rewritten
    on every mutation.
    """

    def __init__(
        self,
        persistence: HistoryPersistenceInterface,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._persistence = persistence
        self._activity_logger = activity_logger
        self._records: list[SessionRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[SessionRecord]:
        """Copy of the history in commit order."""
        return list(self._records)

    def load(self) -> list[SessionRecord]:
        """
        Read the persisted history into memory.

        Returns:
            The loaded records; empty if nothing is stored or the
            payload is corrupt
        """
        try:
            loaded = self._persistence.load()
        except PersistenceCorruptError as e:
            if self._activity_logger:
                self._activity_logger.log_history_corrupt(str(e))
            loaded = None

        self._records = list(loaded or [])
        if self._activity_logger:
            self._activity_logger.log_history_loaded(len(self._records))
        return self.records

    def append(self, record: SessionRecord) -> list[SessionRecord]:
        """
        Add a record at the end and persist.

        Raises:
            StorageError: If the write fails (history unchanged)
        """
        updated = self._records + [record]
        self._save(updated, operation="append")
        self._records = updated
        return self.records

    def delete_at(self, index: int) -> list[SessionRecord]:
        """
        Remove the record at a position and persist.

        Negative positions are not wrapped around.

        Raises:
            HistoryIndexError: If index is outside [0, len)
            StorageError: If the write fails (history unchanged)
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise HistoryIndexError(index, len(self._records))
        if not 0 <= index < len(self._records):
            raise HistoryIndexError(index, len(self._records))

        updated = self._records[:index] + self._records[index + 1:]
        self._save(updated, operation="delete")
        self._records = updated
        return self.records

    def _save(self, records: list[SessionRecord], operation: str) -> None:
        try:
            self._persistence.save(records)
        except StorageError as e:
            if self._activity_logger:
                self._activity_logger.log_storage_error(operation, str(e))
            raise
