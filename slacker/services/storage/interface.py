"""
Abstract Storage Interface

DESIGN DECISION: We define abstract interfaces for storage operations.
This allows us to:
1. Swap the JSON file for browser-style local storage or a database later
2. Use in-memory storage for testing
3. Keep the history store decoupled from the storage medium

Two layers:
- KeyValueStoreInterface: the raw medium, string values under string keys
- HistoryPersistenceInterface: the history port (load/save whole sequence)
"""

from abc import ABC, abstractmethod
from typing import Optional

from slacker.models.session import SessionRecord


class KeyValueStoreInterface(ABC):
    """
    Abstract key-value store.

    Values are opaque strings, exactly like browser local storage.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            PersistenceCorruptError: If the backing medium is unreadable
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""
        pass


class HistoryPersistenceInterface(ABC):
    """
    Persistence port for the session history.

    The whole sequence is read and written at once, never diffed.
    """

    @abstractmethod
    def load(self) -> Optional[list[SessionRecord]]:
        """
        Load the persisted history.

        Returns:
            Records in insertion order, or None if nothing is stored

        Raises:
            PersistenceCorruptError: If the stored payload is malformed
        """
        pass

    @abstractmethod
    def save(self, records: list[SessionRecord]) -> None:
        """
        Persist the full history, replacing what was stored.

        Raises:
            StorageWriteError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceCorruptError(StorageError):
    """Stored payload could not be parsed."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass
