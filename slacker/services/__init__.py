"""Services package."""

from slacker.services.clock import (
    ClockSource,
    ManualClock,
    SystemClock,
    TickHandle,
)
from slacker.services.storage import (
    HistoryPersistenceInterface,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueHistoryPersistence,
    KeyValueStoreInterface,
    PersistenceCorruptError,
    StorageError,
    StorageWriteError,
)

__all__ = [
    # Clock services
    "ClockSource",
    "ManualClock",
    "SystemClock",
    "TickHandle",
    # Storage services
    "HistoryPersistenceInterface",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueHistoryPersistence",
    "KeyValueStoreInterface",
    "PersistenceCorruptError",
    "StorageError",
    "StorageWriteError",
]
