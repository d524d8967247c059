"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a JSON file key-value store, but designed to be swappable.
"""

from slacker.services.storage.interface import (
    HistoryPersistenceInterface,
    KeyValueStoreInterface,
    PersistenceCorruptError,
    StorageError,
    StorageWriteError,
)
from slacker.services.storage.key_value import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from slacker.services.storage.history import (
    DEFAULT_HISTORY_KEY,
    KeyValueHistoryPersistence,
    decode_history,
    encode_history,
)

__all__ = [
    # Interfaces
    "HistoryPersistenceInterface",
    "KeyValueStoreInterface",
    # Exceptions
    "PersistenceCorruptError",
    "StorageError",
    "StorageWriteError",
    # Implementations
    "DEFAULT_HISTORY_KEY",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueHistoryPersistence",
    "decode_history",
    "encode_history",
]
