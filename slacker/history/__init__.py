"""Session history package."""

from slacker.history.store import HistoryIndexError, HistoryStore

__all__ = ["HistoryIndexError", "HistoryStore"]
