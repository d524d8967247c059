"""Activity logging package."""

from slacker.audit.logger import ActivityLogger

__all__ = ["ActivityLogger"]
