"""Storage backends for settings files."""

from .base import StorageBackend
from .local import LocalStorage
from .memory import MemoryStorage

__all__ = ["StorageBackend", "LocalStorage", "MemoryStorage"]
