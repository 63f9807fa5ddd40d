"""Persist the public fields of a settings object to a per-user file."""

from .configuration import Configuration, StorageSpace
from .core.events import Event, EventBus, EventType
from .errors import (
    DeserializationError,
    InvalidArgumentError,
    SettingsError,
    SettingsNotFoundError,
    StorageIOError,
    UnsupportedStorageSpaceError,
)
from .manager import SettingsManager
from .serialization import Codec, JsonCodec
from .storage import LocalStorage, MemoryStorage, StorageBackend

__version__ = "1.0.0"

__all__ = [
    "Codec",
    "Configuration",
    "DeserializationError",
    "Event",
    "EventBus",
    "EventType",
    "InvalidArgumentError",
    "JsonCodec",
    "LocalStorage",
    "MemoryStorage",
    "SettingsError",
    "SettingsManager",
    "SettingsNotFoundError",
    "StorageBackend",
    "StorageIOError",
    "StorageSpace",
    "UnsupportedStorageSpaceError",
]
