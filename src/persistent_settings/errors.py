"""Exceptions raised by the settings persistence layer."""


class SettingsError(Exception):
    """Base class for all settings persistence errors."""


class InvalidArgumentError(SettingsError, ValueError):
    """A required argument was missing or malformed."""


class SettingsNotFoundError(SettingsError, FileNotFoundError):
    """The requested settings file does not exist."""


class StorageIOError(SettingsError, OSError):
    """Reading, writing, creating or deleting storage failed."""


class DeserializationError(SettingsError, ValueError):
    """The stored byte stream could not be read back."""


class UnsupportedStorageSpaceError(SettingsError, ValueError):
    """The storage space cannot be resolved to a directory."""
