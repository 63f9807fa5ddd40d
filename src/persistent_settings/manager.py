"""Settings manager base class."""

import copy
import inspect
import sys
from pathlib import Path, PurePath
from typing import Any, ClassVar, Optional, get_origin
import logging

from .configuration import Configuration
from .core.events import Event, EventBus, EventType
from .errors import InvalidArgumentError
from .serialization import Codec, JsonCodec
from .storage import LocalStorage, StorageBackend

logger = logging.getLogger(__name__)


def _application_name(cls: type) -> str:
    """Get the name of the application a settings class belongs to.

    This is the top-level package of the module defining the class, or the
    script name when the class lives in ``__main__``.
    """
    package = (cls.__module__ or "").split(".")[0]
    if package and package != "__main__":
        return package

    if getattr(sys, "frozen", False):
        return Path(sys.executable).stem

    main_file = getattr(sys.modules.get("__main__"), "__file__", None)
    if main_file:
        return Path(main_file).stem

    return cls.__name__


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


class SettingsManager:
    """Base class for settings objects that persist their own fields.

    Settings are declared as annotated class attributes on a subclass. The
    class attribute value is the default; every instance gets its own deep
    copy of it:

        class AppSettings(SettingsManager):
            theme: str = "dark"
            window_width: int = 900
            recent_files: list = []
            session_token: str = ""

            __ignored__ = ("session_token",)

    Names starting with an underscore, names listed in ``__ignored__`` and
    ``ClassVar`` annotations are not persisted. Neither is anything the
    manager itself holds (configuration, storage, codec, saved state).

    The manager does not notice field changes on its own. The host calls
    ``mark_dirty()`` (or sets ``is_saved = False``) after changing a field,
    or opts into automatic tracking with ``__track_changes__ = True``.
    """

    __ignored__: ClassVar[tuple[str, ...]] = ()
    __track_changes__: ClassVar[bool] = False

    def __init__(
        self,
        storage: Optional[StorageBackend] = None,
        *,
        codec: Optional[Codec] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """Initialize the settings with their default values.

        Args:
            storage: Storage backend to use (local file system if None)
            codec: Codec to use (JSON if None)
            event_bus: Bus to publish lifecycle events on (a private one if None)
        """
        self._initialized = False
        self._storage = storage if storage is not None else LocalStorage()
        self._codec = codec if codec is not None else JsonCodec()
        self._events = event_bus if event_bus is not None else EventBus()
        self._is_saved = True

        self.configuration = Configuration(
            sub_directory_path=_application_name(type(self)),
            file_name=f"{type(self).__name__}.dat",
        )

        for name in self.persistable_fields():
            setattr(self, name, copy.deepcopy(getattr(type(self), name, None)))

        self._initialized = True

    def __setattr__(self, name: str, value: Any) -> None:
        if not (
            self.__track_changes__
            and self.__dict__.get("_initialized")
            and name in self.persistable_fields()
        ):
            super().__setattr__(name, value)
            return

        old_value = getattr(self, name, None)
        super().__setattr__(name, value)
        if old_value != value:
            self._publish(EventType.PROPERTY_CHANGED, name)
            self.is_saved = False

    @classmethod
    def persistable_fields(cls) -> tuple[str, ...]:
        """Get the names of the fields that are saved and loaded.

        Returns:
            Field names in declaration order, base classes first
        """
        ignored: set[str] = set()
        for klass in cls.__mro__:
            ignored.update(klass.__dict__.get("__ignored__", ()))

        names: list[str] = []
        for klass in reversed(cls.__mro__):
            if klass is SettingsManager or not issubclass(klass, SettingsManager):
                continue

            for name, annotation in inspect.get_annotations(klass).items():
                if name.startswith("_") or name in ignored or name in names:
                    continue
                if _is_class_var(annotation) or isinstance(getattr(cls, name, None), property):
                    continue
                names.append(name)

        return tuple(names)

    @classmethod
    def create_default(cls) -> "SettingsManager":
        """Create an instance holding default values.

        Used by reset(). Subclasses whose constructor needs arguments must
        override this.
        """
        return cls()

    @property
    def storage(self) -> StorageBackend:
        """Get the storage backend."""
        return self._storage

    @property
    def codec(self) -> Codec:
        """Get the codec."""
        return self._codec

    @property
    def events(self) -> EventBus:
        """Get the event bus lifecycle events are published on."""
        return self._events

    @property
    def full_directory_path(self) -> PurePath:
        """Get the full path of the storage directory."""
        config = self.configuration
        path = self._storage.resolve_root(config.storage_space, config.custom_directory_path)

        if config.sub_directory_path:
            if PurePath(config.sub_directory_path).is_absolute():
                raise InvalidArgumentError(
                    f"sub_directory_path must be relative: {config.sub_directory_path}"
                )
            path = self._storage.join_path(path, config.sub_directory_path)

        return path

    @property
    def full_file_path(self) -> PurePath:
        """Get the full path of the settings file."""
        file_name = self.configuration.file_name
        if not file_name or file_name in (".", "..") or "/" in file_name or "\\" in file_name:
            raise InvalidArgumentError(f"file_name must be a single file name: {file_name!r}")

        return self._storage.join_path(self.full_directory_path, file_name)

    @property
    def is_saved(self) -> bool:
        """Check whether the settings are unchanged since the last save or load."""
        return self._is_saved

    @is_saved.setter
    def is_saved(self, value: bool) -> None:
        value = bool(value)
        if value == self._is_saved:
            return

        self._is_saved = value
        self._publish(EventType.SAVED_STATE_CHANGED, value)

    def mark_dirty(self) -> None:
        """Flag the settings as changed since the last save."""
        self.is_saved = False

    def mark_clean(self) -> None:
        """Flag the settings as matching what is stored."""
        self.is_saved = True

    def copy_from(self, other: "SettingsManager") -> None:
        """Copy the persistable fields of another settings manager into this one.

        Args:
            other: The settings to copy from (same or compatible type)

        Raises:
            InvalidArgumentError: If other is None
        """
        if other is None:
            raise InvalidArgumentError("Settings to copy from must not be None")

        self._codec.copy(other, self)
        self.is_saved = other.is_saved

    def save(self) -> None:
        """Save the settings to file.

        Failures are logged and ignored unless
        ``configuration.throw_if_cannot_save`` is set.
        """
        try:
            file_path = self.full_file_path
            data = self._codec.serialize(self)

            self._storage.create_directory(self.full_directory_path)
            self._storage.write_bytes(file_path, data)
        except Exception as e:
            if self.configuration.throw_if_cannot_save:
                raise
            logger.error(f"Failed to save settings: {e}")
            return

        logger.info(f"Settings saved to {file_path}")
        self.is_saved = True
        self._publish(EventType.SETTINGS_SAVED, file_path)

    def load(self) -> None:
        """Load the settings from file.

        A missing file is not an error: the current values are kept.
        Other failures are logged and ignored unless
        ``configuration.throw_if_cannot_load`` is set.
        """
        try:
            file_path = self.full_file_path
            if not self._storage.file_exists(file_path):
                logger.debug(f"No settings file at {file_path}, keeping current values")
                return

            self._codec.populate(self._storage.read_bytes(file_path), self)
        except Exception as e:
            if self.configuration.throw_if_cannot_load:
                raise
            logger.warning(f"Failed to load settings, keeping current values: {e}")
            return

        logger.info(f"Settings loaded from {file_path}")
        self.is_saved = True
        self._publish(EventType.SETTINGS_LOADED, file_path)

    def reset(self) -> None:
        """Reset the settings to their default values.

        The result counts as unsaved, since the file still holds the old values.
        """
        self._codec.copy(type(self).create_default(), self)
        self.is_saved = False
        self._publish(EventType.SETTINGS_RESET)

    def delete(self, delete_parent_directory: bool = False) -> None:
        """Delete the settings file and, optionally, its directory.

        Args:
            delete_parent_directory: Delete the whole storage directory
                recursively instead of just the file
        """
        if delete_parent_directory:
            path = self.full_directory_path
            self._storage.delete_directory(path, recursive=True)
        else:
            path = self.full_file_path
            self._storage.delete_file(path)

        logger.info(f"Deleted settings at {path}")
        self._publish(EventType.SETTINGS_DELETED, path)

    def _publish(self, event_type: EventType, data: Any = None) -> None:
        self._events.publish(Event(type=event_type, source=self, data=data))
