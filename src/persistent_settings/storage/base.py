"""Storage backend interface consumed by the settings manager."""

from abc import ABC, abstractmethod
from pathlib import PurePath
from typing import Optional

from ..configuration import StorageSpace


class StorageBackend(ABC):
    """Abstract access to the directories and files settings live in.

    Implementations must be stateless or thread-safe, since one backend may
    be shared by any number of managers. Create and delete operations are
    idempotent.
    """

    @abstractmethod
    def resolve_root(
        self,
        storage_space: StorageSpace,
        custom_directory_path: Optional[PurePath] = None,
    ) -> PurePath:
        """Map a storage space to a concrete root directory.

        Args:
            storage_space: The logical root to resolve
            custom_directory_path: Absolute path used for StorageSpace.CUSTOM

        Returns:
            The root directory path

        Raises:
            UnsupportedStorageSpaceError: If the storage space is unknown
            InvalidArgumentError: If CUSTOM is requested without an absolute path
        """
        pass

    @abstractmethod
    def join_path(self, base: PurePath, segment: str) -> PurePath:
        """Append a path segment to a base path."""
        pass

    @abstractmethod
    def directory_exists(self, path: PurePath) -> bool:
        """Check whether a directory exists."""
        pass

    @abstractmethod
    def create_directory(self, path: PurePath) -> None:
        """Create a directory and its parents; no-op if it already exists."""
        pass

    @abstractmethod
    def file_exists(self, path: PurePath) -> bool:
        """Check whether a file exists."""
        pass

    @abstractmethod
    def read_bytes(self, path: PurePath) -> bytes:
        """Read a whole file.

        Raises:
            SettingsNotFoundError: If the file does not exist
            StorageIOError: On any other read failure
        """
        pass

    @abstractmethod
    def write_bytes(self, path: PurePath, data: bytes) -> None:
        """Replace a file's content without leaving it half-written."""
        pass

    @abstractmethod
    def delete_file(self, path: PurePath) -> None:
        """Delete a file; no-op if it is already gone."""
        pass

    @abstractmethod
    def delete_directory(self, path: PurePath, recursive: bool = False) -> None:
        """Delete a directory; no-op if it is already gone."""
        pass
