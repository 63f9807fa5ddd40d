"""In-memory storage backend."""

import threading
from pathlib import PurePosixPath
from typing import Optional

from ..configuration import StorageSpace
from ..errors import (
    InvalidArgumentError,
    SettingsNotFoundError,
    StorageIOError,
    UnsupportedStorageSpaceError,
)
from .base import StorageBackend

DEFAULT_ROOTS = {
    StorageSpace.ROAMING: PurePosixPath("/roaming"),
    StorageSpace.LOCAL: PurePosixPath("/local"),
    StorageSpace.INSTANCE: PurePosixPath("/instance"),
}


class MemoryStorage(StorageBackend):
    """Keeps directories and files in dictionaries instead of on disk.

    Useful for tests and for hosts that must not touch the file system.
    Paths are POSIX-style regardless of the platform. All table access is
    guarded by one lock, so an instance can be shared between managers
    running on different threads.
    """

    def __init__(self, roots: Optional[dict[StorageSpace, str]] = None):
        """Initialize an empty storage.

        Args:
            roots: Root directory per storage space (defaults to /roaming,
                /local and /instance)
        """
        self._roots = dict(DEFAULT_ROOTS)
        if roots:
            self._roots.update({space: PurePosixPath(p) for space, p in roots.items()})
        self._directories: set[PurePosixPath] = set()
        self._files: dict[PurePosixPath, bytes] = {}
        self._lock = threading.Lock()

    @property
    def files(self) -> dict[str, bytes]:
        """Get a snapshot of all stored files keyed by path."""
        with self._lock:
            return {str(p): data for p, data in self._files.items()}

    def resolve_root(
        self,
        storage_space: StorageSpace,
        custom_directory_path: Optional[PurePosixPath] = None,
    ) -> PurePosixPath:
        if storage_space is StorageSpace.CUSTOM:
            if custom_directory_path is None:
                raise InvalidArgumentError("custom_directory_path is required for StorageSpace.CUSTOM")
            path = PurePosixPath(custom_directory_path)
            if not path.is_absolute():
                raise InvalidArgumentError(f"custom_directory_path must be absolute: {path}")
            return path

        try:
            return self._roots[storage_space]
        except KeyError:
            raise UnsupportedStorageSpaceError(f"Unsupported storage space: {storage_space!r}") from None

    def join_path(self, base: PurePosixPath, segment: str) -> PurePosixPath:
        return PurePosixPath(base) / segment

    def directory_exists(self, path: PurePosixPath) -> bool:
        with self._lock:
            return PurePosixPath(path) in self._directories

    def create_directory(self, path: PurePosixPath) -> None:
        path = PurePosixPath(path)
        with self._lock:
            self._directories.add(path)
            self._directories.update(path.parents)

    def file_exists(self, path: PurePosixPath) -> bool:
        with self._lock:
            return PurePosixPath(path) in self._files

    def read_bytes(self, path: PurePosixPath) -> bytes:
        with self._lock:
            data = self._files.get(PurePosixPath(path))
        if data is None:
            raise SettingsNotFoundError(f"File not found: {path}")
        return data

    def write_bytes(self, path: PurePosixPath, data: bytes) -> None:
        path = PurePosixPath(path)
        data = bytes(data)
        with self._lock:
            if path.parent not in self._directories:
                raise StorageIOError(f"Cannot write {path}: parent directory does not exist")
            self._files[path] = data

    def delete_file(self, path: PurePosixPath) -> None:
        with self._lock:
            self._files.pop(PurePosixPath(path), None)

    def delete_directory(self, path: PurePosixPath, recursive: bool = False) -> None:
        path = PurePosixPath(path)
        with self._lock:
            if path not in self._directories:
                return

            contents = [f for f in self._files if path in f.parents]
            subdirs = [d for d in self._directories if path in d.parents]
            if (contents or subdirs) and not recursive:
                raise StorageIOError(f"Directory not empty: {path}")

            for f in contents:
                del self._files[f]
            self._directories.difference_update(subdirs)
            self._directories.discard(path)
