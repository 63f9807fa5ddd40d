"""Local file system storage backend."""

import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Optional
import logging

import platformdirs

from ..configuration import StorageSpace
from ..errors import (
    InvalidArgumentError,
    SettingsNotFoundError,
    StorageIOError,
    UnsupportedStorageSpaceError,
)
from .base import StorageBackend

logger = logging.getLogger(__name__)


def _instance_dir() -> Path:
    """Get the directory of the running program."""
    if getattr(sys, "frozen", False):
        # Running as compiled
        return Path(sys.executable).parent

    main_file = getattr(sys.modules.get("__main__"), "__file__", None)
    if main_file:
        return Path(main_file).resolve().parent

    # Interactive interpreter
    return Path.cwd()


class LocalStorage(StorageBackend):
    """Stores settings on the local file system.

    Per-user roots come from platformdirs:
        - Windows: %APPDATA% (roaming) / %LOCALAPPDATA% (local)
        - macOS: ~/Library/Application Support
        - Linux: $XDG_DATA_HOME or ~/.local/share
    """

    def resolve_root(
        self,
        storage_space: StorageSpace,
        custom_directory_path: Optional[Path] = None,
    ) -> Path:
        if storage_space is StorageSpace.ROAMING:
            return Path(platformdirs.user_data_dir(appname=None, appauthor=False, roaming=True))
        if storage_space is StorageSpace.LOCAL:
            return Path(platformdirs.user_data_dir(appname=None, appauthor=False, roaming=False))
        if storage_space is StorageSpace.INSTANCE:
            return _instance_dir()
        if storage_space is StorageSpace.CUSTOM:
            if custom_directory_path is None:
                raise InvalidArgumentError("custom_directory_path is required for StorageSpace.CUSTOM")
            path = Path(custom_directory_path)
            if not path.is_absolute():
                raise InvalidArgumentError(f"custom_directory_path must be absolute: {path}")
            return path

        raise UnsupportedStorageSpaceError(f"Unsupported storage space: {storage_space!r}")

    def join_path(self, base: Path, segment: str) -> Path:
        return Path(base) / segment

    def directory_exists(self, path: Path) -> bool:
        return Path(path).is_dir()

    def create_directory(self, path: Path) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Cannot create directory {path}: {e}") from e

    def file_exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def read_bytes(self, path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except FileNotFoundError as e:
            raise SettingsNotFoundError(f"File not found: {path}") from e
        except OSError as e:
            raise StorageIOError(f"Cannot read {path}: {e}") from e

    def write_bytes(self, path: Path, data: bytes) -> None:
        path = Path(path)

        # Atomic write: temp file next to the target, then rename over it
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
        except OSError as e:
            raise StorageIOError(f"Cannot write {path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug(f"Could not remove temporary file {tmp_name}")
            raise StorageIOError(f"Cannot write {path}: {e}") from e

    def delete_file(self, path: Path) -> None:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            raise StorageIOError(f"Cannot delete {path}: {e}") from e

    def delete_directory(self, path: Path, recursive: bool = False) -> None:
        path = Path(path)
        if not path.is_dir():
            return

        try:
            if recursive:
                shutil.rmtree(path)
            else:
                path.rmdir()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageIOError(f"Cannot delete directory {path}: {e}") from e
