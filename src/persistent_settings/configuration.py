"""Per-manager storage configuration."""

from enum import Enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class StorageSpace(Enum):
    """Logical root directories a settings file can live under."""

    ROAMING = "roaming"  # Per-user data that follows the user between machines
    LOCAL = "local"  # Per-user data bound to this machine
    INSTANCE = "instance"  # Directory of the running program
    CUSTOM = "custom"  # Configuration.custom_directory_path


@dataclass
class Configuration:
    """Where a settings manager stores its file and how it reacts to failures.

    ``sub_directory_path`` and ``file_name`` are filled in by the owning
    manager when left empty.
    """

    storage_space: StorageSpace = StorageSpace.ROAMING
    custom_directory_path: Optional[Path] = None
    sub_directory_path: str = ""
    file_name: str = ""

    # Failure policy
    throw_if_cannot_load: bool = False
    throw_if_cannot_save: bool = False
