"""Codec interface consumed by the settings manager."""

from abc import ABC, abstractmethod
from typing import Any


def get_persistable_fields(obj: Any) -> list[str]:
    """Get the names of the fields a codec should read and write.

    Objects declare their fields through a ``persistable_fields()`` method
    (settings managers do); anything else falls back to its public instance
    attributes.

    Args:
        obj: The object to inspect

    Returns:
        Field names in declaration order
    """
    declared = getattr(obj, "persistable_fields", None)
    if callable(declared):
        return list(declared())
    return [name for name in vars(obj) if not name.startswith("_")]


class Codec(ABC):
    """Converts the persistable fields of an object to bytes and back."""

    @abstractmethod
    def serialize(self, obj: Any) -> bytes:
        """Serialize the persistable fields of an object.

        Args:
            obj: The object to serialize

        Returns:
            The encoded fields
        """
        pass

    @abstractmethod
    def populate(self, data: bytes, target: Any) -> None:
        """Overwrite the persistable fields of an object in place.

        Unknown keys and fields that cannot be set are skipped; fields
        absent from the data keep their current value.

        Args:
            data: Bytes produced by serialize()
            target: The object to populate

        Raises:
            DeserializationError: If the data is structurally unreadable
        """
        pass

    def copy(self, source: Any, target: Any) -> None:
        """Copy the persistable fields of one object into another."""
        self.populate(self.serialize(source), target)
