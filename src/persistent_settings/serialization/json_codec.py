"""JSON codec."""

import json
import types
from dataclasses import fields, is_dataclass, replace
from enum import Enum
from pathlib import PurePath
from typing import Annotated, Any, Literal, Union, get_args, get_origin, get_type_hints
import logging

from ..errors import DeserializationError, SettingsError
from .base import Codec, get_persistable_fields

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)
_UNION_TYPES = (Union, types.UnionType)


def _type_hints(cls: type) -> dict[str, Any]:
    """Get the resolved annotations of a class, or none if they cannot be resolved."""
    try:
        return get_type_hints(cls)
    except (NameError, TypeError) as e:
        logger.warning(f"Cannot resolve annotations of {cls.__name__}: {e}")
        return {}


def _encode(value: Any) -> Any:
    """Convert a field value into something json can write."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, PurePath):
        return str(value)
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _encode(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {_encode_key(k): _encode(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        items = [_encode(v) for v in value]
        try:
            return sorted(items)
        except TypeError:
            return items
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def _encode_key(key: Any) -> str:
    # json object keys are strings; other scalars are stored in their json form
    value = _encode(key)
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (bool, int, float)):
        return json.dumps(value)
    raise TypeError(f"unsupported dict key {key!r}")


def _is_plain(value: Any) -> bool:
    """Check whether json gives a value back unchanged."""
    if isinstance(value, Enum):
        return False
    if value is None or isinstance(value, (bool, int, float, str)):
        return True
    if type(value) is list:
        return all(_is_plain(v) for v in value)
    if type(value) is dict:
        return all(isinstance(k, str) and _is_plain(v) for k, v in value.items())
    return False


def _is_restorable(value: Any, hint: Any) -> bool:
    """Check whether a value can be decoded again without losing its type.

    Without an annotation only the outer type can be recovered, from the
    target's current value; anything nested must be plain json.
    """
    if hint is None:
        if isinstance(value, (Enum, PurePath)):
            return True
        if is_dataclass(value) and not isinstance(value, type):
            return True
        if isinstance(value, (tuple, set, frozenset)):
            return all(_is_plain(v) for v in value)
        return _is_plain(value)

    if hint is Any:
        return _is_plain(value)
    if hint in (list, tuple, set, frozenset) and isinstance(value, (list, tuple, set, frozenset)):
        return all(_is_plain(v) for v in value)
    if hint is dict and isinstance(value, dict):
        return _is_plain(dict(value))
    return True


def _expect(raw: Any, kind: type) -> None:
    if (isinstance(raw, bool) and kind is not bool) or not isinstance(raw, kind):
        raise TypeError(f"expected {kind.__name__}, got {type(raw).__name__}")


def _decode_key(key: str, hint: Any) -> Any:
    try:
        return _decode(key, hint)
    except (TypeError, ValueError):
        return _decode(json.loads(key), hint)


def _decode_dataclass(raw: Any, cls: type, current: Any = None) -> Any:
    _expect(raw, dict)
    hints = _type_hints(cls)
    changes = {
        f.name: _decode(raw[f.name], hints.get(f.name, Any))
        for f in fields(cls)
        if f.init and f.name in raw
    }
    if isinstance(current, cls):
        return replace(current, **changes)
    return cls(**changes)


def _decode(raw: Any, hint: Any, current: Any = None) -> Any:
    """Convert a json value back into the annotated type.

    Args:
        raw: The decoded json value
        hint: The field's resolved annotation
        current: The field's current value, kept for dataclass fields
            missing from ``raw``

    Raises:
        TypeError, ValueError: If the value does not fit the annotation
    """
    if raw is None or hint is Any:
        return raw

    origin = get_origin(hint)
    args = get_args(hint)

    if origin is Annotated:
        return _decode(raw, args[0], current)

    if origin in _UNION_TYPES:
        errors = []
        for arg in args:
            if arg is _NONE_TYPE:
                continue
            try:
                return _decode(raw, arg, current)
            except (TypeError, ValueError) as e:
                errors.append(str(e))
        raise TypeError(f"no type of {hint} fits: {'; '.join(errors)}")

    if origin is Literal:
        if raw not in args:
            raise ValueError(f"{raw!r} is not one of {args}")
        return raw

    if origin in (list, set, frozenset) or hint in (list, set, frozenset):
        _expect(raw, list)
        item = args[0] if args else Any
        return (origin or hint)(_decode(v, item) for v in raw)

    if origin is tuple or hint is tuple:
        _expect(raw, list)
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            item = args[0] if args else Any
            return tuple(_decode(v, item) for v in raw)
        if len(args) != len(raw):
            raise ValueError(f"expected {len(args)} items, got {len(raw)}")
        return tuple(_decode(v, a) for v, a in zip(raw, args))

    if origin is dict or hint is dict:
        _expect(raw, dict)
        key_hint, value_hint = args if args else (Any, Any)
        return {_decode_key(k, key_hint): _decode(v, value_hint) for k, v in raw.items()}

    if origin is not None or not isinstance(hint, type):
        # Abstract generics, type variables and the like carry nothing to restore
        return raw

    if issubclass(hint, Enum):
        return hint(raw)
    if issubclass(hint, PurePath):
        _expect(raw, str)
        return hint(raw)
    if is_dataclass(hint):
        return _decode_dataclass(raw, hint, current)
    if hint is float and isinstance(raw, int) and not isinstance(raw, bool):
        return float(raw)
    if hint in (bool, int, float, str):
        _expect(raw, hint)
        return raw
    if hint is object or isinstance(raw, hint):
        return raw

    raise TypeError(f"expected {hint.__name__}, got {type(raw).__name__}")


def _decode_by_value(raw: Any, current: Any) -> Any:
    """Convert a json value back using an unannotated field's current value."""
    if raw is None or current is None:
        return raw

    if isinstance(current, (Enum, PurePath, bool, int, float, str)):
        return _decode(raw, type(current))
    if is_dataclass(current) and not isinstance(current, type):
        return _decode_dataclass(raw, type(current), current)
    if isinstance(current, (tuple, set, frozenset, list, dict)):
        return _decode(raw, type(current))

    return raw


class JsonCodec(Codec):
    """Stores persistable fields as a UTF-8 JSON object.

    Keys keep declaration order, so serializing unchanged settings twice
    gives identical bytes. Values are restored against the field's type
    annotation, including items of lists, tuples, sets and dicts. Fields
    without an annotation fall back to the type of their current value and
    may only hold plain json inside containers.
    """

    def __init__(self, indent: int = 2, encoding: str = "utf-8"):
        """Initialize the codec.

        Args:
            indent: Indentation of the written JSON
            encoding: Text encoding of the byte stream
        """
        self._indent = indent
        self._encoding = encoding

    def serialize(self, obj: Any) -> bytes:
        hints = _type_hints(type(obj))
        payload = {}
        for name in get_persistable_fields(obj):
            value = getattr(obj, name)
            if not _is_restorable(value, hints.get(name)):
                raise SettingsError(
                    f"Cannot serialize {type(obj).__name__}.{name}: "
                    f"annotate its type to store {type(value).__name__} values"
                )
            try:
                payload[name] = _encode(value)
            except TypeError as e:
                raise SettingsError(f"Cannot serialize {type(obj).__name__}.{name}: {e}") from e

        try:
            text = json.dumps(payload, indent=self._indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SettingsError(f"Cannot serialize {type(obj).__name__}: {e}") from e
        return text.encode(self._encoding)

    def populate(self, data: bytes, target: Any) -> None:
        try:
            payload = json.loads(data.decode(self._encoding))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DeserializationError(f"Settings data is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise DeserializationError("Settings data root is not an object")

        hints = _type_hints(type(target))
        names = set(get_persistable_fields(target))
        for key, raw in payload.items():
            if key not in names:
                logger.debug(f"Skipping unknown field '{key}'")
                continue

            current = getattr(target, key, None)
            try:
                if key in hints:
                    value = _decode(raw, hints[key], current)
                else:
                    value = _decode_by_value(raw, current)
                setattr(target, key, value)
            except Exception as e:
                logger.warning(f"Skipping field '{key}': {e}")
