"""Codecs turning settings objects into bytes and back."""

from .base import Codec, get_persistable_fields
from .json_codec import JsonCodec

__all__ = ["Codec", "JsonCodec", "get_persistable_fields"]
