"""Swappable serialization backends.

A codec turns request payloads into bytes and response bodies into values
of the caller's declared type. Both JSON codecs share the same typed
decoding step (pydantic ``TypeAdapter``), they only differ in the JSON
library doing the byte-level work.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

import orjson
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .errors import CodecError


@runtime_checkable
class Codec(Protocol):
    def marshal(self, value: Any) -> bytes:
        """Encode a value into bytes."""
        ...

    def unmarshal(self, data: bytes, target: Any) -> Any:
        """Decode bytes into an instance of ``target``."""
        ...


@lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def validate(value: Any, target: Any) -> Any:
    """Coerce already-decoded JSON data into ``target``."""
    if target is Any:
        return value
    return _adapter(target).validate_python(value)


class JSONCodec:
    """Codec backed by the standard library ``json`` module."""

    def marshal(self, value: Any) -> bytes:
        try:
            return json.dumps(
                to_jsonable_python(value), ensure_ascii=False
            ).encode("utf-8")
        except (TypeError, ValueError, PydanticSerializationError) as exc:
            raise CodecError(f"failed to encode payload: {exc}") from exc

    def unmarshal(self, data: bytes, target: Any) -> Any:
        try:
            return validate(json.loads(data), target)
        except (ValueError, ValidationError) as exc:
            raise CodecError(f"failed to decode body: {exc}") from exc

    def __repr__(self) -> str:
        return "JSONCodec()"


class OrjsonCodec:
    """Codec backed by ``orjson``."""

    def marshal(self, value: Any) -> bytes:
        try:
            return orjson.dumps(value, default=to_jsonable_python)
        except (TypeError, PydanticSerializationError) as exc:
            raise CodecError(f"failed to encode payload: {exc}") from exc

    def unmarshal(self, data: bytes, target: Any) -> Any:
        try:
            return validate(orjson.loads(data), target)
        except (ValueError, ValidationError) as exc:
            raise CodecError(f"failed to decode body: {exc}") from exc

    def __repr__(self) -> str:
        return "OrjsonCodec()"
