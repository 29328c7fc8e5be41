"""Coercion of heterogeneous parameter mappings into string mappings."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Mapping, Union

from .errors import UnsupportedTypeError

ParamValue = Union[str, int, float, bool, list[str], list[int]]


def format_float(value: float) -> str:
    """Shortest round-trip decimal form without exponent or trailing zeros,
    e.g. ``1.5``, ``2``, ``0.00001``. Non-finite values render as
    ``+Inf``, ``-Inf`` and ``NaN``."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _coerce(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, (list, tuple)):
        if all(isinstance(item, str) for item in value):
            return ",".join(value)
        if all(
            isinstance(item, int) and not isinstance(item, bool)
            for item in value
        ):
            return ",".join(str(item) for item in value)
    raise UnsupportedTypeError(key, value)


def to_string_map(values: Mapping[str, Any]) -> dict[str, str]:
    """Convert a mapping of supported values into a str -> str mapping.

    Raises:
        UnsupportedTypeError: For the first key whose value cannot be
            coerced.
    """
    return {key: _coerce(key, value) for key, value in values.items()}
