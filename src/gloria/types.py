"""Result value types returned by the transport layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Literal, Mapping, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


def _empty_meta() -> Mapping[str, Any]:
    return {}


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value and request metadata."""

    value: T
    meta: Mapping[str, Any] = field(default_factory=_empty_meta)

    @property
    def ok(self) -> Literal[True]:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying the error and request metadata."""

    error: E
    meta: Mapping[str, Any] = field(default_factory=_empty_meta)

    @property
    def ok(self) -> Literal[False]:
        return False


Result = Union[Ok[T], Err[E]]
