"""Small helpers shared across the package."""

from __future__ import annotations

import base64
import functools
import logging
import os
import platform
import sys
import time
from typing import Any, Callable, TypeVar

from .constants import AUTH_TYPE_BASIC, AUTH_TYPE_BEARER
from .version import TITLE, VERSION

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def user_agent() -> str:
    """Build the default User-Agent, e.g.
    ``Gloria/1.0.0 (linux x86_64) Python/3.12.1``."""
    return (
        f"{TITLE}/{VERSION} ({sys.platform} {platform.machine()}) "
        f"Python/{platform.python_version()}"
    )


def bearer_auth(token: str) -> str:
    return f"{AUTH_TYPE_BEARER} {token}"


def basic_auth(username: str, password: str) -> str:
    credentials = base64.b64encode(
        f"{username}:{password}".encode("utf-8")
    ).decode("ascii")
    return f"{AUTH_TYPE_BASIC} {credentials}"


_COOKIE_VALUE_EXCLUDED = frozenset('";\\')


def sanitize_cookie_name(name: str) -> str:
    return name.replace("\n", "-").replace("\r", "-")


def sanitize_cookie_value(value: str) -> str:
    """Make a value safe for the ``Cookie`` header.

    Characters outside printable ASCII and ``"``, ``;``, ``\\`` are dropped,
    so a value cannot smuggle in a second cookie. A value containing a space
    or a comma is double-quoted.
    """
    value = "".join(
        ch
        for ch in value
        if " " <= ch < "\x7f" and ch not in _COOKIE_VALUE_EXCLUDED
    )
    if value and (" " in value or "," in value):
        return f'"{value}"'
    return value


def code_location(depth: int = 1) -> str:
    """Return ``file.py:line`` for the frame ``depth`` levels above the
    caller."""
    frame = sys._getframe(depth + 1)
    return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"


def timed(fn: F) -> F:
    """Decorator logging how long each call of ``fn`` took.

    Exceptions raised by ``fn`` propagate unchanged.
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start = time.perf_counter()
        try:
            return fn(*args, **kwargs)
        finally:
            logger.info(
                "api request duration: %.6fs (%s)",
                time.perf_counter() - start,
                fn.__qualname__,
            )

    return wrapper  # type: ignore[return-value]
