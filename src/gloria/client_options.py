"""Option functions applied to a Client through ``Client.optional``.

Each ``with_*`` call returns a function of one Client. Any other callable
with the same shape (a lambda, for instance) is accepted as well.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from .codec import Codec
from .config import clamp_timeout
from .log import console_logger

if TYPE_CHECKING:
    from .client import Client

ClientOption = Callable[["Client[Any]"], None]


def with_timeout(seconds: float) -> ClientOption:
    """Set the request timeout, clamped to the short/long bounds."""

    def apply(client: Client[Any]) -> None:
        client.config.timeout_seconds = clamp_timeout(seconds)

    return apply


def with_skip_tls(skip_tls: bool) -> ClientOption:
    def apply(client: Client[Any]) -> None:
        client.config.skip_tls = skip_tls

    return apply


def with_debug(debug: bool) -> ClientOption:
    def apply(client: Client[Any]) -> None:
        client.config.debug = debug

    return apply


def with_use_logger(enabled: bool) -> ClientOption:
    """Attach the stdout console logger when ``enabled``.

    Disabling leaves any logger already configured in place.
    """

    def apply(client: Client[Any]) -> None:
        if enabled:
            client.config.logger = console_logger()

    return apply


def with_codec(codec: Codec) -> ClientOption:
    def apply(client: Client[Any]) -> None:
        client.config.codec = codec

    return apply


def with_filter_slash(filter_slash: bool) -> ClientOption:
    """Trim trailing slashes from base path and endpoint.

    Only affects URL parts set after the option is applied.
    """

    def apply(client: Client[Any]) -> None:
        client.config.filter_slash = filter_slash

    return apply


def with_rest_mode(rest_mode: bool) -> ClientOption:
    def apply(client: Client[Any]) -> None:
        client.config.rest_mode = rest_mode

    return apply


def with_ok_code(code: int) -> ClientOption:
    def apply(client: Client[Any]) -> None:
        client.config.ok_code = code

    return apply
