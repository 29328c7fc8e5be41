"""Error taxonomy for gloria.

Two families live here. Configuration errors are raised on the spot by the
offending setter and are never captured by the client. Transport errors are
captured into the client's failure record during ``send`` and only surface
when the caller asks for them through ``Client.unwrap``.
"""

from __future__ import annotations


class GloriaError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(GloriaError, ValueError):
    """Static request configuration is invalid (programmer error)."""


class InvalidMethodError(ConfigurationError):
    """HTTP method is not one of the supported verbs."""


class InvalidSchemeError(ConfigurationError):
    """URL scheme is neither http nor https."""


class InvalidHostError(ConfigurationError):
    """Host is not a valid hostname or IP address with optional port."""


class URLParseError(ConfigurationError):
    """A path or URL string could not be parsed."""


class UnsupportedTypeError(ConfigurationError):
    """A parameter or header value has a type that cannot be coerced."""

    def __init__(self, key: str, value: object) -> None:
        super().__init__(
            f"Unsupported value type for key '{key}': "
            f"{type(value).__name__}"
        )
        self.key = key
        self.value = value


class TooManyRouteParamsError(ConfigurationError):
    """More dynamic route values were given than placeholders exist."""


class IncompleteRequestError(ConfigurationError):
    """The request cannot be materialized (e.g. no method was set)."""


class HttpClientError(GloriaError):
    """Base class for failures captured while a request is in flight."""


class RequestTimeoutError(HttpClientError):
    """The transport gave up waiting for the server."""


class NetworkError(HttpClientError):
    """The connection could not be established or was dropped."""


class BodyReadError(HttpClientError):
    """The response body could not be read."""


class EmptyBodyError(HttpClientError):
    """The response body was empty."""


class CodecError(HttpClientError):
    """A payload could not be encoded or a body could not be decoded."""


class HookError(HttpClientError):
    """A pre- or post-request hook reported a failure."""
