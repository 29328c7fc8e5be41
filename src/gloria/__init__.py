"""gloria: a small HTTP client convenience layer.

Requests are assembled on a single-use Client, sent once, and decoded
either as a ``{code, msg, data}`` envelope or as a raw body into the
caller's declared type.
"""

from .api import (
    delete,
    endpoint,
    get,
    head,
    options,
    patch,
    post,
    put,
    request,
)
from .client import Client, default, new, new_http, new_rest
from .client_options import (
    with_codec,
    with_debug,
    with_filter_slash,
    with_ok_code,
    with_rest_mode,
    with_skip_tls,
    with_timeout,
    with_use_logger,
)
from .codec import Codec, JSONCodec, OrjsonCodec
from .config import ClientConfig, TransportConfig
from .errors import (
    BodyReadError,
    CodecError,
    ConfigurationError,
    EmptyBodyError,
    GloriaError,
    HookError,
    HttpClientError,
    IncompleteRequestError,
    InvalidHostError,
    InvalidMethodError,
    InvalidSchemeError,
    NetworkError,
    RequestTimeoutError,
    TooManyRouteParamsError,
    UnsupportedTypeError,
    URLParseError,
)
from .log import LogLevel, console_logger
from .models import Envelope, Failure, FailureKind
from .transport import HttpTransport
from .utils import timed
from .version import VERSION as __version__

__all__ = [
    "BodyReadError",
    "Client",
    "ClientConfig",
    "Codec",
    "CodecError",
    "ConfigurationError",
    "EmptyBodyError",
    "Envelope",
    "Failure",
    "FailureKind",
    "GloriaError",
    "HookError",
    "HttpClientError",
    "HttpTransport",
    "IncompleteRequestError",
    "InvalidHostError",
    "InvalidMethodError",
    "InvalidSchemeError",
    "JSONCodec",
    "LogLevel",
    "NetworkError",
    "OrjsonCodec",
    "RequestTimeoutError",
    "TooManyRouteParamsError",
    "TransportConfig",
    "URLParseError",
    "UnsupportedTypeError",
    "__version__",
    "console_logger",
    "default",
    "delete",
    "endpoint",
    "get",
    "head",
    "new",
    "new_http",
    "new_rest",
    "options",
    "patch",
    "post",
    "put",
    "request",
    "timed",
    "with_codec",
    "with_debug",
    "with_filter_slash",
    "with_ok_code",
    "with_rest_mode",
    "with_skip_tls",
    "with_timeout",
    "with_use_logger",
]
