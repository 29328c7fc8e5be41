"""Request builder, hook pipeline and dispatcher.

A Client accumulates request configuration through chained setters, sends
it once, and exposes the outcome through accessors. Runtime failures never
escape ``send``: they are recorded on ``client.exception`` and surface only
through ``unwrap``. Configuration mistakes (bad method, bad host,
unsupported parameter types) raise immediately from the setter.

Usage:
    client, _ = (
        new(User)
        .set_request("GET", "https://api.example.com/v1/users/:id", "7")
        .set_bearer_auth(token)
        .send()
        .unwrap()
    )
    user = client.data()

A Client is single-use and must not be shared between threads.
"""

from __future__ import annotations

import logging
import math
import time
from datetime import datetime, timedelta, timezone
from http.cookies import SimpleCookie
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    Mapping,
    Optional,
    TypeVar,
    Union,
)

import requests
from requests.cookies import create_cookie
from requests.structures import CaseInsensitiveDict

from .callbacks import CallbackMixin
from .client_options import ClientOption, with_debug, with_use_logger
from .codec import Codec, OrjsonCodec
from .config import ClientConfig
from .constants import (
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_LANGUAGE,
    HEADER_CONTENT_TYPE,
    HEADER_COOKIE,
    HEADER_USER_AGENT,
    JSON_CONTENT_TYPE,
    LOCAL_HOST,
    LOCAL_PORT,
    LOCALE_EN,
    METHOD_OPTIONS,
    OK_CODE,
    PROTOCOL_HTTP,
    PROTOCOL_HTTPS,
    QUERY_METHODS,
    ROOT_URL,
    SIGN_SLASH,
    STATUS_OK,
    TIMEOUT_MEDIUM,
)
from .errors import (
    BodyReadError,
    CodecError,
    EmptyBodyError,
    HookError,
    IncompleteRequestError,
    InvalidHostError,
    InvalidMethodError,
    InvalidSchemeError,
    TooManyRouteParamsError,
)
from .log import LogLevel, log_event
from .models import (
    Authorization,
    BasicAuth,
    BearerAuth,
    Envelope,
    Failure,
    FailureKind,
    Header,
    Meta,
    NoAuth,
    ResponseContext,
    Urls,
    WireRequest,
)
from .params import ParamValue, to_string_map
from .transport import HttpTransport
from .types import Err
from .urls import (
    build_url,
    is_empty_string,
    is_valid_host,
    is_valid_ip_port,
    url_segments,
)
from .utils import (
    basic_auth,
    bearer_auth,
    code_location,
    sanitize_cookie_name,
    sanitize_cookie_value,
    user_agent,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Hook = Callable[["Client[Any]"], Optional[BaseException]]

_HTTP_VERSIONS = {10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2"}


def is_valid_method(method: str) -> None:
    """Raise InvalidMethodError unless ``method`` is a supported verb."""
    if method not in QUERY_METHODS:
        raise InvalidMethodError(
            f'Must choose one of "{", ".join(QUERY_METHODS)}"'
        )


def is_blank(value: Any) -> bool:
    """Return True for payloads that should not produce a request body."""
    if value is None:
        return True
    if isinstance(value, (str, bytes, bytearray, Mapping, list, tuple)):
        return len(value) == 0
    return False


class Client(CallbackMixin[T], Generic[T]):
    """Single-use HTTP request builder, generic over the result payload.

    Attributes:
        result_type: Type the response payload is decoded into.
        meta: Method, resolved URL, duration and receive time.
        config: Behavioral flags, adjustable until ``send``.
        exception: Failure recorded by ``send``, or None.
        result: Decoded envelope; raw mode only fills ``data``.
        context: Materialized request, transport and raw response.
    """

    def __init__(
        self,
        result_type: Any = Any,
        *,
        config: ClientConfig | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        """Create an empty client.

        Args:
            result_type: Type of the response payload (``data``).
            config: Behavioral flags; defaults to ClientConfig().
            transport: Shared transport to reuse pooled connections. When
                omitted, a transport is created for the request and closed
                after it.
        """
        self.result_type = result_type
        self.meta = Meta()
        self.config = config or ClientConfig()
        self.exception: Failure | None = None
        self.result: Envelope[T] = Envelope()
        self.context = ResponseContext(transport=transport)
        self.before_request: list[Hook] = []
        self.after_response: list[Hook] = []
        self.urls = Urls()
        self.params: dict[str, str] = {}
        self.authorization: Authorization = NoAuth()
        self.headers = Header()
        self.payload: Any = None

    def __repr__(self) -> str:
        return (
            f"<Client method={self.meta.method or '-'} "
            f"url={self.meta.url or '-'} mode={self.echo_mode()!r}>"
        )

    # -- logging -----------------------------------------------------------

    def _chalk(self, level: LogLevel, message: str) -> None:
        location = code_location(2)
        if (
            level in (LogLevel.FAIL, LogLevel.PANIC)
            and self.exception is not None
            and self.exception.code_location
        ):
            location = self.exception.code_location
        log_event(self.config.logger or logger, level, location, message)

    def _debug(self, message: str) -> None:
        if self.config.debug:
            self._chalk(LogLevel.DEBUG, message)

    # -- configuration shortcuts -------------------------------------------

    def optional(self, *fns: ClientOption) -> Client[T]:
        """Apply option functions (``with_*`` or any callable) in order."""
        for fn in fns:
            fn(self)
        return self

    def toggle_mode(self) -> Client[T]:
        """Switch between enveloped and raw response decoding."""
        self.config.rest_mode = not self.config.rest_mode
        return self

    def filter_url_slash(self) -> Client[T]:
        """Trim trailing slashes; call before ``set_url``/``set_request``."""
        self.config.filter_slash = True
        return self

    def define_ok_code(self, code: int) -> Client[T]:
        self.config.ok_code = code
        return self

    def register_codec(self, codec: Codec) -> Client[T]:
        self.config.codec = codec
        return self

    # -- hooks -------------------------------------------------------------

    def use_pre_hooks(self, *hooks: Hook) -> Client[T]:
        """Register hooks run in order right before the request is built.

        A hook reports failure by returning or raising an exception; the
        first failure aborts ``send`` before anything goes on the wire.
        """
        self._debug("inject pre hooks")
        self.before_request.extend(hooks)
        return self

    def use_post_hooks(self, *hooks: Hook) -> Client[T]:
        """Register hooks run in order after the round trip.

        Post hooks see the response status and headers but run before the
        body is read and decoded.
        """
        self._debug("inject post hooks")
        self.after_response.extend(hooks)
        return self

    # -- getters -----------------------------------------------------------

    def get_query(self, key: str) -> str:
        return self.params.get(key, "")

    def get_query_params(self) -> dict[str, str] | None:
        return self.params or None

    def get_header(self, key: str) -> str:
        """Return a header of the materialized request ("" before send)."""
        request = self.context.request
        if request is None:
            return ""
        return request.headers.get(key, "")

    def get_headers(self) -> dict[str, str] | None:
        request = self.context.request
        if request is None or not request.headers:
            return None
        return dict(request.headers)

    def get_cookie(self, name: str) -> str | None:
        """Return a cookie value sent with the materialized request."""
        return (self.get_cookies() or {}).get(name)

    def get_cookies(self) -> dict[str, str] | None:
        header = self.get_header(HEADER_COOKIE)
        if not header:
            return None
        jar: SimpleCookie = SimpleCookie()
        jar.load(header)
        return {name: morsel.value for name, morsel in jar.items()}

    # -- setters -----------------------------------------------------------

    def set_method(self, method: str) -> Client[T]:
        """Set the HTTP method.

        Raises:
            InvalidMethodError: If the method is not a supported verb.
        """
        method = method.upper()
        is_valid_method(method)
        self.meta.method = method
        return self

    def set_url(
        self, scheme: str, host: str, base_path: str, endpoint: str
    ) -> Client[T]:
        """Set all four URL parts; "" or "-" selects a part's default.

        Example:
            client.set_url("https", "example.com", "/api/v1", "/users")
        """
        self.set_scheme(scheme)
        self.set_host(host)
        self.set_base_path(base_path)
        self.set_endpoint(endpoint)
        return self

    def set_scheme(self, scheme: str) -> Client[T]:
        if is_empty_string(scheme):
            scheme = PROTOCOL_HTTP
        if scheme not in (PROTOCOL_HTTP, PROTOCOL_HTTPS):
            self._chalk(
                LogLevel.PANIC,
                "scheme parameter: only support http/https protocol header.",
            )
            raise InvalidSchemeError(
                "scheme parameter: only support http/https protocol header"
            )
        self.urls.scheme = scheme
        return self

    def set_host(self, host: str) -> Client[T]:
        if is_empty_string(host):
            host = f"{LOCAL_HOST}:{LOCAL_PORT}"
        if not is_valid_host(host) and not is_valid_ip_port(host):
            self._chalk(
                LogLevel.PANIC, "Invalid host or IP address with port."
            )
            raise InvalidHostError(
                f"Invalid host or IP address with port: {host!r}"
            )
        self.urls.host = host.rstrip(SIGN_SLASH)
        return self

    def set_base_path(self, base_path: str) -> Client[T]:
        if is_empty_string(base_path):
            self._debug(
                "BaseUri parameter is not set, it is recommended to follow "
                "the principle of minimal URLs when setting it."
            )
            base_path = ROOT_URL
        elif self.config.filter_slash:
            base_path = base_path.rstrip(SIGN_SLASH) or ROOT_URL
        self.urls.base_path = base_path
        return self

    def set_endpoint(self, endpoint: str) -> Client[T]:
        if is_empty_string(endpoint):
            self._debug(
                "No access URL endpoint is set, the root path / will be "
                "accessed by default."
            )
            endpoint = ROOT_URL
        elif self.config.filter_slash:
            endpoint = endpoint.rstrip(SIGN_SLASH) or ROOT_URL
        self.urls.endpoint = endpoint
        return self

    def set_request(
        self, method: str, path: str, *route_values: str
    ) -> Client[T]:
        """Set method and URL from one path, with dynamic routing.

        Up to two route values replace the ``:id`` and ``:sid``
        placeholders, in that order. Query parameters found in the path are
        merged into the client's params (except for OPTIONS).

        Example:
            client.set_request("GET", "/users/:id", "123")
            client.set_request("POST", "/users/:id/:sid", "123", "456")

        Raises:
            TooManyRouteParamsError: If more than two values are given.
        """
        if len(route_values) > 2:
            raise TooManyRouteParamsError(
                "There are too many dynamic routing parameters, which are "
                "not supported for now!"
            )
        for placeholder, value in zip((":id", ":sid"), route_values):
            path = path.replace(placeholder, value, 1)

        parsed = url_segments(path)
        self.set_method(method)
        self.set_url(
            parsed.scheme, parsed.host, parsed.base_path, parsed.endpoint
        )
        if self.meta.method != METHOD_OPTIONS and parsed.params:
            self.set_query_params(parsed.params)
        return self

    def set_query_param(self, key: str, value: str) -> Client[T]:
        self.params[key] = value
        return self

    def set_query_params(
        self, params: Mapping[str, ParamValue]
    ) -> Client[T]:
        """Merge query parameters; later keys override earlier ones.

        Raises:
            UnsupportedTypeError: If a value cannot be coerced to a string.
        """
        converted = to_string_map(params)
        if not self.params:
            self.params = converted
            return self
        self.params.update(converted)
        return self

    def set_header(self, key: str, value: str) -> Client[T]:
        self.headers.extra[key] = value
        return self

    def set_headers(self, headers: Mapping[str, ParamValue]) -> Client[T]:
        """Merge extra headers; later keys override earlier ones.

        Raises:
            UnsupportedTypeError: If a value cannot be coerced to a string.
        """
        converted = to_string_map(headers)
        if not self.headers.extra:
            self.headers.extra = converted
            return self
        self.headers.extra.update(converted)
        return self

    def set_cookie(self, name: str, value: str) -> Client[T]:
        self.headers.cookies.append(create_cookie(name, value))
        return self

    def set_cookies(
        self, cookies: Union[Mapping[str, str], Iterable[Any]]
    ) -> Client[T]:
        """Replace the cookie list with cookies or a name -> value mapping."""
        if isinstance(cookies, Mapping):
            self.headers.cookies = [
                create_cookie(name, value) for name, value in cookies.items()
            ]
        else:
            self.headers.cookies = list(cookies)
        return self

    def set_basic_auth(self, username: str, password: str) -> Client[T]:
        self.authorization = BasicAuth(username, password)
        return self

    def set_bearer_auth(self, token: str) -> Client[T]:
        self.authorization = BearerAuth(token)
        return self

    def set_accept(self, accept: str) -> Client[T]:
        self.headers.accept = accept
        return self

    def set_content_type(self, content_type: str) -> Client[T]:
        self.headers.content_type = content_type
        return self

    def set_language(self, language: str) -> Client[T]:
        self.headers.language = language
        return self

    def set_user_agent(self, ua: str) -> Client[T]:
        self.headers.user_agent = ua
        return self

    def set_json_payload(self, data: Mapping[str, Any]) -> Client[T]:
        self.payload = data
        return self

    def set_payload(self, data: Any) -> Client[T]:
        """Set the request body; bytes are sent as-is, anything else goes
        through the configured codec."""
        self.payload = data
        return self

    # -- dispatch ----------------------------------------------------------

    def _fail(self, error: BaseException) -> None:
        self.exception = Failure(
            kind=FailureKind.TRANSPORT,
            code_location=code_location(1),
            error=error,
            occurred_at=int(time.time()),
        )
        self._debug(f"request aborted: {type(error).__name__}: {error}")

    def _run_hooks(self, hooks: list[Hook]) -> bool:
        for hook in hooks:
            try:
                error = hook(self)
            except Exception as exc:
                error = exc
            if error is None:
                continue
            if not isinstance(error, BaseException):
                error = HookError(f"hook {hook!r} returned {error!r}")
            self._fail(error)
            return False
        return True

    def _parse_full_url(self) -> None:
        # A URL assigned to meta before send is used verbatim.
        if not is_empty_string(self.meta.url):
            return
        if not self.urls.host:
            raise IncompleteRequestError(
                "An incomplete request, must set the request URL."
            )
        self.meta.url = build_url(self.urls, self.params)

    def _build_headers(self) -> CaseInsensitiveDict[str]:
        headers: CaseInsensitiveDict[str] = CaseInsensitiveDict()
        if self.headers.extra:
            headers = CaseInsensitiveDict(self.headers.extra)

        layered = (
            (HEADER_USER_AGENT, self.headers.user_agent),
            (HEADER_ACCEPT, self.headers.accept),
            (HEADER_CONTENT_TYPE, self.headers.content_type),
            (HEADER_CONTENT_LANGUAGE, self.headers.language),
        )
        for key, value in layered:
            if value:
                headers[key] = value

        auth = self.authorization
        if isinstance(auth, BasicAuth):
            headers[HEADER_AUTHORIZATION] = basic_auth(
                auth.username, auth.password
            )
        elif isinstance(auth, BearerAuth):
            headers[HEADER_AUTHORIZATION] = bearer_auth(auth.token)

        if self.headers.cookies:
            headers[HEADER_COOKIE] = "; ".join(
                f"{sanitize_cookie_name(cookie.name)}="
                f"{sanitize_cookie_value(cookie.value or '')}"
                for cookie in self.headers.cookies
            )
        return headers

    def _create_request(self) -> WireRequest:
        """Materialize builder state into a WireRequest.

        Raises:
            IncompleteRequestError: If method or URL is missing.
            CodecError: If the payload cannot be encoded.
        """
        if is_empty_string(self.meta.method):
            raise IncompleteRequestError(
                "An incomplete request, must set the request method."
            )
        self._parse_full_url()

        body: bytes | None = None
        if not is_blank(self.payload):
            if isinstance(self.payload, (bytes, bytearray)):
                body = bytes(self.payload)
            else:
                body = self.config.codec.marshal(self.payload)

        return WireRequest(
            method=self.meta.method,
            url=self.meta.url,
            headers=self._build_headers(),
            body=body,
        )

    def _decode(self, body: bytes) -> None:
        codec = self.config.codec
        if self.config.rest_mode:
            self.result = codec.unmarshal(body, Envelope[self.result_type])
        else:
            self.result.data = codec.unmarshal(body, self.result_type)

    def send(self) -> Client[T]:
        """Run hooks, send the request and decode the response.

        Never raises for runtime failures: check ``exception`` or call
        ``unwrap``. A non-200 status with a decodable body records a
        business failure and keeps the decoded data available.

        Raises:
            IncompleteRequestError: If method or URL was never set.
        """
        if not self._run_hooks(self.before_request):
            return self

        try:
            request = self._create_request()
        except CodecError as exc:
            self._fail(exc)
            return self
        self.context.request = request

        transport = self.context.transport
        owns_transport = transport is None
        if transport is None:
            transport = HttpTransport(self.config.transport_config())
            self.context.transport = transport

        try:
            self._dispatch(transport, request)
        finally:
            if owns_transport:
                transport.close()
        return self

    def _dispatch(
        self, transport: HttpTransport, request: WireRequest
    ) -> None:
        start = time.perf_counter_ns()
        # Per-client settings apply to shared transports too.
        outcome = transport.send(
            request,
            timeout=self.config.timeout_seconds,
            verify=False if self.config.skip_tls else None,
            logger=self.config.logger,
        )
        self.meta.duration_ns = time.perf_counter_ns() - start
        self.meta.received_at = datetime.now(timezone.utc)

        if isinstance(outcome, Err):
            self._fail(outcome.error)
            return

        response = outcome.value
        self.context.response = response
        try:
            if not self._run_hooks(self.after_response):
                return

            try:
                body = response.content
            except requests.exceptions.RequestException as exc:
                self._fail(BodyReadError(str(exc)))
                return
        finally:
            response.close()

        self.context.body = body
        if not body:
            self._fail(EmptyBodyError("response body length is 0"))
            return

        try:
            self._decode(body)
        except CodecError as exc:
            self._fail(exc)
            return

        self._debug(body.decode("utf-8", errors="replace"))

        if response.status_code != STATUS_OK:
            self.exception = Failure(
                kind=FailureKind.BUSINESS,
                code_location=code_location(0),
                reason=self.result.msg
                or response.reason
                or f"HTTP {response.status_code}",
                occurred_at=int(time.time()),
            )

    # -- accessors ---------------------------------------------------------

    def unwrap(self) -> tuple[Client[T], str]:
        """Surface the recorded failure.

        Returns:
            The client and a diagnostic line for a business failure, or ""
            when the request succeeded.

        Raises:
            HttpClientError: The captured error of a transport failure
                (hook errors are re-raised as they were returned).
        """
        failure = self.exception
        if failure is None:
            return self, ""
        if failure.is_transport and failure.error is not None:
            raise failure.error
        status = self.context.status
        reason = self.context.response.reason if self.context.response else ""
        return self, (
            f"HTTP request method: [{self.meta.method}], "
            f'HTTP request url path: "{self.meta.url}", '
            "HTTP response status code and description: "
            f"\"{status} {reason}\", "
            f"business error code: {self.result.code}, "
            f'business error reason: "{failure.reason}", '
            f"occurrence time: {failure.occurred_at}"
        )

    def data(self) -> T | None:
        return self.result.data

    def to_json(self, target: Any = Any) -> Any:
        """Decode the stored response body into another type.

        Raises:
            EmptyBodyError: If no body was received.
            CodecError: If the body does not decode into ``target``.
        """
        if not self.context.body:
            raise EmptyBodyError("response body length is 0")
        return self.config.codec.unmarshal(self.context.body, target)

    def echo_qps(self) -> float:
        """Approximate queries per second as 1 / duration of this request.

        This is a single-sample estimate, not a measured rate; it is
        ``math.inf`` when no duration was recorded.
        """
        seconds = self.meta.duration_ns / 1e9
        qps = math.inf if seconds == 0 else 1 / seconds
        self._debug(
            "An approximate calculation of Queries Per Second (QPS) yields "
            f"a result of: {qps:.6f}. Please note that this calculation may "
            "not be entirely accurate."
        )
        return qps

    def echo_time(self) -> tuple[timedelta, datetime | None]:
        return self.meta.duration, self.meta.received_at

    def echo_benchmark(self) -> tuple[int, int]:
        """Return (rounded QPS, duration in nanoseconds)."""
        qps = self.echo_qps()
        count = round(qps) if math.isfinite(qps) else 0
        return count, self.meta.duration_ns

    def echo_proto(self) -> str:
        response = self.context.response
        if response is None:
            return ""
        version = getattr(response.raw, "version", None)
        return _HTTP_VERSIONS.get(version, "") if version else ""

    def echo_code(self) -> tuple[int, int]:
        """Return (HTTP status code, business code)."""
        return self.context.status, self.result.code

    def echo_message(self) -> tuple[str, str]:
        """Return (HTTP reason phrase, business message)."""
        response = self.context.response
        reason = response.reason if response is not None else ""
        return reason or "", self.result.msg

    def echo_mode(self) -> str:
        if self.config.rest_mode:
            return "RESTful Response"
        return "HTTP Response"

    def echo_url(self) -> tuple[str, str]:
        return self.meta.method, self.meta.url

    def insights(self) -> str:
        """Multi-line summary of the request, as printed by ``echo``."""
        lines = ["[API Call Insights]"]
        failure = self.exception
        if failure is not None:
            lines.append(f"  Kind       : {failure.kind.value}")
            lines.append(f"  Error      : {failure.error!r}")
            lines.append(f"  Reason     : {failure.reason}")
            lines.append(f"  Location   : {failure.code_location}")
            lines.append(f"  Occurrence : {failure.occurred_at}")
            return "\n".join(lines)

        method, url = self.echo_url()
        status_code, code = self.echo_code()
        status_msg, msg = self.echo_message()
        executions, ns_per_op = self.echo_benchmark()
        duration, received_at = self.echo_time()
        lines.append(f"  Mode       : {self.echo_mode()}")
        lines.append("  Error      : None")
        lines.append(f"  Method     : {method}")
        lines.append(f"  URL        : {url}")
        if self.config.rest_mode:
            lines.append(f"  Status Code: {status_code}")
            lines.append(f"  Status Desc: {status_msg}")
            lines.append(f"  Return Code: {code}")
            lines.append(f"  Return Msg : {msg}")
        else:
            lines.append(f"  Status     : {status_code} {status_msg}")
        lines.append(f"  Benchmark  : {executions}\t{ns_per_op} ns/op")
        lines.append(f"  Proto      : {self.echo_proto()}")
        lines.append(f"  QPS        : {self.echo_qps():.6f}")
        lines.append(f"  Duration   : {duration}")
        if received_at is not None:
            stamp = received_at.strftime("%A, %d-%b-%y %H:%M:%S %Z")
            lines.append(f"  Received At: {stamp}")
        lines.append("  Body       : -")
        return "\n".join(lines)

    def echo(self) -> None:
        print(self.insights())


def _default_headers_hook(client: Client[Any]) -> None:
    if client.headers.is_empty():
        client.headers = Header(
            accept=JSON_CONTENT_TYPE,
            content_type=JSON_CONTENT_TYPE,
            language=LOCALE_EN,
            user_agent=user_agent(),
        )


def _default_settings(client: Client[Any]) -> None:
    client.config.skip_tls = True
    client.config.timeout_seconds = TIMEOUT_MEDIUM
    client.config.rest_mode = True
    client.config.ok_code = OK_CODE
    client.config.codec = OrjsonCodec()


def new(result_type: Any = Any) -> Client[Any]:
    """Empty client in enveloped mode with the stdlib JSON codec."""
    return Client(result_type)


def default(result_type: Any = Any) -> Client[Any]:
    """Client with a ready-made setup.

    Presets: debug off, console logger on, TLS verification skipped, 30s
    timeout, enveloped mode, ok code 0, orjson codec. A pre-hook fills in
    JSON Accept/Content-Type, English Content-Language and the gloria
    User-Agent when no header field was set.
    """
    client = new(result_type)
    client.optional(
        with_debug(False),
        with_use_logger(True),
        _default_settings,
    )
    client.use_pre_hooks(_default_headers_hook)
    return client


def new_rest(result_type: Any = Any) -> Client[Any]:
    """Empty client in enveloped mode."""
    return new(result_type)


def new_http(result_type: Any = Any) -> Client[Any]:
    """Empty client in raw mode."""
    return new(result_type).toggle_mode()
