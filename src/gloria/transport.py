"""Blocking HTTP transport used by the dispatcher.

The transport executes one materialized request and reports either the
response or a mapped error plus request metadata. It is policy-free: no
retries, no backoff. A single transport may be shared across clients to
reuse the pooled connections of its ``requests.Session``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import requests
from requests.structures import CaseInsensitiveDict

from .config import TransportConfig
from .errors import HttpClientError, NetworkError, RequestTimeoutError
from .log import LogLevel, log_event
from .models import WireRequest
from .types import Err, Ok, Result


def _wire_headers(
    headers: Mapping[str, str]
) -> CaseInsensitiveDict[str | bytes]:
    """Copy headers, encoding values outside latin-1 as UTF-8 bytes.

    ``http.client`` only accepts latin-1 text; bytes go out verbatim.
    """
    wire: CaseInsensitiveDict[str | bytes] = CaseInsensitiveDict()
    for key, value in headers.items():
        try:
            value.encode("latin-1")
        except UnicodeEncodeError:
            wire[key] = value.encode("utf-8")
        else:
            wire[key] = value
    return wire


class HttpTransport:
    """Executes WireRequests through a pooled ``requests.Session``."""

    def __init__(self, config: TransportConfig | None = None) -> None:
        """Create a new HttpTransport.

        Args:
            config: Timeouts, TLS verification and logging settings.
        """
        self._config = config or TransportConfig()
        self._session = requests.Session()
        self._session.headers.update(self._config.default_headers)

    @property
    def config(self) -> TransportConfig:
        return self._config

    def _get_timeout(
        self, override: float | None
    ) -> float | tuple[float, float] | None:
        """Resolve timeout preference."""
        if override is not None:
            if override <= 0:
                raise ValueError("timeout override must be > 0 when provided")
            return override
        if (
            self._config.connect_timeout_seconds is not None
            and self._config.read_timeout_seconds is not None
        ):
            return (
                self._config.connect_timeout_seconds,
                self._config.read_timeout_seconds,
            )
        return self._config.timeout_seconds

    def _build_meta(
        self,
        request: WireRequest,
        response: requests.Response | None,
        timeout: float | tuple[float, float] | None,
        elapsed_s: float,
        final_error: str | None = None,
    ) -> dict[str, Any]:
        """Construct metadata dictionary from the request and response."""
        meta: dict[str, Any] = {}
        meta["method"] = request.method
        meta["url"] = request.url
        meta["timeout_s"] = timeout
        meta["elapsed_s"] = elapsed_s

        if response is not None:
            meta["status_code"] = response.status_code
            meta["url"] = response.url
            meta["reason"] = response.reason
        if final_error is not None:
            meta["final_error"] = final_error

        return meta

    def _map_exception(self, e: Exception) -> HttpClientError:
        """Map requests exceptions to gloria errors."""
        if isinstance(e, requests.exceptions.Timeout):
            return RequestTimeoutError(str(e))

        if isinstance(e, requests.exceptions.ConnectionError):
            return NetworkError(str(e))

        return HttpClientError(str(e))

    def _log_round_trip(
        self,
        request: WireRequest,
        status: int,
        elapsed_s: float,
        error: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        logger = logger or self._config.logger
        if logger is None:
            return
        message = (
            f"[{status}] [{request.method}] {request.url} | "
            f"Request took {elapsed_s:.6f}s"
        )
        level = LogLevel.SUCCESS
        if error is not None:
            level = LogLevel.PANIC
            message = f"{message} | {error}"
        elif elapsed_s > self._config.slow_threshold_seconds:
            level = LogLevel.WARN
        log_event(logger, level, "transport", message)

    def send(
        self,
        request: WireRequest,
        *,
        timeout: float | None = None,
        verify: bool | None = None,
        logger: logging.Logger | None = None,
    ) -> Result[requests.Response, Exception]:
        """Execute one request.

        The response is fetched with ``stream=True``: the body stays unread
        until the caller touches ``response.content``.

        Args:
            request: The materialized request.
            timeout: Per-request timeout overriding the configured one.
            verify: Per-request TLS verification overriding ``verify_tls``.
            logger: Per-request round-trip logger overriding the configured
                one.

        Returns:
            Result containing the response on success, or a mapped error.
        """
        timeout = self._get_timeout(timeout)
        if verify is None:
            verify = self._config.verify_tls
        start = time.perf_counter()
        try:
            response = self._session.request(
                request.method,
                request.url,
                headers=_wire_headers(request.headers),
                data=request.body,
                timeout=timeout,
                verify=verify,
                stream=True,
            )
        except (requests.exceptions.RequestException, ValueError) as exc:
            # ValueError covers header text http.client refuses to encode.
            elapsed_s = time.perf_counter() - start
            self._log_round_trip(
                request,
                0,
                elapsed_s,
                error=type(exc).__name__,
                logger=logger,
            )
            return Err(
                self._map_exception(exc),
                meta=self._build_meta(
                    request,
                    getattr(exc, "response", None),
                    timeout,
                    elapsed_s,
                    final_error=type(exc).__name__,
                ),
            )

        elapsed_s = time.perf_counter() - start
        self._log_round_trip(
            request, response.status_code, elapsed_s, logger=logger
        )
        return Ok(
            response,
            meta=self._build_meta(request, response, timeout, elapsed_s),
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
