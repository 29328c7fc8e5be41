"""Configuration models for the transport and the request builder."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .codec import Codec, JSONCodec
from .constants import OK_CODE, TIMEOUT_LONG, TIMEOUT_SHORT


def _default_headers() -> Mapping[str, str]:
    """Return immutable empty default headers mapping."""

    return MappingProxyType({})


def clamp_timeout(seconds: float) -> float:
    """Clamp a timeout into the ``[TIMEOUT_SHORT, TIMEOUT_LONG]`` range."""
    return min(max(seconds, TIMEOUT_SHORT), TIMEOUT_LONG)


@dataclass(frozen=True)
class TransportConfig:
    """Configuration for HttpTransport behavior.

    ``slow_threshold_seconds`` decides whether a logged round trip is
    reported as a success or as a slow-request warning.
    """

    default_headers: Mapping[str, str] = field(default_factory=_default_headers)
    verify_tls: bool = True
    connect_timeout_seconds: float | None = None
    read_timeout_seconds: float | None = None
    timeout_seconds: float | None = None
    slow_threshold_seconds: float = TIMEOUT_SHORT
    logger: logging.Logger | None = None

    def __post_init__(self) -> None:
        has_connect_timeout = self.connect_timeout_seconds is not None
        has_read_timeout = self.read_timeout_seconds is not None
        if has_connect_timeout != has_read_timeout:
            raise ValueError(
                "connect_timeout_seconds and read_timeout_seconds "
                "must be set together"
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0 when provided")
        if (
            self.connect_timeout_seconds is not None
            and self.connect_timeout_seconds <= 0
        ):
            raise ValueError(
                "connect_timeout_seconds must be > 0 when provided"
            )
        if (
            self.read_timeout_seconds is not None
            and self.read_timeout_seconds <= 0
        ):
            raise ValueError("read_timeout_seconds must be > 0 when provided")
        if self.slow_threshold_seconds < 0:
            raise ValueError("slow_threshold_seconds must be >= 0")

        # Freeze copied headers to avoid post-init mutation side effects.
        object.__setattr__(
            self,
            "default_headers",
            MappingProxyType(dict(self.default_headers)),
        )


@dataclass
class ClientConfig:
    """Behavioral flags of a single Client.

    Unlike TransportConfig this stays mutable: option functions adjust it
    between construction and ``send``.
    """

    timeout_seconds: float | None = None
    skip_tls: bool = False
    filter_slash: bool = False
    debug: bool = False
    logger: logging.Logger | None = None
    rest_mode: bool = True
    ok_code: int = OK_CODE
    codec: Codec = field(default_factory=JSONCodec)

    def __post_init__(self) -> None:
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0 when provided")

    def transport_config(self) -> TransportConfig:
        """Derive the transport settings for one request."""
        return TransportConfig(
            verify_tls=not self.skip_tls,
            timeout_seconds=self.timeout_seconds,
            logger=self.logger,
        )
