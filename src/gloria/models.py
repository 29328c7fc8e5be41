"""State records held by a Client across its single request lifecycle."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from http.cookiejar import Cookie
from typing import (
    TYPE_CHECKING,
    Generic,
    MutableMapping,
    Optional,
    TypeVar,
    Union,
)

import requests
from pydantic import BaseModel
from requests.structures import CaseInsensitiveDict

from .constants import AUTH_TYPE_BASIC, AUTH_TYPE_BEARER

if TYPE_CHECKING:
    from .transport import HttpTransport

T = TypeVar("T")


@dataclass
class Meta:
    """Request metadata, filled in progressively by the client."""

    method: str = ""
    url: str = ""
    duration_ns: int = 0
    received_at: datetime | None = None

    @property
    def duration(self) -> timedelta:
        return timedelta(microseconds=self.duration_ns / 1000)


@dataclass
class Urls:
    """The four independently settable URL parts."""

    scheme: str = ""
    host: str = ""
    base_path: str = ""
    endpoint: str = ""


@dataclass
class RawUrl(Urls):
    """URL parts plus the query parameters parsed out of a path string."""

    params: dict[str, str] = field(default_factory=dict)


@dataclass
class Header:
    """Header scalars, cookies and free-form extra headers."""

    accept: str = ""
    content_type: str = ""
    language: str = ""
    user_agent: str = ""
    cookies: list[Cookie] = field(default_factory=list)
    extra: dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (
            self.accept
            or self.content_type
            or self.language
            or self.user_agent
            or self.cookies
            or self.extra
        )


@dataclass(frozen=True)
class NoAuth:
    """No Authorization header is sent."""


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str

    auth_type = AUTH_TYPE_BASIC


@dataclass(frozen=True)
class BearerAuth:
    token: str

    auth_type = AUTH_TYPE_BEARER


Authorization = Union[NoAuth, BasicAuth, BearerAuth]


class Envelope(BaseModel, Generic[T]):
    """The ``{code, msg, data}`` wrapper used by enveloped responses.

    In raw mode only ``data`` is filled; ``code`` and ``msg`` keep their
    zero values.
    """

    code: int = 0
    msg: str = ""
    data: Optional[T] = None


class FailureKind(str, enum.Enum):
    TRANSPORT = "transport"
    BUSINESS = "business"


@dataclass
class Failure:
    """Structured record of what went wrong during ``send``.

    A transport failure carries the captured ``error``; a business failure
    carries a ``reason`` taken from the response and leaves ``error`` unset.
    """

    kind: FailureKind
    code_location: str = ""
    error: BaseException | None = None
    reason: str = ""
    occurred_at: int = 0

    @property
    def is_transport(self) -> bool:
        return self.kind is FailureKind.TRANSPORT

    @property
    def is_business(self) -> bool:
        return self.kind is FailureKind.BUSINESS


@dataclass
class WireRequest:
    """A fully materialized request, ready for the transport."""

    method: str
    url: str
    headers: MutableMapping[str, str] = field(
        default_factory=CaseInsensitiveDict
    )
    body: bytes | None = None


@dataclass
class ResponseContext:
    """Transport-level objects produced while sending one request."""

    transport: HttpTransport | None = None
    request: WireRequest | None = None
    response: requests.Response | None = None
    body: bytes = b""

    @property
    def status(self) -> int:
        return self.response.status_code if self.response is not None else 0
