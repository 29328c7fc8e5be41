"""URL parsing, validation and assembly."""

from __future__ import annotations

import ipaddress
import re
from typing import Mapping
from urllib.parse import parse_qs, urlencode, urlsplit

from .constants import ROOT_URL, SIGN_HORIZONTAL, SIGN_SLASH
from .errors import URLParseError
from .models import RawUrl, Urls

_HOST_PATTERN = re.compile(
    r"^(localhost|([a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*)?(:\d{1,5})?)$"
)
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def is_empty_string(value: str) -> bool:
    """Return True for an unset URL part ("" or the "-" placeholder)."""
    return value == "" or value == SIGN_HORIZONTAL


def is_valid_host(host: str) -> bool:
    return _HOST_PATTERN.match(host) is not None


def is_valid_ip_port(value: str) -> bool:
    """Return True for an IP address with an optional 0-65535 port.

    IPv6 addresses with a port must be bracketed (``[::1]:8080``).
    """
    address = value
    port: str | None = None
    if value.startswith("["):
        address, sep, rest = value[1:].partition("]")
        if not sep:
            return False
        if rest:
            if not rest.startswith(":"):
                return False
            port = rest[1:]
    elif value.count(":") == 1:
        address, port = value.split(":")

    if port is not None:
        if not port.isdigit() or int(port) > 65535:
            return False
    try:
        ipaddress.ip_address(address)
    except ValueError:
        return False
    return True


def url_segments(url_path: str) -> RawUrl:
    """Split a bare path or a full URL into its parts.

    A path with a single segment after the root (``/users``) becomes the
    endpoint under a root base path. With more segments the first one is
    the base path and the rest, rejoined, is the endpoint
    (``/v1/users/1`` -> ``/v1`` + ``/users/1``). Multi-valued query keys
    are flattened into comma-joined strings.

    Raises:
        URLParseError: If the string is not a parsable URL.
    """
    if _CONTROL_CHARS.search(url_path):
        raise URLParseError(
            f"URL parsing error: invalid control character in {url_path!r}"
        )
    try:
        parsed = urlsplit(url_path)
        # Accessing the port validates it.
        parsed.port
    except ValueError as exc:
        raise URLParseError(f"URL parsing error: {exc}") from exc

    params = {
        key: ",".join(values)
        for key, values in parse_qs(
            parsed.query, keep_blank_values=True
        ).items()
    }

    seg = RawUrl(
        scheme=parsed.scheme,
        # Userinfo is not part of the host.
        host=parsed.netloc.rpartition("@")[2],
        base_path=ROOT_URL,
        endpoint=ROOT_URL,
        params=params,
    )

    path = parsed.path
    segments = path.split(SIGN_SLASH)
    if len(segments) == 2:
        seg.endpoint = path
    elif len(segments) > 2:
        seg.base_path += segments[1]
        seg.endpoint += SIGN_SLASH.join(segments[2:])
    return seg


def build_url(urls: Urls, params: Mapping[str, str] | None = None) -> str:
    """Join URL parts and append the encoded query string, if any."""
    base_path = "" if urls.base_path in ("", ROOT_URL) else urls.base_path
    url = f"{urls.scheme}://{urls.host}{base_path}{urls.endpoint}"
    if params:
        url = f"{url}?{urlencode(sorted(params.items()))}"
    return url
