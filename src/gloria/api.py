"""Shorthand request functions in the style of ``requests.get`` & co.

Every function builds a ``default`` client, sends it and returns the sent
client; ``endpoint`` defers the choice of method and returns the decoded
envelope instead.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .client import Client, default, is_blank, is_valid_method
from .constants import (
    METHOD_DELETE,
    METHOD_GET,
    METHOD_HEAD,
    METHOD_OPTIONS,
    METHOD_PATCH,
    METHOD_POST,
    METHOD_PUT,
)
from .models import Envelope
from .params import ParamValue
from .urls import url_segments

Params = Mapping[str, ParamValue]


def request(
    method: str,
    path: str,
    params: Params | None = None,
    data: Any = None,
    headers: Params | None = None,
    *,
    result_type: Any = Any,
) -> Client[Any]:
    """Build, send and return a client for one request.

    Query parameters embedded in ``path`` take precedence over ``params``.
    OPTIONS requests carry no query parameters; GET and OPTIONS requests
    carry no payload.

    Raises:
        ConfigurationError: For an invalid method, URL or parameter value.
    """
    method = method.upper()
    is_valid_method(method)
    parsed = url_segments(path)

    client = default(result_type)
    client.set_method(method)
    client.set_url(
        parsed.scheme, parsed.host, parsed.base_path, parsed.endpoint
    )

    if method != METHOD_OPTIONS:
        client.set_query_params(parsed.params or params or {})

    if method not in (METHOD_GET, METHOD_OPTIONS) and not is_blank(data):
        client.set_payload(data)

    if headers:
        client.set_headers(headers)

    return client.send()


def get(
    path: str,
    params: Params | None = None,
    headers: Params | None = None,
    *,
    result_type: Any = Any,
) -> Client[Any]:
    return request(
        METHOD_GET, path, params, None, headers, result_type=result_type
    )


def post(
    path: str,
    params: Params | None = None,
    data: Any = None,
    headers: Params | None = None,
    *,
    result_type: Any = Any,
) -> Client[Any]:
    return request(
        METHOD_POST, path, params, data, headers, result_type=result_type
    )


def put(
    path: str,
    params: Params | None = None,
    data: Any = None,
    headers: Params | None = None,
    *,
    result_type: Any = Any,
) -> Client[Any]:
    return request(
        METHOD_PUT, path, params, data, headers, result_type=result_type
    )


def delete(
    path: str,
    params: Params | None = None,
    data: Any = None,
    headers: Params | None = None,
    *,
    result_type: Any = Any,
) -> Client[Any]:
    return request(
        METHOD_DELETE, path, params, data, headers, result_type=result_type
    )


def patch(
    path: str,
    params: Params | None = None,
    data: Any = None,
    headers: Params | None = None,
    *,
    result_type: Any = Any,
) -> Client[Any]:
    return request(
        METHOD_PATCH, path, params, data, headers, result_type=result_type
    )


def head(
    path: str,
    params: Params | None = None,
    headers: Params | None = None,
    *,
    result_type: Any = Any,
) -> Client[Any]:
    return request(
        METHOD_HEAD, path, params, None, headers, result_type=result_type
    )


def options(
    path: str,
    headers: Params | None = None,
    *,
    result_type: Any = Any,
) -> Client[Any]:
    return request(
        METHOD_OPTIONS, path, None, None, headers, result_type=result_type
    )


def endpoint(
    path: str,
    params: Params | None = None,
    data: Any = None,
    headers: Params | None = None,
    *,
    result_type: Any = Any,
) -> Callable[[str], Envelope[Any]]:
    """Bind a request description and pick the method later.

    Example:
        users = endpoint("https://api.example.com/v1/users", {"page": 1})
        envelope = users("GET")
    """

    def execute(method: str) -> Envelope[Any]:
        return request(
            method, path, params, data, headers, result_type=result_type
        ).result

    return execute
