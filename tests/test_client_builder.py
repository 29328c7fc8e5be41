# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
# pyright: reportMissingParameterType=false
import logging

import pytest

from gloria import (
    with_codec,
    with_debug,
    with_filter_slash,
    with_ok_code,
    with_rest_mode,
    with_skip_tls,
    with_timeout,
    with_use_logger,
)
from gloria.client import Client, new, new_http, new_rest
from gloria.codec import OrjsonCodec
from gloria.errors import (
    ConfigurationError,
    InvalidHostError,
    InvalidMethodError,
    InvalidSchemeError,
    TooManyRouteParamsError,
    UnsupportedTypeError,
)
from gloria.log import CONSOLE_LOGGER_NAME
from gloria.models import BasicAuth, BearerAuth, NoAuth


@pytest.fixture
def client():
    return new()


@pytest.mark.parametrize(
    "method", ["get", "Post", "PUT", "delete", "patch", "head", "options"]
)
def test_set_method_uppercases_supported_verbs(client, method):
    client.set_method(method)

    assert client.meta.method == method.upper()


@pytest.mark.parametrize("method", ["FETCH", "", "CONNECT", "TRACE"])
def test_set_method_rejects_unknown_verbs(client, method):
    with pytest.raises(InvalidMethodError):
        client.set_method(method)


def test_configuration_errors_are_value_errors(client):
    with pytest.raises(ValueError):
        client.set_method("FETCH")
    with pytest.raises(ConfigurationError):
        client.set_host("bad host")


def test_set_request_substitutes_single_route_value(client):
    client.set_request("get", "/users/:id", "123")

    assert client.meta.method == "GET"
    assert client.urls.base_path + client.urls.endpoint == "/users/123"
    assert client.urls.scheme == "http"
    assert client.urls.host == "127.0.0.1:8080"


def test_set_request_substitutes_two_route_values(client):
    client.set_request("POST", "https://api.example.com/v1/:id/:sid", "7", "9")

    assert client.urls.scheme == "https"
    assert client.urls.host == "api.example.com"
    assert client.urls.base_path == "/v1"
    assert client.urls.endpoint == "/7/9"


def test_set_request_rejects_too_many_route_values(client):
    with pytest.raises(TooManyRouteParamsError):
        client.set_request("GET", "/a/:id/:sid", "1", "2", "3")


def test_set_request_merges_query_from_path(client):
    client.set_query_params({"page": 1, "size": 10})
    client.set_request("GET", "http://example.com/v1/users?page=2&tag=a&tag=b")

    assert client.params == {"page": "2", "size": "10", "tag": "a,b"}


def test_set_request_ignores_query_for_options(client):
    client.set_request("OPTIONS", "http://example.com/v1/users?page=2")

    assert client.params == {}


def test_set_request_rejects_unsupported_scheme(client):
    with pytest.raises(InvalidSchemeError):
        client.set_request("GET", "ftp://example.com/files")


def test_set_url_placeholders_select_defaults(client):
    client.set_url("", "-", "", "-")

    assert client.urls.scheme == "http"
    assert client.urls.host == "127.0.0.1:8080"
    assert client.urls.base_path == "/"
    assert client.urls.endpoint == "/"


@pytest.mark.parametrize(
    "host", ["example.com", "localhost:9000", "10.0.0.1:8080", "[::1]:8080"]
)
def test_set_host_accepts_hosts_and_ip_ports(client, host):
    client.set_host(host)

    assert client.urls.host == host


def test_set_host_rejects_invalid_host(client):
    with pytest.raises(InvalidHostError):
        client.set_host("exa mple.com")


def test_filter_slash_trims_trailing_slashes(client):
    client.filter_url_slash().set_url(
        "https", "example.com", "/api/v1/", "/users/"
    )

    assert client.urls.base_path == "/api/v1"
    assert client.urls.endpoint == "/users"


def test_filter_slash_keeps_root(client):
    client.optional(with_filter_slash(True)).set_url(
        "https", "example.com", "/", "//"
    )

    assert client.urls.base_path == "/"
    assert client.urls.endpoint == "/"


def test_trailing_slashes_kept_without_filter(client):
    client.set_url("https", "example.com", "/api/", "/users/")

    assert client.urls.base_path == "/api/"
    assert client.urls.endpoint == "/users/"


def test_set_headers_merge_law(client):
    client.set_headers({"a": 1}).set_headers({"b": 2})
    assert client.headers.extra == {"a": "1", "b": "2"}

    client.set_headers({"a": 2})
    assert client.headers.extra == {"a": "2", "b": "2"}


def test_set_headers_is_idempotent(client):
    once = new().set_headers({"X-Trace": "t", "X-Retry": 3})
    client.set_headers({"X-Trace": "t", "X-Retry": 3})
    client.set_headers({"X-Trace": "t", "X-Retry": 3})

    assert client.headers.extra == once.headers.extra


def test_set_query_params_merge_and_idempotence(client):
    client.set_query_params({"page": 1}).set_query_params({"page": 1})
    client.set_query_params({"size": 20.5, "active": True})

    assert client.params == {"page": "1", "size": "20.5", "active": "true"}
    assert client.get_query("size") == "20.5"
    assert client.get_query("missing") == ""


def test_set_query_params_does_not_alias_caller_mapping(client):
    client.set_query_params({"page": "1"})
    client.set_query_param("size", "5")

    assert client.get_query_params() == {"page": "1", "size": "5"}


def test_get_query_params_is_none_when_empty(client):
    assert client.get_query_params() is None


def test_bulk_setters_reject_unsupported_values(client):
    with pytest.raises(UnsupportedTypeError):
        client.set_query_params({"filter": {"a": 1}})
    with pytest.raises(UnsupportedTypeError):
        client.set_headers({"X-Bad": None})


def test_auth_setters_replace_each_other(client):
    assert client.authorization == NoAuth()

    client.set_basic_auth("user", "pass")
    assert client.authorization == BasicAuth("user", "pass")

    client.set_bearer_auth("token")
    assert client.authorization == BearerAuth("token")


def test_set_cookies_replaces_cookie_list(client):
    client.set_cookie("a", "1")
    client.set_cookies({"b": "2", "c": "3"})

    assert [(c.name, c.value) for c in client.headers.cookies] == [
        ("b", "2"),
        ("c", "3"),
    ]


def test_header_scalar_setters(client):
    client.set_accept("text/plain").set_content_type("application/json")
    client.set_language("zh-CN").set_user_agent("Agent/1.0")

    assert client.headers.accept == "text/plain"
    assert client.headers.content_type == "application/json"
    assert client.headers.language == "zh-CN"
    assert client.headers.user_agent == "Agent/1.0"
    assert not client.headers.is_empty()


def test_header_getters_are_empty_before_send(client):
    client.set_header("X-Test", "1")

    assert client.get_header("X-Test") == ""
    assert client.get_headers() is None
    assert client.get_cookies() is None


def test_option_functions_apply_in_order(client):
    codec = OrjsonCodec()

    client.optional(
        with_timeout(120),
        with_skip_tls(True),
        with_debug(True),
        with_codec(codec),
        with_ok_code(200),
        with_rest_mode(False),
        with_use_logger(True),
        lambda c: c.set_header("X-Option", "applied"),
    )

    assert client.config.timeout_seconds == 60.0
    assert client.config.skip_tls is True
    assert client.config.debug is True
    assert client.config.codec is codec
    assert client.config.ok_code == 200
    assert client.config.rest_mode is False
    assert client.config.logger is logging.getLogger(CONSOLE_LOGGER_NAME)
    assert client.headers.extra == {"X-Option": "applied"}


def test_with_timeout_clamps_lower_bound(client):
    client.optional(with_timeout(1))

    assert client.config.timeout_seconds == 10.0


def test_disabling_logger_keeps_configured_logger(client):
    logger = logging.getLogger("tests.client")
    client.config.logger = logger

    client.optional(with_use_logger(False))

    assert client.config.logger is logger


def test_configuration_shortcuts(client):
    codec = OrjsonCodec()

    client.define_ok_code(1000).register_codec(codec).toggle_mode()

    assert client.config.ok_code == 1000
    assert client.config.codec is codec
    assert client.config.rest_mode is False
    assert client.echo_mode() == "HTTP Response"
    assert client.toggle_mode().echo_mode() == "RESTful Response"


def test_constructors_select_response_mode():
    assert isinstance(new_rest(), Client)
    assert new_rest().config.rest_mode is True
    assert new_http().config.rest_mode is False
    assert new(int).result_type is int


def test_client_state_starts_empty(client):
    assert client.exception is None
    assert client.result.code == 0
    assert client.result.msg == ""
    assert client.data() is None
    assert client.payload is None
    assert client.echo_url() == ("", "")
    assert "method=-" in repr(client)


def test_set_request_accepts_url_with_userinfo(client):
    client.set_request("GET", "http://user:pw@example.com/a/b")

    assert client.urls.host == "example.com"
    assert client.urls.base_path == "/a"
    assert client.urls.endpoint == "/b"
