# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
# pyright: reportUnknownVariableType=false, reportMissingParameterType=false
# pyright: reportUnknownArgumentType=false
import logging
from unittest.mock import Mock, patch

import pytest
import requests

from gloria.config import TransportConfig
from gloria.errors import HttpClientError, NetworkError, RequestTimeoutError
from gloria.models import WireRequest
from gloria.transport import HttpTransport


@pytest.fixture
def config():
    return TransportConfig(
        default_headers={"X-Test": "yes"},
        timeout_seconds=5.0,
    )


@pytest.fixture
def transport(config):
    return HttpTransport(config)


def _mock_response(
    *,
    content: bytes = b"",
    status: int = 200,
    url: str = "http://example.com",
    reason: str = "OK",
):
    response = Mock()
    response.content = content
    response.status_code = status
    response.url = url
    response.reason = reason
    response.headers = {"Content-Type": "application/json"}
    return response


def _request(method="GET", url="http://example.com", body=None):
    return WireRequest(method=method, url=url, body=body)


def test_init_sets_default_headers(transport):
    assert transport._session.headers["X-Test"] == "yes"


@patch("requests.Session.request")
def test_send_success_returns_response_and_metadata(mock_request, transport):
    response = _mock_response(content=b"hello")
    mock_request.return_value = response

    result = transport.send(_request())

    assert result.ok
    assert result.value is response
    assert result.meta["method"] == "GET"
    assert result.meta["url"] == "http://example.com"
    assert result.meta["status_code"] == 200
    assert result.meta["reason"] == "OK"
    assert result.meta["timeout_s"] == 5.0
    assert result.meta["elapsed_s"] >= 0
    assert "final_error" not in result.meta


@patch("requests.Session.request")
def test_send_streams_the_body(mock_request, transport):
    mock_request.return_value = _mock_response()
    request = _request("POST", body=b'{"a":1}')

    transport.send(request)

    mock_request.assert_called_once_with(
        "POST",
        "http://example.com",
        headers=request.headers,
        data=b'{"a":1}',
        timeout=5.0,
        verify=True,
        stream=True,
    )


@patch("requests.Session.request")
def test_send_uses_connect_read_timeout_tuple(mock_request):
    transport = HttpTransport(
        TransportConfig(connect_timeout_seconds=1.0, read_timeout_seconds=3.0)
    )
    mock_request.return_value = _mock_response()

    result = transport.send(_request())

    assert result.meta["timeout_s"] == (1.0, 3.0)
    assert mock_request.call_args.kwargs["timeout"] == (1.0, 3.0)


@patch("requests.Session.request")
def test_send_applies_per_request_overrides(mock_request):
    transport = HttpTransport(TransportConfig(timeout_seconds=5.0))
    mock_request.return_value = _mock_response()

    result = transport.send(_request(), timeout=2.5, verify=False)

    assert result.meta["timeout_s"] == 2.5
    assert mock_request.call_args.kwargs["timeout"] == 2.5
    assert mock_request.call_args.kwargs["verify"] is False


def test_send_rejects_non_positive_timeout_override(transport):
    with pytest.raises(ValueError):
        transport.send(_request(), timeout=0)

    with pytest.raises(ValueError):
        transport.send(_request(), timeout=-1)


@patch("requests.Session.request")
def test_send_respects_verify_tls_false(mock_request):
    transport = HttpTransport(TransportConfig(verify_tls=False))
    mock_request.return_value = _mock_response()

    transport.send(_request())

    assert mock_request.call_args.kwargs["verify"] is False
    assert mock_request.call_args.kwargs["timeout"] is None


@pytest.mark.parametrize(
    "raised, expected, final_error",
    [
        (
            requests.exceptions.Timeout("Timed out"),
            RequestTimeoutError,
            "Timeout",
        ),
        (
            requests.exceptions.ConnectionError("refused"),
            NetworkError,
            "ConnectionError",
        ),
        (
            requests.exceptions.RequestException("boom"),
            HttpClientError,
            "RequestException",
        ),
    ],
)
@patch("requests.Session.request")
def test_send_maps_request_exceptions(
    mock_request, transport, raised, expected, final_error
):
    mock_request.side_effect = raised

    result = transport.send(_request())

    assert not result.ok
    assert type(result.error) is expected
    assert result.meta["final_error"] == final_error
    assert "status_code" not in result.meta
    assert mock_request.call_count == 1


@patch("requests.Session.request")
def test_send_logs_success_round_trip(mock_request, caplog):
    logger = logging.getLogger("tests.transport")
    transport = HttpTransport(TransportConfig(logger=logger))
    mock_request.return_value = _mock_response()

    with caplog.at_level(logging.DEBUG, logger="tests.transport"):
        transport.send(_request())

    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.INFO
    assert "[SUCCESS]" in caplog.records[0].getMessage()
    assert "[200] [GET] http://example.com" in caplog.records[0].getMessage()


@patch("requests.Session.request")
def test_send_warns_about_slow_round_trip(mock_request, caplog):
    logger = logging.getLogger("tests.transport")
    transport = HttpTransport(
        TransportConfig(logger=logger, slow_threshold_seconds=0.0)
    )
    mock_request.return_value = _mock_response()

    with caplog.at_level(logging.DEBUG, logger="tests.transport"):
        result = transport.send(_request())

    assert result.meta["elapsed_s"] > 0.0
    assert caplog.records[0].levelno == logging.WARNING
    assert "[WARN]" in caplog.records[0].getMessage()


@patch("requests.Session.request")
def test_send_logs_failed_round_trip(mock_request, caplog):
    logger = logging.getLogger("tests.transport")
    transport = HttpTransport(TransportConfig(logger=logger))
    mock_request.side_effect = requests.exceptions.Timeout("slow")

    with caplog.at_level(logging.DEBUG, logger="tests.transport"):
        transport.send(_request())

    assert caplog.records[0].levelno == logging.ERROR
    assert "[PANIC]" in caplog.records[0].getMessage()
    assert caplog.records[0].getMessage().endswith("| Timeout")


def test_transport_closes_session_on_exit():
    with HttpTransport() as transport:
        session = transport._session
        session.close = Mock()

    session.close.assert_called_once_with()


@patch("requests.Session.request")
def test_send_encodes_non_latin1_header_values_as_utf8(mock_request):
    transport = HttpTransport()
    mock_request.return_value = _mock_response()
    request = _request()
    request.headers["X-Name"] = "日本"
    request.headers["X-City"] = "Zürich"

    transport.send(request)

    headers = mock_request.call_args.kwargs["headers"]
    assert headers["X-Name"] == "日本".encode("utf-8")
    assert headers["X-City"] == "Zürich"
    assert request.headers["X-Name"] == "日本"


@patch("requests.Session.request")
def test_send_captures_header_encoding_errors(mock_request, transport):
    mock_request.side_effect = UnicodeEncodeError(
        "latin-1", "日本", 0, 2, "ordinal not in range(256)"
    )

    result = transport.send(_request())

    assert not result.ok
    assert type(result.error) is HttpClientError
    assert result.meta["final_error"] == "UnicodeEncodeError"


@patch("requests.Session.request")
def test_send_logs_through_per_request_logger(mock_request, caplog):
    transport = HttpTransport(
        TransportConfig(logger=logging.getLogger("tests.configured"))
    )
    mock_request.return_value = _mock_response()

    with caplog.at_level(logging.DEBUG):
        transport.send(_request(), logger=logging.getLogger("tests.call"))

    assert [r.name for r in caplog.records] == ["tests.call"]
