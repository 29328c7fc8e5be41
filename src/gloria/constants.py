"""Process-wide constants shared by the builder, dispatcher and transport."""

from __future__ import annotations

from typing import Final

METHOD_GET: Final = "GET"
METHOD_POST: Final = "POST"
METHOD_PUT: Final = "PUT"
METHOD_DELETE: Final = "DELETE"
METHOD_PATCH: Final = "PATCH"
METHOD_HEAD: Final = "HEAD"
METHOD_OPTIONS: Final = "OPTIONS"

QUERY_METHODS: Final[tuple[str, ...]] = (
    METHOD_GET,
    METHOD_POST,
    METHOD_PUT,
    METHOD_DELETE,
    METHOD_PATCH,
    METHOD_HEAD,
    METHOD_OPTIONS,
)

PROTOCOL_HTTP: Final = "http"
PROTOCOL_HTTPS: Final = "https"

LOCAL_HOST: Final = "127.0.0.1"
LOCAL_PORT: Final = 8080

SIGN_SLASH: Final = "/"
SIGN_HORIZONTAL: Final = "-"

ROOT_URL: Final = SIGN_SLASH
# Accepted anywhere a URL part may be left to its default.
PLACEHOLDER: Final = SIGN_HORIZONTAL

OK_CODE: Final = 0
FAIL_CODE: Final = 50000

# Seconds.
TIMEOUT_SHORT: Final = 10.0
TIMEOUT_MEDIUM: Final = 30.0
TIMEOUT_LONG: Final = 60.0

AUTH_TYPE_BASIC: Final = "Basic"
AUTH_TYPE_BEARER: Final = "Bearer"

LOCALE_EN: Final = "en-US,en;q=0.9"
LOCALE_ZH: Final = "zh-CN,zh;q=0.9"

PLAIN_TEXT_TYPE: Final = "text/plain; charset=utf-8"
JSON_CONTENT_TYPE: Final = "application/json"
FORM_CONTENT_TYPE: Final = "application/x-www-form-urlencoded"

HEADER_ACCEPT: Final = "Accept"
HEADER_LOCATION: Final = "Location"
HEADER_USER_AGENT: Final = "User-Agent"
HEADER_CONTENT_TYPE: Final = "Content-Type"
HEADER_CONTENT_LENGTH: Final = "Content-Length"
HEADER_CONTENT_LANGUAGE: Final = "Content-Language"
HEADER_CONTENT_ENCODING: Final = "Content-Encoding"
HEADER_AUTHORIZATION: Final = "Authorization"
HEADER_COOKIE: Final = "Cookie"

STATUS_OK: Final = 200
