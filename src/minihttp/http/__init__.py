"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Pure, socket-free pieces of the server: parse bytes into a request, route
it, and format a response back into bytes.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py       bytes → HTTPRequest (StartLine, headers, body)     │
    │ router.py        HTTPRequest → handler (ordered, first match wins)  │
    │ response.py      HTTPResponse → bytes (no implicit headers)         │
    │ status_codes.py  HTTPStatus enum with reason phrases                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HTTP MESSAGE FORMAT
=============================================================================

    REQUEST:                          RESPONSE:
    ─────────                         ──────────
    GET /path HTTP/1.1\\r\\n            HTTP/1.1 200 OK\\r\\n
    Header: Value\\r\\n                 Header: Value\\r\\n
    \\r\\n                              \\r\\n
    [body]                            [body]

=============================================================================
"""

from .request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    StartLine,
    parse_request,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    # Convenience functions for common responses
    ok,                   # 200 OK
    created,              # 201 Created
    bad_request,          # 400 Bad Request
    forbidden,            # 403 Forbidden
    not_found,            # 404 Not Found
    request_timeout,      # 408 Request Timeout
    internal_error,       # 500 Internal Server Error
    service_unavailable,  # 503 Service Unavailable
    error_response,
    text_response,
    file_response,
)
from .router import Router, Route
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "StartLine",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "created",
    "bad_request",
    "forbidden",
    "not_found",
    "request_timeout",
    "internal_error",
    "service_unavailable",
    "error_response",
    "text_response",
    "file_response",

    # Routing
    "Router",
    "Route",

    # Status codes
    "HTTPStatus",
]
