"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Formats responses into the exact bytes written back to the client.

=============================================================================
HTTP RESPONSE FORMAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 200 OK\\r\\n                  ← status line                 │
    │  Content-Type: text/plain\\r\\n         ← headers, in insertion order │
    │  Content-Length: 3\\r\\n                                              │
    │  \\r\\n                                 ← blank line                  │
    │  abc                                  ← body                        │
    └─────────────────────────────────────────────────────────────────────┘

NOTHING IS ADDED IMPLICITLY. No Date, no Server, no Content-Length unless
a builder method puts it there. A bare 200 is exactly:

    b"HTTP/1.1 200 OK\\r\\n\\r\\n"

=============================================================================
THE BUILDER PATTERN
=============================================================================

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .text("abc")
        .build())

Each method returns `self`, so calls chain; build() returns the
HTTPResponse.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .request import WIRE_ENCODING
from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    A plain data container; ResponseBuilder and the helper functions below
    are the usual way to make one.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for socket.sendall().

            HTTP/1.1 200 OK\\r\\n
            Content-Type: text/plain\\r\\n
            Content-Length: 3\\r\\n
            \\r\\n
            abc
        """
        head = self.status_line + "\r\n"
        head += "".join(f"{name}: {value}\r\n" for name, value in self.headers.items())
        head += "\r\n"
        return head.encode(WIRE_ENCODING) + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

    text() and octet_stream() set Content-Type first and Content-Length
    second, so those two headers always appear in that order.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the HTTP status code."""
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add a single response header."""
        self._headers[name] = value
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the response body without touching headers.

        Strings are encoded as ISO-8859-1 so text taken from the request
        goes back out byte-for-byte.
        """
        if isinstance(body, str):
            self._body = body.encode(WIRE_ENCODING)
        else:
            self._body = body
        return self

    def text(self, text: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set a plain text body.

        Sets Content-Type: text/plain and Content-Length to the byte length
        of the body.
        """
        self.body(text)
        self._headers["Content-Type"] = "text/plain"
        self._headers["Content-Length"] = str(len(self._body))
        return self

    def octet_stream(self, content: bytes) -> "ResponseBuilder":
        """
        Set a binary body (file contents).

        Sets Content-Type: application/octet-stream and Content-Length.
        """
        self._body = content
        self._headers["Content-Type"] = "application/octet-stream"
        self._headers["Content-Length"] = str(len(content))
        return self

    def build(self) -> HTTPResponse:
        """Build and return the HTTPResponse object."""
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )

    def to_bytes(self) -> bytes:
        """Shortcut for build().to_bytes()."""
        return self.build().to_bytes()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
# Status-only responses carry no headers and no body:
#
#     not_found().to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\n"


def _empty(status: HTTPStatus) -> HTTPResponse:
    return HTTPResponse(status=status)


def ok() -> HTTPResponse:
    """200 OK with no headers and no body."""
    return _empty(HTTPStatus.OK)


def created() -> HTTPResponse:
    """201 Created, sent after a file has been written."""
    return _empty(HTTPStatus.CREATED)


def bad_request() -> HTTPResponse:
    return _empty(HTTPStatus.BAD_REQUEST)


def forbidden() -> HTTPResponse:
    return _empty(HTTPStatus.FORBIDDEN)


def not_found() -> HTTPResponse:
    """404 Not Found: no route matched, or the file does not exist."""
    return _empty(HTTPStatus.NOT_FOUND)


def request_timeout() -> HTTPResponse:
    return _empty(HTTPStatus.REQUEST_TIMEOUT)


def internal_error() -> HTTPResponse:
    return _empty(HTTPStatus.INTERNAL_SERVER_ERROR)


def service_unavailable() -> HTTPResponse:
    return _empty(HTTPStatus.SERVICE_UNAVAILABLE)


def error_response(status: int) -> HTTPResponse:
    """
    Status-only response for an arbitrary code.

    Used where the status comes from an exception (HTTPParseError).
    """
    return _empty(HTTPStatus(status))


def text_response(text: Union[str, bytes]) -> HTTPResponse:
    """200 OK with a text/plain body."""
    return ResponseBuilder().text(text).build()


def file_response(content: bytes) -> HTTPResponse:
    """200 OK with an application/octet-stream body."""
    return ResponseBuilder().octet_stream(content).build()
