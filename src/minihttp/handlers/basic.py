"""
=============================================================================
BASIC HANDLERS
=============================================================================

Handlers that need nothing but the request itself.

    /               → 200, empty body (health check)
    /echo/<msg>     → 200 text/plain, body = <msg>
    /user-agent     → 200 text/plain, body = User-Agent header value

The echo message is everything after the LAST "echo/" in the path:

    /echo/abc              → "abc"
    /echo/echo/abc         → "abc"
    /echo/a/b              → "a/b"

=============================================================================
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, bad_request, ok, text_response


ECHO_MARKER = "echo/"


def root(request: HTTPRequest) -> HTTPResponse:
    """Always 200 OK, no headers, no body."""
    return ok()


def echo_message(path: str) -> str:
    """Substring of `path` after the last "echo/"."""
    return path.rsplit(ECHO_MARKER, 1)[-1]


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    Echo the tail of the path back as text/plain.

    An empty message ("/echo/") is a 400 Bad Request.
    """
    message = echo_message(request.path)
    if not message:
        return bad_request()
    return text_response(message)


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """
    Reflect the User-Agent header as text/plain.

    The lookup is case-sensitive, so only "User-Agent" counts. A request
    without it gets 400 Bad Request.
    """
    agent = request.user_agent
    if agent is None:
        return bad_request()
    return text_response(agent)
