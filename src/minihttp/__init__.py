"""
=============================================================================
MINIHTTP
=============================================================================

A minimal HTTP/1.1 server over raw TCP sockets.

One request per connection: a single bounded read, a hand-rolled parse,
one of five fixed routes, one raw response, close.

    ┌──────────────────────────┬─────────────────────────────────────────┐
    │ ANY  /                   │ 200, empty body                         │
    │ ANY  /echo/<msg>         │ 200 text/plain <msg>                    │
    │ GET  /user-agent         │ 200 text/plain <User-Agent header>      │
    │ GET  /files/<name>       │ 200 application/octet-stream, or 404    │
    │ POST /files/<name>       │ 201, request body written to <name>     │
    │ anything else            │ 404                                     │
    └──────────────────────────┴─────────────────────────────────────────┘

=============================================================================
QUICK START
=============================================================================

    $ python -m minihttp -directory /tmp/files

    $ curl -i localhost:4221/echo/hello
    HTTP/1.1 200 OK
    Content-Type: text/plain
    Content-Length: 5

    hello

From code:

    from minihttp import HTTPServer, ServerConfig
    from minihttp.middleware import LoggingMiddleware

    server = HTTPServer(ServerConfig(directory="/tmp/files"))
    server.use(LoggingMiddleware())
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_app
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
