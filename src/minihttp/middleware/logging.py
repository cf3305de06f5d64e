"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

One log line per handled request, on the "minihttp.access" logger.

    127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /echo/abc" 200 3 0.12ms

or, with log_format="json":

    {"method": "GET", "path": "/echo/abc", "client_ip": "127.0.0.1", ...}

Unlike a typical access-log middleware this one never adds headers
(no X-Request-ID): responses must go out byte-for-byte as the handlers
built them.

=============================================================================
"""

import time
import json
import logging
from dataclasses import asdict, dataclass
from typing import Optional

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("minihttp.access")


@dataclass
class RequestLog:
    """
    Structured log entry for a request.

    Fields:
        method:         Request method, as sent
        path:           Request path, as sent
        client_ip:      Client's IP address
        user_agent:     User-Agent header, "-" when absent
        status_code:    Response status
        content_length: Response body size in bytes
        duration_ms:    Time spent in the handler chain
        timestamp:      When the request was processed
    """
    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Apache-style access log line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Put it FIRST in the pipeline so it sees every request and its timing
    covers the whole chain:

        server.use(LoggingMiddleware())
        server.use(LoggingMiddleware(log_format="json"))
        server.use(LoggingMiddleware(skip_paths=["/"]))
    """

    def __init__(
        self,
        log_format: str = "text",
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        """
        Args:
            log_format: "text" (human readable) or "json" (one object per line).
            log_level: Level for access log records.
            skip_paths: Exact paths not to log (e.g. the "/" health check).
        """
        self.log_format = log_format
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.time()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        if request.path in self.skip_paths:
            return response

        log_entry = RequestLog(
            method=request.method,
            path=request.path,
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())

        return response
