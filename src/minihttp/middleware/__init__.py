"""
=============================================================================
MIDDLEWARE
=============================================================================

Cross-cutting request processing around the router.

LoggingMiddleware:
    Logs every request with timing and status on "minihttp.access".

Middleware follows the Chain of Responsibility pattern: each layer may
handle the request, pass it on, and inspect the response on the way back.

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",

    # Built-in middleware
    "LoggingMiddleware",
    "RequestLog",
]
