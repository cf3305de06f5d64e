"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the server. One ServerConfig is built at
startup (from defaults, then environment, then command-line flags) and
passed by reference to every component that needs it. Nothing reads
configuration from module-level globals.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m minihttp -directory /tmp/files                   │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_DIRECTORY=/tmp/files python -m minihttp               │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout, follow_content_length

    THREADING SETTINGS
    - min_workers, max_workers, queue_size

    FILES
    - directory, allow_path_traversal

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to. All interfaces by default.
    """

    port: int = 4221
    """
    The port number to listen on.
    """

    backlog: int = 128
    """
    Maximum number of queued connections waiting for accept().
    """

    buffer_size: int = 102400
    """
    Size of the single receive buffer in bytes (100 KiB).
    A request larger than this is silently truncated.
    """

    timeout: Optional[float] = 30.0
    """
    Read timeout for client sockets in seconds. A client that sends
    nothing within it gets 408 Request Timeout, which frees its worker.
    None = blocking read: idle clients then hold workers indefinitely,
    and max_workers idle clients stall everyone else.
    """

    follow_content_length: bool = False
    """
    Keep reading after the first recv() until the body announced by
    Content-Length has arrived (still capped at buffer_size).
    Off by default: a single read per connection.
    """

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    """
    Worker threads created at startup.
    """

    max_workers: int = 64
    """
    Upper bound on concurrently handled connections.
    """

    queue_size: int = 128
    """
    Connections allowed to wait for a worker. Beyond this the server
    answers 503 Service Unavailable.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    directory: str = "."
    """
    Base directory for /files/ reads and writes.
    """

    allow_path_traversal: bool = False
    """
    Allow file names such as "../secret" to resolve outside `directory`.
    When False such names are answered with 403 Forbidden.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    log_format: str = "text"
    """
    Access log format: 'json' or 'text'.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST       Server host (default: 0.0.0.0)
        HTTP_PORT       Server port (default: 4221)
        HTTP_DIRECTORY  Base directory for /files/ (default: .)
        HTTP_WORKERS    Max worker threads (default: 64)
        HTTP_TIMEOUT    Read timeout in seconds (default: 30)
        HTTP_LOG_LEVEL  Logging level (default: INFO)

        =====================================================================
        """
        timeout = os.getenv("HTTP_TIMEOUT")
        max_workers = int(os.getenv("HTTP_WORKERS", "64"))
        return cls(
            host=os.getenv("HTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("HTTP_PORT", "4221")),
            directory=os.getenv("HTTP_DIRECTORY", "."),
            min_workers=min(cls.min_workers, max_workers),
            max_workers=max_workers,
            timeout=float(timeout) if timeout else cls.timeout,
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by HTTPServer at construction so a bad value fails at
        startup rather than on the first request.

        Raises:
            ValueError: If any value is out of range.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not os.path.isdir(self.directory):
            raise ValueError(f"directory does not exist: {self.directory}")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"Invalid log_format: {self.log_format}")


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. Type-safe configuration with a dataclass
# 2. Environment variable support (HTTP_*)
# 3. Validation at startup (fail-fast)
# =============================================================================
