"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing under the HTTP layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Creates the listening socket, binds 0.0.0.0:4221                 │
    │  • Runs the accept() loop                                           │
    │  • Graceful shutdown via SIGTERM/SIGINT                             │
    └─────────────────────────────────────────────────────────────────────┘
                                    │ hands off each connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          THREAD POOL                                 │
    │  • Bounded number of worker threads                                 │
    │  • Bounded queue; full queue means 503                              │
    └─────────────────────────────────────────────────────────────────────┘
                                    │ worker processes connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • One bounded read, one response, close                            │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .thread_pool import ThreadPool

__all__ = [
    "SocketServer",     # TCP listener - accepts connections
    "Connection",       # Wrapper for client socket - handles I/O
    "ConnectionState",  # Enum for connection lifecycle states
    "ThreadPool",       # Bounded worker threads
]
