"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

The listener: create the socket, bind, listen, and hand every accepted
connection to a callback. It knows nothing about HTTP.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a TCP socket
    2. bind()      Reserve IP:PORT (0.0.0.0:4221 by default)
    3. listen()    OS starts queueing incoming connections (backlog)
    4. accept()    Returns a NEW socket per client; the listener keeps
                   listening
    5. close()     Release the listening socket on shutdown

=============================================================================
SOCKET OPTIONS
=============================================================================

SO_REUSEADDR:  rebind immediately after a restart instead of waiting out
               TIME_WAIT ("Address already in use").
SO_REUSEPORT:  where available (not on Windows).
TCP_NODELAY:   disable Nagle; small responses go out immediately.

=============================================================================
INTERRUPTIBLE ACCEPT
=============================================================================

accept() blocks forever by default, so a shutdown request would never be
noticed. The listening socket gets a 1 second timeout instead:

    while running:
        try:
            accept()          # blocks for 1 second max
        except timeout:
            continue          # check the running flag, loop again

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Callable, Optional

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    TCP listener with graceful shutdown.

        start()
            ├──► _create_socket()   socket + options
            ├──► bind(), listen()
            ├──► _setup_signals()   SIGTERM/SIGINT → shutdown()
            └──► _accept_loop()     BLOCKS until shutdown()
                     └──► connection_handler(Connection(...))

    Usage:
        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration (host, port, backlog, buffer_size,
                timeout, follow_content_length).

        The socket is created lazily in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._original_handlers: dict = {}

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
        except (AttributeError, OSError):
            pass  # Not available on this platform

        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # Poll interval for the accept loop
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """
        Install SIGTERM/SIGINT handlers that trigger shutdown().

        Python only allows signal handlers on the main thread. When the
        server runs on another thread (tests, embedding), the host is in
        charge of calling shutdown().
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on main thread, skipping signal handlers")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept connections until shutdown() is called.

        Args:
            connection_handler: Called with a Connection for every accepted
                client. Must not block for long; HTTPServer hands the
                connection to its thread pool.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True

        self._setup_signals()

        logger.info(f"Server listening on {self.config.host}:{self.config.port}")

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Normal: check self._running and loop
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                follow_content_length=self.config.follow_content_length,
            )

            connection_handler(conn)

    def shutdown(self):
        """
        Stop accepting connections.

        Safe to call from a signal handler or another thread, and more than
        once. The accept loop notices within one poll interval.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass  # Already closed
            self._socket = None

        logger.info("Socket server stopped")

