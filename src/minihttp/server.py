"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

The orchestrator that ties the components together.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        │  (Orchestrator) │                          │
    │                        └────────┬────────┘                          │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐        │
    │    │ SocketServer │    │  ThreadPool  │    │    Router    │        │
    │    │ (Listener)   │    │ (Workers)    │    │ (5 routes)   │        │
    │    └──────┬───────┘    └──────────────┘    └──────┬───────┘        │
    │           ▼                                       ▼                 │
    │    ┌──────────────┐                        ┌──────────────┐        │
    │    │  Connection  │                        │  FileStore   │        │
    │    └──────────────┘                        └──────────────┘        │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. SocketServer accepts a TCP connection
    2. Connection is queued in the ThreadPool (503 if the queue is full)
    3. Worker: ONE bounded read
    4. RequestParser: start line, headers, body (400 if unparseable)
    5. Middleware (access log) → Router → handler
    6. Response bytes written, connection closed

=============================================================================
FAILURE ISOLATION
=============================================================================

Every failure stays inside its own connection:

    read timeout           → 408, close
    read error             → log, close (nothing sent)
    empty read             → close (nothing sent)
    parse error            → 400, close
    handler exception      → log with traceback, 500, close
    send error             → log, close

Nothing a client does can stop the accept loop or another worker.

=============================================================================
"""

import logging
from typing import Optional, Callable

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState, ThreadPool
from .handlers import register_routes
from .http import (
    HTTPRequest, RequestParser, HTTPParseError,
    HTTPResponse, Router,
    error_response, internal_error, request_timeout, service_unavailable,
)
from .middleware import MiddlewarePipeline, Middleware
from .storage import FileStore


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    The HTTP/1.1 server.

        config = ServerConfig(directory="/tmp/files")
        server = HTTPServer(config)
        server.use(LoggingMiddleware())
        server.run()                  # Blocks until SIGINT/SIGTERM

    From another thread:

        server.shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)

        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )

        self._parser = RequestParser()

        self.store = FileStore(
            self.config.directory,
            allow_path_traversal=self.config.allow_path_traversal,
        )

        self._router = register_routes(Router(), self.store)

        self._middleware = MiddlewarePipeline()

        # Built in run(), once all middleware is registered
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

    def use(self, middleware: Middleware) -> "HTTPServer":
        """
        Add middleware to the server. Executed in the order added.

        Returns:
            Self for method chaining.
        """
        self._middleware.add(middleware)
        return self

    @property
    def router(self) -> Router:
        return self._router

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Returns after shutdown() or SIGINT/SIGTERM.

        Raises:
            OSError: If the port cannot be bound.
        """
        self._setup_logging()

        self._handler = self._middleware.wrap(self._router.handle)

        self._thread_pool.start()

        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        logger.info(f"Serving files from {self.store.base_directory}")
        self._print_startup_banner()

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Ask a running server to stop. Safe from any thread."""
        self._socket_server.shutdown()

    def _print_startup_banner(self):
        print()
        print(f"  minihttp listening on http://{self.config.host}:{self.config.port}")
        print(f"  Files: {self.store.base_directory}")
        print(f"  Workers: {self.config.min_workers}-{self.config.max_workers} threads")
        print("  Press Ctrl+C to stop")

        self._router.print_routes()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("minihttp").setLevel(level)

    def _shutdown(self):
        """
        Graceful shutdown.

        The accept loop has already stopped; let in-flight connections
        finish (bounded), then stop the workers.
        """
        logger.info("Shutting down server...")

        self._thread_pool.shutdown(wait=True, timeout=30.0)

        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Queue a connection for a worker (runs on the accept thread).

        Never blocks: when the queue is full the client gets 503 at once,
        and the connection is closed without waiting for the client.
        """
        submitted = self._thread_pool.submit(
            self._process_connection,
            args=(conn,),
            block=False,
        )

        if not submitted:
            logger.warning(f"[{conn.id}] Thread pool full, rejecting connection")
            try:
                self._send(conn, service_unavailable())
            finally:
                conn.close(drain_timeout=0)

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection (runs in a worker).
        """
        with conn:  # Context manager ensures connection is closed
            # ─────────────────────────────────────────────────────────────
            # STEP 1: Read
            # ─────────────────────────────────────────────────────────────
            try:
                raw_request = conn.read_request()
            except TimeoutError:
                logger.info(f"[{conn.id}] Request timeout from {conn.client_ip}")
                self._send(conn, request_timeout())
                return
            except OSError as e:
                logger.warning(f"[{conn.id}] Error reading request: {e}")
                return

            if not raw_request:
                logger.debug(f"[{conn.id}] Client closed without sending a request")
                return

            # ─────────────────────────────────────────────────────────────
            # STEP 2: Parse
            # ─────────────────────────────────────────────────────────────
            try:
                request = self._parser.parse(raw_request, conn.address)
            except HTTPParseError as e:
                logger.info(f"[{conn.id}] Bad request from {conn.client_ip}: {e}")
                self._send(conn, error_response(e.status_code))
                return

            # ─────────────────────────────────────────────────────────────
            # STEP 3: Route + handle
            # ─────────────────────────────────────────────────────────────
            conn.state = ConnectionState.PROCESSING

            try:
                response = self._handler(request)
            except Exception as e:
                logger.exception(
                    f"[{conn.id}] Handler error for {request.method} {request.path}: {e}"
                )
                response = internal_error()

            # ─────────────────────────────────────────────────────────────
            # STEP 4: Respond
            # ─────────────────────────────────────────────────────────────
            self._send(conn, response)

    @staticmethod
    def _send(conn: Connection, response: HTTPResponse) -> bool:
        return conn.send_response(response.to_bytes())


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Factory for server instances.

    Example:
        app = create_app(ServerConfig(port=4221, directory="/tmp"))
        app.run()
    """
    return HTTPServer(config)


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# HTTPServer wires SocketServer → ThreadPool → Connection → RequestParser
# → MiddlewarePipeline → Router → handlers, and turns every per-connection
# failure into a status code (or a silent close) on that connection alone.
# =============================================================================
