"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket: read one request, send one response,
close.

=============================================================================
ONE READ, ONE RESPONSE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   accept()                                                          │
    │      │                                                              │
    │      ▼                                                              │
    │   recv(buffer_size)   ← ONE read into a 100 KiB buffer              │
    │      │                                                              │
    │      ▼                                                              │
    │   parse → route → handler                                           │
    │      │                                                              │
    │      ▼                                                              │
    │   sendall(response)                                                 │
    │      │                                                              │
    │      ▼                                                              │
    │   close()             ← no keep-alive, one request per connection   │
    └─────────────────────────────────────────────────────────────────────┘

TCP IS A BYTE STREAM, so one recv() may return less than the client sent:

    Client sends:  "POST /files/a HTTP/1.1\\r\\n...\\r\\n\\r\\n" + 50 KB body
    recv() may return only the first few KB.

By default we accept that: whatever the first read returns IS the request,
and anything beyond buffer_size is silently dropped. Clients of this server
send small requests in one segment.

With follow_content_length=True the reader keeps going until the headers
are complete and Content-Length body bytes have arrived, the client
closes, or the buffer is full (the same truncation cap applies).

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED
              │                                       ▲
              └───────────── (read error) ────────────┘

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)


HEADER_TERMINATOR = b"\r\n\r\n"


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Used for logging and to make close() idempotent.
    """
    NEW = "new"                # Just accepted, haven't read anything yet
    READING = "reading"        # Currently reading request data
    PROCESSING = "processing"  # Request parsed, handler is executing
    WRITING = "writing"        # Sending response data
    CLOSING = "closing"        # About to close (shutdown sequence)
    CLOSED = "closed"          # Connection closed, socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Capacity of the request buffer in bytes.
        timeout: Read timeout in seconds, None for blocking reads.
        follow_content_length: Keep reading until the announced body
            has arrived (bounded by buffer_size).
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 102400
    timeout: Optional[float] = None
    follow_content_length: bool = False

    def __post_init__(self):
        # None = blocking; a number = read timeout in seconds
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Read one request's bytes from the socket.

        Returns:
            The bytes read. Empty if the client closed the connection
            without sending anything. At most buffer_size bytes.

        Raises:
            TimeoutError: If a timeout is configured and the client sent
                nothing within it.
            OSError: Any other read failure (reset by peer, ...). The
                caller drops the connection without a response.
        """
        self.state = ConnectionState.READING

        try:
            data = self.socket.recv(self.buffer_size)

            if data and self.follow_content_length:
                data = self._read_rest(data)

        except socket.timeout:
            raise TimeoutError("Request read timeout")

        logger.debug(f"[{self.id}] Read {len(data)} bytes")
        return data

    def _read_rest(self, data: bytes) -> bytes:
        """
        Keep reading until the request looks complete.

        "Complete" means the header terminator has arrived and at least
        Content-Length bytes follow it. Stops early on EOF or a full
        buffer.
        """
        while len(data) < self.buffer_size:
            header_end = data.find(HEADER_TERMINATOR)
            if header_end != -1:
                body_start = header_end + len(HEADER_TERMINATOR)
                content_length = self._parse_content_length(data[:header_end])
                if len(data) - body_start >= content_length:
                    break

            chunk = self.socket.recv(self.buffer_size - len(data))
            if not chunk:
                break  # Client closed mid-request
            data += chunk

        return data

    @staticmethod
    def _parse_content_length(headers: bytes) -> int:
        """
        Find Content-Length in raw header bytes.

        A simple case-insensitive scan, since we need it BEFORE the request
        is parsed. Returns 0 when missing or not a number.
        """
        for line in headers.split(b"\r\n")[1:]:
            name, sep, value = line.partition(b":")
            if sep and name.strip().lower() == b"content-length":
                try:
                    return max(int(value.strip()), 0)
                except ValueError:
                    return 0
        return 0

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response data to the client.

        Uses sendall() so a large file body is written completely.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            # Client disconnected
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self, drain_timeout: float = 0.5):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, the client sees end of response
        2. Drain anything the client is still sending (up to drain_timeout)
        3. close(): release the file descriptor

        Input still unread at close() makes the kernel send RST, which can
        discard the response on the client side.
        drain_timeout=0 only discards what has already arrived and never
        waits (used on the accept thread).
        """
        if self.state == ConnectionState.CLOSED:
            return  # Already closed

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.settimeout(drain_timeout)  # 0 = non-blocking
            while self.socket.recv(1024):
                pass  # Discard any remaining data
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows:

            with conn:
                data = conn.read_request()
                conn.send_response(response)
            # Connection closed here
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
