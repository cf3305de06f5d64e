"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Turns the raw bytes of one read into an HTTPRequest.

=============================================================================
WHAT WE ACCEPT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /echo/abc HTTP/1.1\\r\\n        ← start line: EXACTLY 3 tokens   │
    │  Host: localhost:4221\\r\\n          ← header: split on FIRST colon   │
    │  User-Agent: curl/7.64.1\\r\\n                                        │
    │  \\r\\n                              ← first empty line ends headers  │
    │  <body>                            ← everything else, as-is         │
    └─────────────────────────────────────────────────────────────────────┘

This is a small subset of RFC 9112:

1. START LINE is split on single spaces. "GET  /  HTTP/1.1" (double space)
   gives five tokens and is rejected. Method and protocol are NOT checked.

2. HEADER NAMES keep the case they arrived in. "user-agent" and
   "User-Agent" are different keys. Name and value are trimmed.
   A line without a colon is skipped. A repeated name overwrites the
   earlier value (last write wins).

3. BODY is not sized by Content-Length. Whatever came after the first
   empty line in this read IS the body, rejoined with \\r\\n.

=============================================================================
WHY ISO-8859-1?
=============================================================================

Latin-1 maps every byte 0x00-0xFF to exactly one code point, so

    data.decode("iso-8859-1").encode("iso-8859-1") == data

for ANY input. Binary request bodies survive the text split untouched,
and the parser never raises a decode error.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


WIRE_ENCODING = "iso-8859-1"
LINE_SEPARATOR = "\r\n"


class HTTPParseError(Exception):
    """
    Raised when a request cannot be parsed.

    Carries the HTTP status the server should answer with.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code  # HTTP status to return


@dataclass(frozen=True)
class StartLine:
    """The first line of a request: METHOD SP PATH SP PROTOCOL."""

    method: str
    path: str
    protocol: str

    def __str__(self) -> str:
        return f"{self.method} {self.path} {self.protocol}"


@dataclass
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    Attributes:
        method: Request method, as sent ("GET", "POST", ...).
        path: Request target, as sent. No query-string splitting and no
            percent-decoding.
        protocol: Protocol token from the start line ("HTTP/1.1").
        headers: Header name -> value, case-sensitive names.
        body: Bytes after the first empty line.
        client_address: (ip, port) of the peer, for logging.
        raw: The bytes the request was parsed from.
    """

    method: str
    path: str
    protocol: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    client_address: Tuple[str, int] = ("", 0)
    raw: bytes = field(default=b"", repr=False)

    @property
    def start_line(self) -> StartLine:
        return StartLine(self.method, self.path, self.protocol)

    @property
    def user_agent(self) -> Optional[str]:
        """The User-Agent header, or None when the client sent none."""
        return self.headers.get("User-Agent")

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a header value (case-sensitive lookup).

        Example:
            request.get_header("Content-Length", "0")
        """
        return self.headers.get(name, default)


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

        Raw bytes
            │
            ▼  decode ISO-8859-1, split on \\r\\n
        ┌──────────────────────────────────────────────────────────────┐
        │  line 0         → parse_start_line()  (3 tokens or error)    │
        │  lines 1..blank → parse_headers()     (first colon, trimmed) │
        │  rest           → body                (joined with \\r\\n)     │
        └──────────────────────────────────────────────────────────────┘
            │
            ▼
        HTTPRequest

    The parser is stateless; one instance is shared by all worker threads.
    """

    def parse(
        self,
        data: bytes,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data into an HTTPRequest object.

        Args:
            data: Raw request bytes from the socket.
            client_address: Client's (ip, port) tuple for logging.

        Returns:
            Parsed HTTPRequest object.

        Raises:
            HTTPParseError: If the input is empty or the start line does
                not have exactly three space-separated tokens.
        """
        if not data:
            raise HTTPParseError("empty request")

        lines = data.decode(WIRE_ENCODING).split(LINE_SEPARATOR)

        start_line = self.parse_start_line(lines[0])

        # ─────────────────────────────────────────────────────────────────
        # SPLIT HEADERS FROM BODY AT THE FIRST EMPTY LINE
        # ─────────────────────────────────────────────────────────────────
        #   ["GET / HTTP/1.1", "Host: x", "", "body", "more"]
        #                                  ▲
        #                          blank_index = 2

        rest = lines[1:]
        try:
            blank_index = rest.index("")
        except ValueError:
            header_lines, body_lines = rest, []
        else:
            header_lines, body_lines = rest[:blank_index], rest[blank_index + 1:]

        headers = self.parse_headers(header_lines)
        body = LINE_SEPARATOR.join(body_lines).encode(WIRE_ENCODING)

        return HTTPRequest(
            method=start_line.method,
            path=start_line.path,
            protocol=start_line.protocol,
            headers=headers,
            body=body,
            client_address=client_address,
            raw=data,
        )

    @staticmethod
    def parse_start_line(line: str) -> StartLine:
        """
        Parse "METHOD PATH PROTOCOL".

        Raises:
            HTTPParseError: If splitting on single spaces does not give
                exactly three tokens.
        """
        tokens = line.split(" ")
        if len(tokens) != 3:
            raise HTTPParseError(f"Invalid start line: {line!r}")

        method, path, protocol = tokens
        return StartLine(method=method, path=path, protocol=protocol)

    @staticmethod
    def parse_headers(lines: List[str]) -> Dict[str, str]:
        """
        Parse header lines into a dictionary.

        Stops at the first empty line, if any. Lines without a colon are
        skipped; a repeated name keeps the last value.

        Example:
            parse_headers(["Name : value "])  # {"Name": "value"}
        """
        headers: Dict[str, str] = {}

        for line in lines:
            if not line:
                break

            name, sep, value = line.partition(":")
            if not sep:
                continue  # Lenient: ignore lines we can't split

            headers[name.strip()] = value.strip()

        return headers


def parse_request(
    data: bytes,
    client_address: Tuple[str, int] = ("", 0),
) -> HTTPRequest:
    """
    Convenience function to parse an HTTP request in one call.
    """
    return RequestParser().parse(data, client_address)
