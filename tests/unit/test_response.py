"""
Unit tests for HTTP response building.
"""

import pytest

from minihttp.http.response import (
    HTTPResponse,
    ResponseBuilder,
    ok,
    created,
    bad_request,
    forbidden,
    not_found,
    request_timeout,
    internal_error,
    service_unavailable,
    error_response,
    text_response,
    file_response,
)
from minihttp.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert HTTPResponse(status=HTTPStatus.NOT_FOUND).status_line == "HTTP/1.1 404 Not Found"

    def test_bare_response_has_no_headers(self):
        """Test that nothing is added implicitly."""
        assert HTTPResponse().to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_headers_in_insertion_order(self):
        response = HTTPResponse(
            headers={"X-One": "1", "X-Two": "2"},
            body=b"test",
        )

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"X-One: 1\r\n"
            b"X-Two: 2\r\n"
            b"\r\n"
            b"test"
        )


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_text_response(self):
        """Test the exact bytes of a text response."""
        result = ResponseBuilder().text("abc").to_bytes()

        assert result == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc"
        )

    def test_content_length_counts_bytes(self):
        """Test that Content-Length is a byte count, not a character count."""
        response = ResponseBuilder().text("café".encode("utf-8")).build()

        assert response.headers["Content-Length"] == "5"
        assert response.body == b"caf\xc3\xa9"

    def test_text_str_round_trips_wire_bytes(self):
        """Test that text decoded from the request goes out unchanged."""
        raw = "café".encode("utf-8").decode("iso-8859-1")

        assert ResponseBuilder().text(raw).build().body == "café".encode("utf-8")

    def test_octet_stream(self):
        content = b"\x00\x01\x02binary"
        response = ResponseBuilder().octet_stream(content).build()

        assert response.headers == {
            "Content-Type": "application/octet-stream",
            "Content-Length": str(len(content)),
        }
        assert response.body == content

    def test_chaining(self):
        response = (ResponseBuilder()
            .status(HTTPStatus.CREATED)
            .header("X-Custom", "value")
            .body(b"data")
            .build())

        assert response.status == HTTPStatus.CREATED
        assert response.headers == {"X-Custom": "value"}
        assert response.body == b"data"

    def test_body_does_not_touch_headers(self):
        assert ResponseBuilder().body("hello").build().headers == {}

    def test_build_copies_headers(self):
        """Test that built responses don't share state with the builder."""
        builder = ResponseBuilder().header("X-A", "1")
        first = builder.build()
        builder.header("X-B", "2")

        assert first.headers == {"X-A": "1"}


class TestConvenienceFunctions:
    """Tests for the status-only helpers."""

    @pytest.mark.parametrize("factory, expected", [
        (ok, b"HTTP/1.1 200 OK\r\n\r\n"),
        (created, b"HTTP/1.1 201 Created\r\n\r\n"),
        (bad_request, b"HTTP/1.1 400 Bad Request\r\n\r\n"),
        (forbidden, b"HTTP/1.1 403 Forbidden\r\n\r\n"),
        (not_found, b"HTTP/1.1 404 Not Found\r\n\r\n"),
        (request_timeout, b"HTTP/1.1 408 Request Timeout\r\n\r\n"),
        (internal_error, b"HTTP/1.1 500 Internal Server Error\r\n\r\n"),
        (service_unavailable, b"HTTP/1.1 503 Service Unavailable\r\n\r\n"),
    ])
    def test_exact_bytes(self, factory, expected: bytes):
        assert factory().to_bytes() == expected

    def test_error_response_from_int(self):
        response = error_response(400)

        assert response.status is HTTPStatus.BAD_REQUEST
        assert response.to_bytes() == b"HTTP/1.1 400 Bad Request\r\n\r\n"

    def test_text_response(self):
        response = text_response("curl/7.64.1")

        assert response.status == HTTPStatus.OK
        assert response.headers["Content-Type"] == "text/plain"
        assert response.headers["Content-Length"] == "11"

    def test_file_response(self):
        response = file_response(b"contents")

        assert response.headers["Content-Type"] == "application/octet-stream"
        assert response.headers["Content-Length"] == "8"


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_phrase(self):
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.SERVICE_UNAVAILABLE.phrase == "Service Unavailable"

    def test_int_comparison(self):
        assert HTTPStatus.CREATED == 201

    def test_categories(self):
        assert HTTPStatus.OK.is_success
        assert HTTPStatus.FORBIDDEN.is_client_error
        assert HTTPStatus.INTERNAL_SERVER_ERROR.is_server_error
        assert not HTTPStatus.NOT_FOUND.is_server_error
