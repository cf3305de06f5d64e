"""
Unit tests for the router and the registered route table.
"""

import pytest

from minihttp.handlers import register_routes
from minihttp.http.request import HTTPRequest
from minihttp.http.response import HTTPResponse, ResponseBuilder
from minihttp.http.router import Router
from minihttp.http.status_codes import HTTPStatus
from minihttp.storage import FileStore


def make_request(method: str, path: str, **kwargs) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path, **kwargs)


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    """Dummy handler for testing."""
    return ResponseBuilder().text(request.path).build()


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        router = Router()
        router.add_route("/users", dummy_handler, method="get")

        routes = router.routes()
        assert len(routes) == 1
        assert routes[0].path == "/users"
        assert routes[0].method == "GET"
        assert routes[0].prefix is False

    def test_exact_match(self):
        router = Router()
        router.add_route("/", dummy_handler)

        assert router.match("GET", "/") is not None
        assert router.match("GET", "/x") is None

    def test_prefix_match(self):
        router = Router()
        router.add_route("/echo/", dummy_handler, prefix=True)

        assert router.match("GET", "/echo/") is not None
        assert router.match("GET", "/echo/abc/def") is not None
        assert router.match("GET", "/echo") is None

    def test_prefix_is_plain_string_prefix(self):
        """Test that /files also matches /filesystem."""
        router = Router()
        router.add_route("/files", dummy_handler, prefix=True)

        assert router.match("GET", "/filesystem") is not None

    def test_regex_characters_escaped(self):
        router = Router()
        router.add_route("/a.b", dummy_handler)

        assert router.match("GET", "/a.b") is not None
        assert router.match("GET", "/axb") is None

    def test_method_filter(self):
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")

        assert router.match("GET", "/users") is not None
        assert router.match("POST", "/users") is None

    def test_any_method(self):
        router = Router()
        router.add_route("/", dummy_handler)

        for method in ("GET", "POST", "DELETE", "WHATEVER"):
            assert router.match(method, "/") is not None

    def test_first_match_wins(self):
        router = Router()
        first = router.add_route("/a", dummy_handler, prefix=True)
        router.add_route("/ab", dummy_handler, prefix=True)

        assert router.match("GET", "/abc") is first

    def test_handle_no_match(self):
        """Test that unmatched requests get an empty 404."""
        response = Router().handle(make_request("GET", "/missing"))

        assert response.to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_handler_exception_propagates(self):
        router = Router()

        @router.get("/boom")
        def boom(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            router.handle(make_request("GET", "/boom"))

    def test_decorators(self):
        router = Router()

        @router.get("/g")
        def get_handler(request):
            return ResponseBuilder().text("get").build()

        @router.post("/p", prefix=True)
        def post_handler(request):
            return ResponseBuilder().text("post").build()

        @router.route("/r", method="PUT")
        def put_handler(request):
            return ResponseBuilder().text("put").build()

        assert router.handle(make_request("GET", "/g")).body == b"get"
        assert router.handle(make_request("POST", "/p/x")).body == b"post"
        assert router.handle(make_request("PUT", "/r")).body == b"put"
        assert router.handle(make_request("GET", "/p/x")).status == HTTPStatus.NOT_FOUND

    def test_decorator_returns_handler(self):
        router = Router()
        decorated = router.get("/x")(dummy_handler)

        assert decorated is dummy_handler

    def test_print_routes(self, capsys):
        router = Router()
        router.add_route("/", dummy_handler)
        router.add_route("/files", dummy_handler, method="GET", prefix=True)

        router.print_routes()

        out = capsys.readouterr().out
        assert "ANY      /" in out
        assert "GET      /files*" in out


class TestRouteTable:
    """Tests for the registered route table."""

    @pytest.fixture
    def router(self, files_dir) -> Router:
        return register_routes(Router(), FileStore(files_dir))

    def test_order(self, router: Router):
        table = [(r.method, r.path, r.prefix) for r in router.routes()]

        assert table == [
            (None, "/", False),
            (None, "/echo/", True),
            ("GET", "/user-agent", True),
            ("GET", "/files", True),
            ("POST", "/files", True),
        ]

    def test_root_any_method(self, router: Router):
        response = router.handle(make_request("POST", "/"))

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_echo_any_method(self, router: Router):
        response = router.handle(make_request("DELETE", "/echo/abc"))

        assert response.body == b"abc"

    def test_user_agent_only_get(self, router: Router):
        request = make_request("POST", "/user-agent", headers={"User-Agent": "x"})

        assert router.handle(request).status == HTTPStatus.NOT_FOUND

    def test_user_agent_prefix(self, router: Router):
        request = make_request("GET", "/user-agent/extra", headers={"User-Agent": "x"})

        assert router.handle(request).body == b"x"

    def test_files_other_methods_not_found(self, router: Router):
        assert router.handle(make_request("PUT", "/files/a")).status == HTTPStatus.NOT_FOUND

    def test_unknown_path(self, router: Router):
        assert router.handle(make_request("GET", "/nope")).to_bytes() == (
            b"HTTP/1.1 404 Not Found\r\n\r\n"
        )

    def test_echo_without_trailing_slash_not_found(self, router: Router):
        assert router.handle(make_request("GET", "/echo")).status == HTTPStatus.NOT_FOUND
