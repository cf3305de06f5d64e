"""
=============================================================================
HTTP ROUTER
=============================================================================

An ordered, first-match-wins route table.

=============================================================================
MATCH KINDS
=============================================================================

Each route matches its path in one of two ways:

    ┌─────────────┬───────────────────────────┬──────────────────────────┐
    │ Kind        │ Registered as             │ Matches                  │
    ├─────────────┼───────────────────────────┼──────────────────────────┤
    │ EXACT       │ route("/")                │ "/" only                 │
    │ PREFIX      │ route("/echo/", prefix=…) │ "/echo/", "/echo/abc", … │
    └─────────────┴───────────────────────────┴──────────────────────────┘

PREFIX is a plain string prefix, not a segment match: "/files" also
matches "/filesystem". Registration order decides ties, so narrower
routes go first.

A route may also be tied to one method. method=None accepts any method.

=============================================================================
DISPATCH
=============================================================================

    for route in routes (in registration order):
        if route.method and route.method != request.method: skip
        if route pattern matches request.path:          → handler(request)
    no route matched                                    → 404 Not Found

There is no 405: a path that matches only under another method is simply
"not found".

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found


Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    A registered route.

        Route(
            path="/files",        # path or path prefix
            handler=files.get,    # Handler function
            method="GET",         # None = any method
            prefix=True,          # prefix match instead of exact
        )
    """

    path: str
    handler: Handler
    method: Optional[str] = None
    prefix: bool = False

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)

    def matches(self, method: str, path: str) -> bool:
        if self.method and self.method != method:
            return False
        return bool(self._pattern and self._pattern.match(path))


class Router:
    """
    Request router.

    Routes are registered with decorators, Flask style:

        router = Router()

        @router.route("/")
        def root(request):
            return ok()

        @router.get("/user-agent", prefix=True)
        def user_agent(request):
            ...

    or directly with add_route() when the handler already exists.
    """

    def __init__(self):
        self._routes: List[Route] = []

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
        prefix: bool = False,
    ) -> Route:
        """
        Register a route at the end of the table.

        Args:
            path: Exact path, or path prefix when `prefix` is true.
            handler: Function taking an HTTPRequest, returning an HTTPResponse.
            method: Method to match, compared case-sensitively after
                upper-casing the registration. None for any method.
            prefix: Match any path starting with `path`.

        Returns:
            The registered Route object.
        """
        route = Route(
            path=path,
            handler=handler,
            method=method.upper() if method else None,
            prefix=prefix,
            _pattern=self._compile_pattern(path, prefix),
        )
        self._routes.append(route)
        return route

    @staticmethod
    def _compile_pattern(path: str, prefix: bool) -> re.Pattern:
        """
        Compile a route path into an anchored regex.

            "/"       exact   → ^/$
            "/echo/"  prefix  → ^/echo/
        """
        pattern = "^" + re.escape(path)
        if not prefix:
            pattern += "$"
        return re.compile(pattern)

    def match(self, method: str, path: str) -> Optional[Route]:
        """
        Find the first route accepting this method and path.

        Returns:
            The matching Route, or None.
        """
        for route in self._routes:
            if route.matches(method, path):
                return route
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler, or answer 404.

        Exceptions raised by the handler propagate to the caller.
        """
        route = self.match(request.method, request.path)
        if route is None:
            return not_found()
        return route.handler(request)

    # =========================================================================
    # DECORATORS
    # =========================================================================

    def route(
        self,
        path: str,
        method: Optional[str] = None,
        prefix: bool = False,
    ) -> Callable[[Handler], Handler]:
        """
        Decorator for registering routes.

        Usage:
            @router.route("/echo/", prefix=True)
            def echo(request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, prefix)
            return handler  # Return handler unchanged (allows stacking decorators)
        return decorator

    def get(self, path: str, prefix: bool = False) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET", prefix)

    def post(self, path: str, prefix: bool = False) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, "POST", prefix)

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def routes(self) -> List[Route]:
        """All registered routes, in match order."""
        return list(self._routes)

    def print_routes(self) -> None:
        """
        Print all registered routes (useful for debugging).

        Example output:
            Registered Routes:
            ------------------------------------------------------------
              ANY      /
              ANY      /echo/*
              GET      /user-agent*
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self._routes:
            method = route.method or "ANY"
            suffix = "*" if route.prefix else ""
            print(f"  {method:8} {route.path}{suffix}")
        print("-" * 60)
