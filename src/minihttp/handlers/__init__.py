"""
=============================================================================
REQUEST HANDLERS
=============================================================================

The route table, in match order (first match wins):

    ┌───┬──────────────┬────────┬────────┬──────────────────────────────────┐
    │ # │ Path         │ Match  │ Method │ Handler                          │
    ├───┼──────────────┼────────┼────────┼──────────────────────────────────┤
    │ 1 │ /            │ exact  │ any    │ basic.root       → 200           │
    │ 2 │ /echo/       │ prefix │ any    │ basic.echo       → 200 text      │
    │ 3 │ /user-agent  │ prefix │ GET    │ basic.user_agent → 200 text      │
    │ 4 │ /files       │ prefix │ GET    │ FileHandler.get  → 200 / 404     │
    │ 5 │ /files       │ prefix │ POST   │ FileHandler.post → 201           │
    │ - │ anything else│        │        │ → 404 Not Found                  │
    └───┴──────────────┴────────┴────────┴──────────────────────────────────┘

=============================================================================
"""

from ..http.router import Router
from ..storage import FileStore
from .basic import root, echo, user_agent
from .files import FileHandler


def register_routes(router: Router, store: FileStore) -> Router:
    """
    Register the server's route table on `router`.

    Args:
        router: Router to register on. Existing routes keep precedence.
        store: File store backing the /files routes.

    Returns:
        The same router, for chaining.
    """
    files = FileHandler(store)

    router.route("/")(root)
    router.route("/echo/", prefix=True)(echo)
    router.get("/user-agent", prefix=True)(user_agent)
    router.get("/files", prefix=True)(files.get)
    router.post("/files", prefix=True)(files.post)

    return router


__all__ = [
    "register_routes",
    "root",
    "echo",
    "user_agent",
    "FileHandler",
]
