"""
Snippetbox — Middleware Composition
=====================================

What:  Handler / Middleware types and the Chain that composes them.
How:   A handler is an async callable Request -> Response. A middleware is a
       function Handler -> Handler that wraps (never replaces) the handler it
       receives. Chain holds an ordered list of middleware and applies them
       once, at startup.

Chains used by the application:
    standard:  recover_panic → log_request → secure_headers   (every request)
    dynamic:   session_enable                                 (session routes)

    Request → [recover_panic] → [log_request] → [secure_headers] → Router
            → [session_enable] → handler

The first middleware listed is the outermost: it sees the request first and
the response last.
"""

from typing import Awaitable, Callable, Tuple

from starlette.requests import Request
from starlette.responses import Response

Handler = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Handler], Handler]


class Chain:
    """
    Ordered, immutable list of middleware.

    Chain(a, b, c).then(h) is a(b(c(h))). append() returns a new chain, so
    Chain(a).append(b).append(c) and Chain(a, b, c) compose identically.
    """

    def __init__(self, *middlewares: Middleware):
        self._middlewares: Tuple[Middleware, ...] = tuple(middlewares)

    def append(self, *middlewares: Middleware) -> "Chain":
        return Chain(*self._middlewares, *middlewares)

    def then(self, handler: Handler) -> Handler:
        for middleware in reversed(self._middlewares):
            handler = middleware(handler)
        return handler

    def __len__(self) -> int:
        return len(self._middlewares)

    def __iter__(self):
        return iter(self._middlewares)
