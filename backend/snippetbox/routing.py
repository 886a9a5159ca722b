"""
Snippetbox — Router
=====================

What:  Maps (method, path) to a handler and extracts one named path segment.
How:   Patterns are split into segments at registration. A segment written as
       `:name` captures any non-empty path segment under that name; every
       other segment must match literally. Dispatch compares segment count
       and literals only, no wildcards and no regular expressions.

Matching rules:
    - At most one capture per pattern; the same (method, shape) cannot be
      registered twice. Both are rejected with RouteConfigError at startup.
    - When several patterns fit a path (/snippet/create vs /snippet/:id),
      the one with more literal segments wins.
    - No pattern fits the path                  → 404 Not Found
    - A pattern fits but not for this method    → 405 + Allow header
    - GET registrations also answer HEAD.
    - Prefix routes (static passthrough) take any GET/HEAD path under the
      prefix and hand the remainder to their handler unchanged.

Captured values are exposed to handlers as request.path_params.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from snippetbox.exceptions import RouteConfigError
from snippetbox.middleware import Handler

logger = logging.getLogger(__name__)

CAPTURE_MARK = ":"


class NotFound(Exception):
    """No registered pattern matches the path."""


class MethodNotAllowed(Exception):
    """The path matches, but not for the requested method."""

    def __init__(self, allowed: List[str]):
        super().__init__(", ".join(allowed))
        self.allowed = allowed


def split_path(path: str) -> List[str]:
    """'/snippet/42' → ['snippet', '42'];  '/' → []."""
    stripped = path[1:] if path.startswith("/") else path
    if stripped == "":
        return []
    return stripped.split("/")


@dataclass(frozen=True)
class Route:
    method: str
    pattern: str
    segments: Tuple[str, ...]
    handler: Handler
    capture_index: Optional[int] = None

    @property
    def capture_name(self) -> Optional[str]:
        if self.capture_index is None:
            return None
        return self.segments[self.capture_index][len(CAPTURE_MARK):]

    @property
    def literal_count(self) -> int:
        return len(self.segments) - (0 if self.capture_index is None else 1)

    @property
    def shape(self) -> Tuple[str, ...]:
        """Segments with the capture name erased; /a/:x and /a/:y share a shape."""
        if self.capture_index is None:
            return self.segments
        shape = list(self.segments)
        shape[self.capture_index] = CAPTURE_MARK
        return tuple(shape)

    def match(self, parts: List[str]) -> Optional[Dict[str, str]]:
        if len(parts) != len(self.segments):
            return None
        params: Dict[str, str] = {}
        for i, (segment, part) in enumerate(zip(self.segments, parts)):
            if i == self.capture_index:
                if part == "":
                    return None
                params[self.capture_name] = part
            elif segment != part:
                return None
        return params


@dataclass(frozen=True)
class PrefixRoute:
    prefix: str
    handler: Handler
    methods: Tuple[str, ...] = ("GET", "HEAD")


@dataclass
class Match:
    handler: Handler
    params: Dict[str, str] = field(default_factory=dict)


class Router:
    """
    Exact-segment router with single named-parameter capture.

    The router is itself a handler: awaiting router(request) dispatches the
    request and turns NotFound / MethodNotAllowed into responses.
    """

    def __init__(self):
        self._routes: List[Route] = []
        self._prefixes: List[PrefixRoute] = []

    # ── Registration ──────────────────────────────────────────────────────

    def add(self, method: str, pattern: str, handler: Handler) -> None:
        method = method.upper()
        if not pattern.startswith("/"):
            raise RouteConfigError(f"Route pattern must start with '/': {pattern!r}")

        segments = tuple(split_path(pattern))
        captures = [i for i, s in enumerate(segments) if s.startswith(CAPTURE_MARK)]
        if len(captures) > 1:
            raise RouteConfigError(
                f"Route pattern may contain at most one parameter: {pattern!r}"
            )
        capture_index = captures[0] if captures else None
        if capture_index is not None and len(segments[capture_index]) == len(CAPTURE_MARK):
            raise RouteConfigError(f"Route parameter needs a name: {pattern!r}")

        route = Route(method, pattern, segments, handler, capture_index)
        for existing in self._routes:
            if existing.method == method and existing.shape == route.shape:
                raise RouteConfigError(
                    f"Route {method} {pattern!r} conflicts with {existing.pattern!r}"
                )

        self._routes.append(route)
        # Keep the most literal patterns first so they win ties.
        self._routes.sort(key=lambda r: r.literal_count, reverse=True)
        logger.debug("Registered route %s %s", method, pattern)

    def get(self, pattern: str, handler: Handler) -> None:
        self.add("GET", pattern, handler)

    def post(self, pattern: str, handler: Handler) -> None:
        self.add("POST", pattern, handler)

    def prefix(self, prefix: str, handler: Handler) -> None:
        """Delegate every GET/HEAD path under prefix to handler."""
        if not prefix.startswith("/") or not prefix.endswith("/"):
            raise RouteConfigError(f"Prefix must start and end with '/': {prefix!r}")
        self._prefixes.append(PrefixRoute(prefix, handler))

    # ── Dispatch ──────────────────────────────────────────────────────────

    def dispatch(self, method: str, path: str) -> Match:
        """
        Resolve a request line to a handler.

        Raises:
            NotFound: no registered pattern matches the path
            MethodNotAllowed: the path matches only for other methods
        """
        method = method.upper()
        lookup_method = "GET" if method == "HEAD" else method

        allowed: List[str] = []
        parts = split_path(path)
        for route in self._routes:
            params = route.match(parts)
            if params is None:
                continue
            if route.method == lookup_method:
                return Match(route.handler, params)
            allowed.append(route.method)

        for prefix_route in self._prefixes:
            if path.startswith(prefix_route.prefix):
                if method in prefix_route.methods:
                    return Match(prefix_route.handler, {"path": path[len(prefix_route.prefix):]})
                allowed.extend(prefix_route.methods)

        if allowed:
            if "GET" in allowed and "HEAD" not in allowed:
                allowed.append("HEAD")
            raise MethodNotAllowed(sorted(set(allowed)))
        raise NotFound(path)

    async def __call__(self, request: Request) -> Response:
        try:
            match = self.dispatch(request.method, request.url.path)
        except MethodNotAllowed as e:
            return PlainTextResponse(
                "Method Not Allowed",
                status_code=405,
                headers={"Allow": ", ".join(e.allowed)},
            )
        except NotFound:
            return PlainTextResponse("Not Found", status_code=404)

        request.scope["path_params"] = match.params
        return await match.handler(request)
