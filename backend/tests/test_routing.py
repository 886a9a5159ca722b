"""
Snippetbox — Router Unit Tests
================================

What:  Tests for pattern registration, dispatch and the router-as-handler.

What we test:
    ✅ Named parameter capture (/snippet/:id)
    ✅ 404 for unknown paths, 405 + Allow for known paths with other methods
    ✅ Literal patterns beat capture patterns of the same length
    ✅ Registration errors (two captures, duplicate shapes, bad patterns)
    ✅ Prefix passthrough for static files
"""

import pytest
from starlette.responses import PlainTextResponse

from snippetbox.exceptions import RouteConfigError
from snippetbox.routing import MethodNotAllowed, NotFound, Router, split_path


def make_handler(name):
    async def handler(request):
        params = ",".join(f"{k}={v}" for k, v in sorted(request.path_params.items()))
        return PlainTextResponse(f"{name}:{params}")

    return handler


class TestSplitPath:

    def test_root_has_no_segments(self):
        assert split_path("/") == []

    def test_segments(self):
        assert split_path("/snippet/42") == ["snippet", "42"]

    def test_trailing_slash_keeps_empty_segment(self):
        assert split_path("/snippet/") == ["snippet", ""]


class TestDispatch:

    def setup_method(self):
        self.router = Router()
        self.show = make_handler("show")
        self.router.get("/snippet/:id", self.show)

    def test_capture_bound_to_name(self):
        match = self.router.dispatch("GET", "/snippet/42")
        assert match.handler is self.show
        assert match.params == {"id": "42"}

    def test_wrong_method_is_method_not_allowed(self):
        with pytest.raises(MethodNotAllowed) as exc_info:
            self.router.dispatch("POST", "/snippet/42")
        assert "GET" in exc_info.value.allowed
        assert "HEAD" in exc_info.value.allowed

    def test_unknown_path_is_not_found(self):
        with pytest.raises(NotFound):
            self.router.dispatch("GET", "/unknown")

    def test_segment_count_must_match(self):
        with pytest.raises(NotFound):
            self.router.dispatch("GET", "/snippet/42/edit")
        with pytest.raises(NotFound):
            self.router.dispatch("GET", "/snippet")

    def test_empty_capture_does_not_match(self):
        with pytest.raises(NotFound):
            self.router.dispatch("GET", "/snippet/")

    def test_head_served_by_get(self):
        match = self.router.dispatch("HEAD", "/snippet/7")
        assert match.handler is self.show
        assert match.params == {"id": "7"}

    def test_literal_pattern_wins_over_capture(self):
        form = make_handler("form")
        self.router.get("/snippet/create", form)
        assert self.router.dispatch("GET", "/snippet/create").handler is form
        assert self.router.dispatch("GET", "/snippet/create").params == {}
        assert self.router.dispatch("GET", "/snippet/9").handler is self.show

    def test_literal_wins_regardless_of_registration_order(self):
        router = Router()
        form = make_handler("form")
        router.get("/snippet/create", form)
        router.get("/snippet/:id", self.show)
        assert router.dispatch("GET", "/snippet/create").handler is form

    def test_same_path_different_methods(self):
        create = make_handler("create")
        form = make_handler("form")
        self.router.get("/snippet/create", form)
        self.router.post("/snippet/create", create)
        assert self.router.dispatch("POST", "/snippet/create").handler is create
        assert self.router.dispatch("GET", "/snippet/create").handler is form

    def test_root_route(self):
        home = make_handler("home")
        self.router.get("/", home)
        assert self.router.dispatch("GET", "/").handler is home
        with pytest.raises(MethodNotAllowed):
            self.router.dispatch("DELETE", "/")


class TestRegistration:

    def test_two_captures_rejected(self):
        router = Router()
        with pytest.raises(RouteConfigError, match="at most one parameter"):
            router.get("/snippet/:id/:rev", make_handler("x"))

    def test_duplicate_shape_rejected(self):
        router = Router()
        router.get("/snippet/:id", make_handler("a"))
        with pytest.raises(RouteConfigError, match="conflicts"):
            router.get("/snippet/:slug", make_handler("b"))

    def test_same_shape_other_method_allowed(self):
        router = Router()
        router.get("/snippet/:id", make_handler("a"))
        router.post("/snippet/:id", make_handler("b"))

    def test_unnamed_capture_rejected(self):
        with pytest.raises(RouteConfigError, match="needs a name"):
            Router().get("/snippet/:", make_handler("x"))

    def test_relative_pattern_rejected(self):
        with pytest.raises(RouteConfigError):
            Router().get("snippet", make_handler("x"))

    def test_prefix_must_end_with_slash(self):
        with pytest.raises(RouteConfigError):
            Router().prefix("/static", make_handler("x"))


class TestPrefix:

    def setup_method(self):
        self.router = Router()
        self.static = make_handler("static")
        self.router.prefix("/static/", self.static)

    def test_prefix_passes_remainder(self):
        match = self.router.dispatch("GET", "/static/css/main.css")
        assert match.handler is self.static
        assert match.params == {"path": "css/main.css"}

    def test_prefix_rejects_post(self):
        with pytest.raises(MethodNotAllowed):
            self.router.dispatch("POST", "/static/css/main.css")

    def test_exact_routes_checked_first(self):
        special = make_handler("special")
        self.router.get("/static/:name", special)
        assert self.router.dispatch("GET", "/static/robots.txt").handler is special
        assert self.router.dispatch("GET", "/static/img/logo.png").handler is self.static


class TestRouterAsHandler:

    def setup_method(self):
        self.router = Router()
        self.router.get("/snippet/:id", make_handler("show"))

    @pytest.mark.asyncio
    async def test_params_exposed_on_request(self, make_request):
        response = await self.router(make_request("GET", "/snippet/42"))
        assert response.status_code == 200
        assert response.body == b"show:id=42"

    @pytest.mark.asyncio
    async def test_405_response_has_allow_header(self, make_request):
        response = await self.router(make_request("POST", "/snippet/42"))
        assert response.status_code == 405
        assert response.headers["allow"] == "GET, HEAD"

    @pytest.mark.asyncio
    async def test_404_response(self, make_request):
        response = await self.router(make_request("GET", "/unknown"))
        assert response.status_code == 404
