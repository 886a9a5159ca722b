"""
Snippetbox — Application
==========================

What:  Wires stores, handlers, router and middleware chains into one ASGI
       app.
How:   routes() builds the route table once. Every session-dependent route
       is wrapped in the dynamic chain; the whole router is wrapped in the
       standard chain. __call__ adapts the composed handler to ASGI and reports
       faults raised while the response is being sent.

    standard = Chain(recover_panic, log_request, secure_headers)
    dynamic  = Chain(session_enable)

    GET  /                 dynamic  home
    GET  /snippet/create   dynamic  create_form
    POST /snippet/create   dynamic  create
    GET  /snippet/:id      dynamic  show
    GET  /user/signup      dynamic  signup_form
    POST /user/signup      dynamic  signup
    GET  /user/login       dynamic  login_form
    POST /user/login       dynamic  login
    POST /user/logout      dynamic  logout
    GET  /user/profile     dynamic  profile
    GET  /static/*         -        static passthrough
"""

from datetime import timedelta

from starlette.requests import Request
from starlette.types import Message, Receive, Scope, Send

from snippetbox.config import Settings
from snippetbox.handlers import SnippetHandlers, StaticHandler, UserHandlers
from snippetbox.middleware import Chain, Handler
from snippetbox.middleware.headers import SECURITY_HEADERS, secure_headers
from snippetbox.middleware.logging import log_request
from snippetbox.middleware.recovery import recover_panic, report_fault, server_error_response
from snippetbox.middleware.session import session_enable
from snippetbox.observability import FaultReporter, LoggingFaultReporter
from snippetbox.routing import Router
from snippetbox.sessions import SessionStore
from snippetbox.stores import SnippetStore, UserStore


class Application:
    """
    The request-dispatch pipeline.

    All collaborators are injected; nothing is looked up from module state.
    """

    def __init__(
        self,
        settings: Settings,
        snippets: SnippetStore,
        users: UserStore,
        sessions: SessionStore,
        reporter: FaultReporter | None = None,
    ):
        self.settings = settings
        self.snippets = snippets
        self.users = users
        self.sessions = sessions
        self.reporter = reporter or LoggingFaultReporter()
        self.handler: Handler = self.routes()

    def standard_chain(self) -> Chain:
        return Chain(recover_panic(self.reporter), log_request, secure_headers)

    def dynamic_chain(self) -> Chain:
        return Chain(
            session_enable(
                self.sessions,
                cookie_name=self.settings.session_cookie_name,
                lifetime=timedelta(hours=self.settings.session_lifetime_hours),
                secure=self.settings.session_cookie_secure,
                retry_attempts=self.settings.session_retry_attempts,
                retry_max_wait=self.settings.session_retry_max_wait,
            )
        )

    def routes(self) -> Handler:
        standard = self.standard_chain()
        dynamic = self.dynamic_chain()

        snippets = SnippetHandlers(self.snippets, latest_limit=self.settings.latest_limit)
        users = UserHandlers(self.users)

        router = Router()
        router.get("/", dynamic.then(snippets.home))
        router.get("/snippet/create", dynamic.then(snippets.create_form))
        router.post("/snippet/create", dynamic.then(snippets.create))
        router.get("/snippet/:id", dynamic.then(snippets.show))

        router.get("/user/signup", dynamic.then(users.signup_form))
        router.post("/user/signup", dynamic.then(users.signup))
        router.get("/user/login", dynamic.then(users.login_form))
        router.post("/user/login", dynamic.then(users.login))
        router.post("/user/logout", dynamic.then(users.logout))
        router.get("/user/profile", dynamic.then(users.profile))

        router.prefix(self.settings.static_prefix, StaticHandler(self.settings.static_dir))

        return standard.then(router)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return
        request = Request(scope, receive)
        response = await self.handler(request)

        started = False

        async def tracking_send(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        # The body is sent outside the chains. After the status line is out a
        # fault is re-raised and the server drops the connection.
        try:
            await response(scope, receive, tracking_send)
        except Exception as exc:
            report_fault(self.reporter, exc, request)
            if started:
                raise
            fallback = server_error_response()
            fallback.headers.update(SECURITY_HEADERS)
            await fallback(scope, receive, send)
