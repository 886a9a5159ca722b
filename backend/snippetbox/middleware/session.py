"""
Snippetbox — Session Middleware
=================================

What:  session_enable, the dynamic chain stage for routes that read or write
       per-visitor state.
How:   1. Read the session token from the cookie and load the data from the
          SessionStore (retried with tenacity on SessionUnavailable)
       2. Attach a Session to request.state.session
       3. Invoke the handler
       4. If the handler changed the session: save it (or delete it when
          destroyed), drop any token replaced by renew(), and set the cookie

Unknown or expired tokens start an empty session. Store failures after the
retries are exhausted propagate as SessionUnavailable; recover_panic turns
them into a 500.
"""

import logging
from datetime import timedelta

from starlette.requests import Request
from starlette.responses import Response
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from snippetbox.exceptions import SessionUnavailable
from snippetbox.middleware import Handler, Middleware
from snippetbox.sessions import Session, SessionStore, new_token

logger = logging.getLogger(__name__)


def session_enable(
    store: SessionStore,
    *,
    cookie_name: str = "session",
    lifetime: timedelta = timedelta(hours=12),
    secure: bool = False,
    retry_attempts: int = 3,
    retry_initial_wait: float = 0.05,
    retry_max_wait: float = 1.0,
) -> Middleware:
    """Build the session middleware for the given store and cookie settings."""

    async def load(token: str):
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(SessionUnavailable),
            stop=stop_after_attempt(retry_attempts),
            wait=wait_exponential(multiplier=retry_initial_wait, max=retry_max_wait)
            + wait_random(0, retry_initial_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await store.load(token)

    async def commit(session: Session, response: Response) -> None:
        if session.stale_token is not None:
            await store.delete(session.stale_token)

        if session.destroyed:
            if session.token is not None:
                await store.delete(session.token)
            response.delete_cookie(cookie_name, path="/")
            return

        if session.token is None:
            session.token = new_token()
        await store.save(session.token, session.to_dict(), lifetime)
        response.set_cookie(
            cookie_name,
            session.token,
            max_age=int(lifetime.total_seconds()),
            path="/",
            secure=secure,
            httponly=True,
            samesite="lax",
        )

    def middleware(next_handler: Handler) -> Handler:
        async def handler(request: Request) -> Response:
            token = request.cookies.get(cookie_name)
            data = await load(token) if token else None
            if data is None:
                session = Session()
            else:
                session = Session(token=token, data=data)
            request.state.session = session

            response = await next_handler(request)

            if session.modified:
                await commit(session, response)
            return response

        return handler

    return middleware


def get_session(request: Request) -> Session:
    """The session attached by session_enable."""
    return request.state.session
