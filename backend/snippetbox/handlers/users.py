"""
Snippetbox — User Handlers
============================

What:  signup, login, logout and profile.
How:   Same shape as the snippet handlers. Login and logout renew the session
       token; the authenticated user id lives under AUTH_USER_KEY.
"""

import logging

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.exceptions import InvalidCredentials, NoRecord
from snippetbox.handlers.responses import form_error_from, redirect, render, translate_errors
from snippetbox.middleware.session import get_session
from snippetbox.schemas.common import FormPage
from snippetbox.schemas.user import LoginForm, ProfilePage, SignupForm
from snippetbox.sessions import AUTH_USER_KEY, FLASH_KEY
from snippetbox.stores.users import UserStore

logger = logging.getLogger(__name__)


class UserHandlers:
    def __init__(self, users: UserStore):
        self.users = users

    @translate_errors
    async def signup_form(self, request: Request) -> Response:
        return render(FormPage(action="/user/signup", fields=["name", "email", "password"]))

    @translate_errors
    async def signup(self, request: Request) -> Response:
        form = await request.form()
        try:
            data = SignupForm.model_validate(
                {key: form[key] for key in ("name", "email", "password") if key in form}
            )
        except ValidationError as e:
            raise form_error_from(e) from e

        await self.users.insert(data.name, data.email, data.password)
        get_session(request).put(FLASH_KEY, "Your signup was successful. Please log in.")
        return redirect("/user/login")

    @translate_errors
    async def login_form(self, request: Request) -> Response:
        flash = get_session(request).pop(FLASH_KEY)
        return render(FormPage(action="/user/login", fields=["email", "password"], flash=flash))

    @translate_errors
    async def login(self, request: Request) -> Response:
        form = await request.form()
        try:
            data = LoginForm.model_validate(
                {key: form[key] for key in ("email", "password") if key in form}
            )
        except ValidationError as e:
            # Missing fields get the same answer as wrong credentials.
            raise InvalidCredentials() from e

        user_id = await self.users.authenticate(data.email, data.password)

        session = get_session(request)
        session.renew()
        session.put(AUTH_USER_KEY, user_id)
        logger.info("User %d logged in", user_id)
        return redirect("/")

    @translate_errors
    async def logout(self, request: Request) -> Response:
        session = get_session(request)
        session.remove(AUTH_USER_KEY)
        session.renew()
        session.put(FLASH_KEY, "You've been logged out successfully!")
        return redirect("/")

    @translate_errors
    async def profile(self, request: Request) -> Response:
        session = get_session(request)
        user_id = session.get(AUTH_USER_KEY)
        if user_id is None:
            return redirect("/user/login")

        try:
            user = await self.users.get(user_id)
        except NoRecord:
            # Account no longer exists; drop the stale login.
            session.remove(AUTH_USER_KEY)
            return redirect("/user/login")

        return render(ProfilePage(user=user, flash=session.pop(FLASH_KEY)))
