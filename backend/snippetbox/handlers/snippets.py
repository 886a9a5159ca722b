"""
Snippetbox — Snippet Handlers
===============================

What:  home, show, create_form and create.
How:   Handlers are thin: read the request, call SnippetStore, render a JSON
       document or redirect. Typed store errors are mapped by
       translate_errors; every handler runs behind session_enable.
"""

import logging

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.handlers.responses import (
    form_error_from,
    not_found,
    redirect,
    render,
    translate_errors,
)
from snippetbox.middleware.session import get_session
from snippetbox.schemas.common import FormPage
from snippetbox.schemas.snippet import EXPIRY_OPTIONS, HomePage, SnippetForm, SnippetPage
from snippetbox.sessions import FLASH_KEY
from snippetbox.stores.snippets import LATEST_MAX, SnippetStore

logger = logging.getLogger(__name__)


def parse_id(raw: str) -> int | None:
    """Positive integer ids only; anything else is treated as not found."""
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 1 else None


class SnippetHandlers:
    def __init__(self, snippets: SnippetStore, latest_limit: int = LATEST_MAX):
        self.snippets = snippets
        self.latest_limit = latest_limit

    @translate_errors
    async def home(self, request: Request) -> Response:
        snippets = await self.snippets.latest(limit=self.latest_limit)
        flash = get_session(request).pop(FLASH_KEY)
        return render(HomePage(snippets=snippets, flash=flash))

    @translate_errors
    async def show(self, request: Request) -> Response:
        snippet_id = parse_id(request.path_params.get("id", ""))
        if snippet_id is None:
            return not_found()

        snippet = await self.snippets.get(snippet_id)
        flash = get_session(request).pop(FLASH_KEY)
        return render(SnippetPage(snippet=snippet, flash=flash))

    @translate_errors
    async def create_form(self, request: Request) -> Response:
        return render(
            FormPage(
                action="/snippet/create",
                fields=["title", "content", "expires"],
                defaults={"expires": 365},
                options={"expires": list(EXPIRY_OPTIONS)},
            )
        )

    @translate_errors
    async def create(self, request: Request) -> Response:
        form = await request.form()
        try:
            data = SnippetForm.model_validate(
                {key: form[key] for key in ("title", "content", "expires") if key in form}
            )
        except ValidationError as e:
            raise form_error_from(e) from e

        snippet_id = await self.snippets.insert(data.title, data.content, data.expires)
        get_session(request).put(FLASH_KEY, "Snippet successfully created!")
        return redirect(f"/snippet/{snippet_id}")
