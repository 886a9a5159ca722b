"""
Snippetbox — Handler Responses & Error Translation
====================================================

What:  Response helpers shared by the handlers, and translate_errors, the
       decorator that maps the store layer's typed errors to HTTP responses.

Translation table:
    NoRecord            → 404  not_found          (no detail)
    InvalidCredentials  → 400  invalid_credentials (same text for every cause)
    DuplicateEmail      → 400  duplicate_email    (field message)
    FormError           → 422  validation_error   (field messages)
    PersistenceError    → 500  server_error       (detail logged, not returned)

Anything else propagates to recover_panic.
"""

import functools
import logging
from typing import Awaitable, Callable, Dict

from pydantic import BaseModel, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from snippetbox.exceptions import (
    DuplicateEmail,
    FormError,
    InvalidCredentials,
    NoRecord,
    PersistenceError,
)
from snippetbox.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


def render(model: BaseModel, status_code: int = 200) -> Response:
    return JSONResponse(model.model_dump(mode="json"), status_code=status_code)


def redirect(url: str) -> Response:
    """303 See Other, so the browser follows up with a GET."""
    return RedirectResponse(url, status_code=303)


def error(status_code: int, code: str, message: str, fields: Dict[str, str] | None = None) -> Response:
    body = ErrorResponse(error=code, message=message, fields=fields)
    return JSONResponse(body.model_dump(mode="json", exclude_none=True), status_code=status_code)


def not_found() -> Response:
    return error(404, "not_found", "Not Found")


def form_error_from(exc: ValidationError) -> FormError:
    """Collapse a pydantic ValidationError into one message per form field."""
    field_errors: Dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__all__"
        message = err["msg"].removeprefix("Value error, ")
        field_errors.setdefault(field, message)
    return FormError(field_errors)


def translate_errors(handler: Callable[..., Awaitable[Response]]) -> Callable[..., Awaitable[Response]]:
    """Wrap a handler (function or method); the request is its last argument."""

    @functools.wraps(handler)
    async def wrapper(*args) -> Response:
        request: Request = args[-1]
        try:
            return await handler(*args)
        except NoRecord:
            return not_found()
        except InvalidCredentials as e:
            return error(400, "invalid_credentials", e.message)
        except DuplicateEmail as e:
            return error(400, "duplicate_email", e.message, {e.field: e.message})
        except FormError as e:
            return error(422, "validation_error", e.message, e.field_errors)
        except PersistenceError as e:
            logger.error(
                "Persistence error on %s %s: %s | Context: %s",
                request.method,
                request.url.path,
                e.message,
                e.context,
                exc_info=e.__cause__ is not None,
            )
            return error(500, "server_error", "An internal error occurred. Please try again later.")

    return wrapper
