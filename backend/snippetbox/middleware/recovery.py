"""
Snippetbox — Fault Boundary Middleware
========================================

What:  recover_panic, the outermost stage of the standard chain.
How:   Awaits the downstream handler inside try/except. Any Exception that
       escapes is wrapped in a ServerFault, handed to the FaultReporter, and
       answered with a generic 500. The response carries `Connection: close`
       so the server drops the keep-alive connection after a fault.

Nothing raised downstream propagates past this layer. Task cancellation
(BaseException) is not intercepted.
"""

import logging

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from snippetbox.exceptions import ServerFault
from snippetbox.middleware import Handler, Middleware
from snippetbox.observability import FaultReporter

logger = logging.getLogger(__name__)


def server_error_response() -> Response:
    return PlainTextResponse(
        "Internal Server Error",
        status_code=500,
        headers={"Connection": "close"},
    )


def report_fault(reporter: FaultReporter, exc: Exception, request: Request) -> None:
    """Hand an intercepted exception to the reporter; a failing reporter is only logged."""
    fault = ServerFault(exc, method=request.method, path=request.url.path)
    try:
        reporter.report(fault)
    except Exception:
        logger.exception("Fault reporter failed while reporting %r", exc)


def recover_panic(reporter: FaultReporter) -> Middleware:
    """Build the fault boundary middleware around the given reporter."""

    def middleware(next_handler: Handler) -> Handler:
        async def handler(request: Request) -> Response:
            try:
                return await next_handler(request)
            except Exception as exc:
                report_fault(reporter, exc, request)
                return server_error_response()

        return handler

    return middleware
