"""
Snippetbox — Request Logging Middleware
=========================================

What:  log_request, the second stage of the standard chain.
How:   Writes one access line when the request arrives (remote origin,
       protocol, method, path), before anything downstream runs, and a
       completion line with status and duration once the response is back.

Log Format:
    192.168.1.100:51234 - HTTP/1.1 GET /snippet/1
    GET /snippet/1 200 3.2ms

    Completion level follows the status: 5xx → ERROR, 4xx → WARNING,
    everything else → INFO.

Not logged: request bodies, cookies, form fields (passwords travel in them).
"""

import logging
import time

from starlette.requests import Request
from starlette.responses import Response

from snippetbox.middleware import Handler

logger = logging.getLogger("snippetbox.access")


def _remote_origin(request: Request) -> str:
    if request.client is None:
        return "unknown"
    host, port = request.client
    return f"{host}:{port}" if port else host


def log_request(next_handler: Handler) -> Handler:
    async def handler(request: Request) -> Response:
        start_time = time.perf_counter()
        remote = _remote_origin(request)
        protocol = f"HTTP/{request.scope.get('http_version', '1.1')}"
        method = request.method
        path = request.url.path

        logger.info(
            "%s - %s %s %s",
            remote,
            protocol,
            method,
            path,
            extra={"client": remote, "method": method, "path": path},
        )

        response = await next_handler(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms",
            method,
            path,
            status,
            duration_ms,
            extra={
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response

    return handler
