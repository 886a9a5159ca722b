"""
Snippetbox — Security Headers Middleware
==========================================

What:  secure_headers, the innermost stage of the standard chain.
How:   Always calls downstream, then sets the security headers on whatever
       response comes back (including 404/405 from the router).
"""

from starlette.requests import Request
from starlette.responses import Response

from snippetbox.middleware import Handler

SECURITY_HEADERS = {
    "X-XSS-Protection": "1; mode=block",
    "X-Frame-Options": "deny",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "origin-when-cross-origin",
}


def secure_headers(next_handler: Handler) -> Handler:
    async def handler(request: Request) -> Response:
        response = await next_handler(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response

    return handler
