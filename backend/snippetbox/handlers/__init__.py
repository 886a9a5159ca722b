"""
Snippetbox — Request Handlers
===============================

What:  Terminal handlers the router dispatches to.

Handler Inventory:
    - SnippetHandlers: GET /, GET+POST /snippet/create, GET /snippet/:id
    - UserHandlers:    GET+POST /user/signup, GET+POST /user/login,
                       POST /user/logout, GET /user/profile
    - StaticHandler:   GET /static/* passthrough

Handlers are thin: extract form data and path parameters, call a store,
translate typed errors, render JSON or redirect.
"""

from snippetbox.handlers.snippets import SnippetHandlers
from snippetbox.handlers.static import StaticHandler
from snippetbox.handlers.users import UserHandlers

__all__ = ["SnippetHandlers", "StaticHandler", "UserHandlers"]
