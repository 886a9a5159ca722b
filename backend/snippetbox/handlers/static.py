"""
Snippetbox — Static Passthrough
=================================

What:  Adapts Starlette's StaticFiles to the router's prefix route.
How:   The router strips the prefix and passes the remainder in
       path_params["path"]; StaticFiles resolves it inside static_dir (it
       refuses paths that escape the directory) and builds the response.
"""

import os

from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.staticfiles import StaticFiles


class StaticHandler:
    def __init__(self, directory: str):
        # check_dir=False: a missing directory answers 404 instead of failing startup.
        self.files = StaticFiles(directory=directory, check_dir=False)

    async def __call__(self, request: Request) -> Response:
        relative = request.path_params.get("path", "")
        path = os.path.normpath(os.path.join(*relative.split("/")))
        try:
            return await self.files.get_response(path, request.scope)
        except HTTPException as e:
            return PlainTextResponse(e.detail, status_code=e.status_code, headers=e.headers)
