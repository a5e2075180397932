"""Default WebDAV surface used when no file-serving backend is plugged in."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route

DAV_METHODS = (
    "OPTIONS", "GET", "HEAD", "PUT", "DELETE",
    "PROPFIND", "PROPPATCH", "MKCOL", "COPY", "MOVE", "LOCK", "UNLOCK",
)


async def webdav_placeholder(request: Request) -> Response:
    if request.method == "OPTIONS":
        return Response(
            status_code=200,
            headers={"DAV": "1, 2", "Allow": ", ".join(DAV_METHODS)},
        )
    return PlainTextResponse("WebDAV backend not configured", status_code=501)


def create_webdav_app() -> Starlette:
    """Catch-all app answering OPTIONS and 501 for everything else."""
    return Starlette(
        routes=[Route("/{path:path}", webdav_placeholder, methods=list(DAV_METHODS))],
    )
