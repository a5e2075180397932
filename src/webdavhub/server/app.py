"""Starlette app factory for the webdavhub server."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse
from starlette.routing import BaseRoute, Mount, Route

from webdavhub.auth.credentials import AuthSettings, CredentialValidator
from webdavhub.auth.errors import MethodNotAllowed, error_response
from webdavhub.auth.middleware import (
    AuthEnabledSource,
    BasicAuthMiddleware,
    BearerAuthMiddleware,
)
from webdavhub.auth.paths import PublicPathClassifier
from webdavhub.auth.tokens import Clock, TokenIssuer, TokenVerifier, utc_now
from webdavhub.server.api import auth_check, auth_enabled, health, login, me
from webdavhub.server.webdav import DAV_METHODS, create_webdav_app

if TYPE_CHECKING:
    from starlette.types import ASGIApp

    from webdavhub.config import Config

logger = logging.getLogger("webdavhub.server")

WEBDAV_PREFIX = "/webdav"


@dataclass(frozen=True)
class AuthContext:
    """Everything the gateways and auth handlers need, built once."""

    settings: AuthSettings
    validator: CredentialValidator
    issuer: TokenIssuer
    verifier: TokenVerifier
    auth_enabled: AuthEnabledSource

    @classmethod
    def build(
        cls, settings: AuthSettings, auth_enabled: AuthEnabledSource, clock: Clock = utc_now,
    ) -> AuthContext:
        return cls(
            settings=settings,
            validator=CredentialValidator(settings.credentials),
            issuer=TokenIssuer(settings.secret, settings.token_ttl, clock),
            verifier=TokenVerifier(settings.secret, clock),
            auth_enabled=auth_enabled,
        )


async def _method_not_allowed(request: Request, exc: HTTPException):
    return error_response(MethodNotAllowed(), headers=exc.headers)


async def _webdav_root(request: Request) -> RedirectResponse:
    # 308 keeps the method so PROPFIND on the bare prefix still works
    return RedirectResponse(request.url.replace(path=WEBDAV_PREFIX + "/"), status_code=308)


def create_app(
    config: Config,
    *,
    routes: list[BaseRoute] | None = None,
    webdav_app: ASGIApp | None = None,
    settings: AuthSettings | None = None,
    clock: Clock | None = None,
    classifier: PublicPathClassifier | None = None,
) -> Starlette:
    """Create the ASGI application.

    ``/webdav`` goes through the Basic gateway, everything else through the
    bearer gateway. ``routes`` are extra API routes (file browser, database
    search, ...) that sit behind the bearer gateway; ``webdav_app`` serves
    files under ``/webdav``.
    """
    settings = settings or AuthSettings.from_config(config)
    auth = AuthContext.build(settings, config.is_auth_enabled, clock or utc_now)

    api_routes: list[BaseRoute] = [
        Route("/api/health", health),
        Route("/api/auth/login", login, methods=["POST"]),
        Route("/api/auth/check", auth_check),
        Route("/api/auth/enabled", auth_enabled),
        Route("/api/me", me),
    ]
    api_routes.extend(routes or [])

    if config.static_dir:
        from starlette.staticfiles import StaticFiles

        static_dir = Path(config.static_dir)
        if static_dir.is_dir():
            api_routes.append(Mount("/static", app=StaticFiles(directory=str(static_dir))))
        else:
            logger.warning("static_dir %s does not exist; /static not mounted", static_dir)

    api_app = Starlette(
        routes=api_routes,
        middleware=[
            Middleware(
                BearerAuthMiddleware,
                verifier=auth.verifier,
                auth_enabled=auth.auth_enabled,
                classifier=classifier,
            ),
        ],
        exception_handlers={405: _method_not_allowed},
    )
    api_app.state.auth = auth

    dav_gateway = BasicAuthMiddleware(
        webdav_app or create_webdav_app(),
        validator=auth.validator,
        auth_enabled=auth.auth_enabled,
    )

    cors_origins = config.cors_origins
    origins = [o.strip() for o in cors_origins.split(",")]

    app = Starlette(
        routes=[
            Route(WEBDAV_PREFIX, _webdav_root, methods=list(DAV_METHODS)),
            Mount(WEBDAV_PREFIX, app=dav_gateway),
            Mount("", app=api_app),
        ],
        middleware=[
            Middleware(
                CORSMiddleware, allow_origins=origins, allow_methods=["*"], allow_headers=["*"],
            ),
        ],
    )
    app.state.auth = auth

    return app
