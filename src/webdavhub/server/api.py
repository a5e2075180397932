"""Route handlers for /api/auth/*, /api/me and /api/health."""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from webdavhub.auth.errors import (
    MalformedRequest,
    SigningFailure,
    TokenError,
    Unauthenticated,
    error_response,
)
from webdavhub.auth.middleware import auth_enabled_for, extract_bearer_token

logger = logging.getLogger("webdavhub.server")


async def health(request: Request) -> JSONResponse:
    """GET /api/health"""
    return JSONResponse({"status": "ok"})


async def login(request: Request) -> JSONResponse:
    """POST /api/auth/login - exchange username/password for a token."""
    auth = request.app.state.auth
    try:
        body = await request.json()
    except ValueError as e:
        logger.warning("Invalid login request body: %s", e)
        return error_response(MalformedRequest())

    if not isinstance(body, dict):
        return error_response(MalformedRequest())
    username = body.get("username")
    password = body.get("password")
    if not isinstance(username, str) or not isinstance(password, str):
        return error_response(MalformedRequest(), message="username and password are required")

    if not auth.validator.validate(username, password):
        logger.warning("Failed login attempt for user '%s'", username)
        return error_response(Unauthenticated(), message="invalid credentials")

    try:
        token = auth.issuer.issue(username)
    except SigningFailure as e:
        logger.error("Failed to generate token for user '%s': %s", username, e)
        return error_response(e)

    logger.info("Successful login for user '%s'", username)
    return JSONResponse({"token": token})


async def auth_check(request: Request) -> JSONResponse:
    """GET /api/auth/check - report token validity without rejecting."""
    auth = request.app.state.auth
    enabled = auth_enabled_for(request, auth.auth_enabled)

    valid = False
    token = extract_bearer_token(request, allow_query=False)
    if token is not None:
        try:
            auth.verifier.verify(token)
            valid = True
        except TokenError as e:
            logger.debug("Auth check failed: %s (%s)", type(e).__name__, e)

    return JSONResponse({"isAuthenticated": valid, "authEnabled": enabled})


async def auth_enabled(request: Request) -> JSONResponse:
    """GET /api/auth/enabled - lets the dashboard skip the login screen."""
    auth = request.app.state.auth
    return JSONResponse({"enabled": auth_enabled_for(request, auth.auth_enabled)})


async def me(request: Request) -> JSONResponse:
    """GET /api/me - username embedded in the caller's token."""
    auth = request.app.state.auth
    token = extract_bearer_token(request, allow_query=False)
    if token is None:
        return error_response(Unauthenticated(), message="missing or invalid Authorization header")

    try:
        identity = auth.verifier.verify(token)
    except TokenError as e:
        logger.warning("Rejected token on /api/me: %s", type(e).__name__)
        return error_response(e)

    return JSONResponse({"username": identity.username})
