"""Authentication error taxonomy.

Every error carries the HTTP status it maps to. Token failures are split
into subclasses for logging only; clients always see a plain 401.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for gateway errors."""

    status_code = 500
    public_message = "authentication error"


class MalformedRequest(AuthError):
    """Request body could not be understood."""

    status_code = 400
    public_message = "invalid request body"


class Unauthenticated(AuthError):
    """Missing, invalid or expired credential."""

    status_code = 401
    public_message = "unauthorized"


class MethodNotAllowed(AuthError):
    status_code = 405
    public_message = "method not allowed"


class SigningFailure(AuthError):
    """The token signing primitive failed. Points at misconfiguration."""

    status_code = 500
    public_message = "failed to generate token"


class TokenError(Unauthenticated):
    """Base class for token verification failures."""

    public_message = "invalid or expired token"


class Malformed(TokenError):
    """Token could not be parsed or lacks required claims."""


class InvalidSignature(TokenError):
    """Token signature does not match the signing secret."""


class Expired(TokenError):
    """Token signature is valid but its expiry has passed."""


def error_response(
    exc: AuthError, message: str | None = None, headers: dict[str, str] | None = None,
):
    """Render an AuthError the way API handlers render errors.

    Only the class-level public message (or an explicit override) reaches the
    client; ``str(exc)`` stays in the logs.
    """
    from starlette.responses import JSONResponse

    return JSONResponse(
        {"error": message or exc.public_message},
        status_code=exc.status_code,
        headers=headers,
    )
