"""Signed, time-bounded bearer tokens (JWT, HS256).

Tokens carry ``{"username", "iat", "exp"}`` as integer epoch seconds and are
self-verifying: there is no server-side session or revocation list.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from webdavhub.auth.errors import Expired, InvalidSignature, Malformed, SigningFailure

logger = logging.getLogger("webdavhub.auth")

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=24)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Identity:
    """The authenticated user extracted from a verified token."""

    username: str


class TokenIssuer:
    """Mint tokens for an already-validated identity."""

    def __init__(self, secret: bytes, ttl: timedelta = DEFAULT_TTL, clock: Clock = utc_now):
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    def issue(self, username: str) -> str:
        """Return a signed token expiring ``ttl`` after now.

        Raises:
            SigningFailure: If the signing primitive fails.
        """
        issued_at = int(self._clock().timestamp())
        claims = {
            "username": username,
            "iat": issued_at,
            "exp": issued_at + int(self._ttl.total_seconds()),
        }
        try:
            return jwt.encode(claims, self._secret, algorithm=ALGORITHM)
        except (JWTError, TypeError, ValueError) as e:
            raise SigningFailure(f"token signing failed: {e}") from e


class TokenVerifier:
    """Check a presented token's signature and expiry."""

    def __init__(self, secret: bytes, clock: Clock = utc_now):
        self._secret = secret
        self._clock = clock

    def verify(self, token: str) -> Identity:
        """Return the embedded identity.

        Raises:
            Malformed: Token cannot be parsed or lacks valid claims.
            InvalidSignature: Signature does not match the secret.
            Expired: Signature is valid but ``now >= exp``.
        """
        try:
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise Malformed(str(e)) from e

        try:
            # Time claims are checked below against the injected clock only
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
            )
        except JWTError as e:
            raise InvalidSignature(str(e)) from e

        username = claims.get("username")
        expires_at = claims.get("exp")
        if not isinstance(username, str) or not username:
            raise Malformed("missing username claim")
        if not isinstance(expires_at, int) or isinstance(expires_at, bool):
            raise Malformed("missing exp claim")

        now = int(self._clock().timestamp())
        if now >= expires_at:
            raise Expired(f"token expired at {expires_at}, now {now}")

        return Identity(username=username)
