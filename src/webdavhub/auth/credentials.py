"""Single configured identity and constant-time credential checks."""

from __future__ import annotations

import hmac
import logging
import secrets
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from webdavhub.config import Config

logger = logging.getLogger("webdavhub.auth")


def _to_bytes(value: str) -> bytes:
    # JSON bodies may carry lone surrogates (e.g. "\ud800") that strict UTF-8 rejects
    return value.encode("utf-8", errors="surrogatepass")


@dataclass(frozen=True)
class Credentials:
    """Username/password pair. Never persisted."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class AuthSettings:
    """Immutable auth configuration, built once at startup.

    Gateways receive this explicitly instead of reading globals.
    """

    credentials: Credentials
    secret: bytes = field(repr=False)
    token_ttl: timedelta = timedelta(hours=24)

    @classmethod
    def from_config(cls, config: Config) -> AuthSettings:
        secret = config.jwt_secret_value
        if not secret:
            logger.warning(
                "No jwt_secret configured; using a random per-process secret. "
                "Issued tokens will not survive a restart."
            )
            secret = secrets.token_urlsafe(32)
        return cls(
            credentials=Credentials(config.username, config.password),
            secret=secret.encode("utf-8"),
            token_ttl=timedelta(hours=int(config.token_ttl_hours)),
        )


class CredentialValidator:
    """Compare supplied credentials against the configured ones."""

    def __init__(self, credentials: Credentials):
        self._username = _to_bytes(credentials.username)
        self._password = _to_bytes(credentials.password)

    def validate(self, username: str, password: str) -> bool:
        """True only if both fields match exactly.

        Both comparisons always run so the response time does not reveal
        which field was wrong.
        """
        username_ok = hmac.compare_digest(_to_bytes(username), self._username)
        password_ok = hmac.compare_digest(_to_bytes(password), self._password)
        return username_ok & password_ok
