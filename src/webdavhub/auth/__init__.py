"""Authentication gateway: credentials, tokens, public paths, middleware."""

from webdavhub.auth.credentials import AuthSettings, Credentials, CredentialValidator
from webdavhub.auth.errors import (
    AuthError,
    Expired,
    InvalidSignature,
    Malformed,
    MalformedRequest,
    MethodNotAllowed,
    SigningFailure,
    TokenError,
    Unauthenticated,
)
from webdavhub.auth.paths import PUBLIC_PATHS, PublicPathClassifier, is_public
from webdavhub.auth.tokens import Identity, TokenIssuer, TokenVerifier

__all__ = [
    "PUBLIC_PATHS",
    "AuthError",
    "AuthSettings",
    "CredentialValidator",
    "Credentials",
    "Expired",
    "Identity",
    "InvalidSignature",
    "Malformed",
    "MalformedRequest",
    "MethodNotAllowed",
    "PublicPathClassifier",
    "SigningFailure",
    "TokenError",
    "TokenIssuer",
    "TokenVerifier",
    "Unauthenticated",
    "is_public",
]
