"""Bearer and HTTP Basic gateways as Starlette middleware."""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from webdavhub.auth.credentials import CredentialValidator
from webdavhub.auth.errors import TokenError, Unauthenticated, error_response
from webdavhub.auth.paths import PublicPathClassifier
from webdavhub.auth.tokens import TokenVerifier

logger = logging.getLogger("webdavhub.auth")

AuthEnabledSource = Callable[[], bool]

DEFAULT_REALM = "Restricted"


def auth_enabled_for(request: Request, source: AuthEnabledSource) -> bool:
    """Read the auth toggle once per request.

    The first read is stored on ``request.state`` so the gateway and the
    handler behind it agree even if the toggle flips mid-request.
    """
    enabled = getattr(request.state, "auth_enabled", None)
    if enabled is None:
        enabled = bool(source())
        request.state.auth_enabled = enabled
    return enabled


def extract_bearer_token(request: Request, allow_query: bool = True) -> str | None:
    """Token from ``Authorization: Bearer``, else from ``?token=``.

    The query fallback serves clients that cannot set headers (download
    links, <img> tags).
    """
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        token = header[7:].strip()
        if token:
            return token
    if allow_query:
        token = request.query_params.get("token", "").strip()
        if token:
            return token
    return None


def parse_basic_auth(header: str) -> tuple[str, str] | None:
    """Decode ``Basic base64(user:pass)``; None if absent or undecodable."""
    scheme, _, param = header.partition(" ")
    if scheme.lower() != "basic" or not param:
        return None
    try:
        decoded = base64.b64decode(param.strip()).decode("utf-8")
        username, password = decoded.split(":", 1)
    except (ValueError, UnicodeDecodeError):
        return None
    return username, password


def _client(request: Request) -> str:
    return request.client.host if request.client else "-"


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Guard the REST surface with signed bearer tokens.

    Public paths pass regardless of the toggle; otherwise a disabled toggle
    forwards everything, and an enabled one requires a token that verifies.
    """

    def __init__(
        self,
        app,
        verifier: TokenVerifier,
        auth_enabled: AuthEnabledSource,
        classifier: PublicPathClassifier | None = None,
    ):
        super().__init__(app)
        self._verifier = verifier
        self._auth_enabled = auth_enabled
        self._classifier = classifier or PublicPathClassifier()

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if self._classifier.is_public(path):
            return await call_next(request)

        if not auth_enabled_for(request, self._auth_enabled):
            return await call_next(request)

        token = extract_bearer_token(request)
        if token is None:
            logger.warning("Missing token for path %s from %s", path, _client(request))
            return error_response(Unauthenticated(), message="missing token")

        try:
            identity = self._verifier.verify(token)
        except TokenError as e:
            logger.warning(
                "Rejected token for path %s from %s: %s (%s)",
                path, _client(request), type(e).__name__, e,
            )
            return error_response(e)

        request.state.identity = identity
        return await call_next(request)


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """HTTP Basic Auth for the WebDAV surface.

    No public paths: WebDAV clients authenticate once per connection and
    expect every request to be challenged.
    """

    def __init__(
        self,
        app,
        validator: CredentialValidator,
        auth_enabled: AuthEnabledSource,
        realm: str = DEFAULT_REALM,
    ):
        super().__init__(app)
        self._validator = validator
        self._auth_enabled = auth_enabled
        self._challenge = {"WWW-Authenticate": f'Basic realm="{realm}"'}

    async def dispatch(self, request: Request, call_next) -> Response:
        if not auth_enabled_for(request, self._auth_enabled):
            return await call_next(request)

        path = request.url.path
        creds = parse_basic_auth(request.headers.get("Authorization", ""))
        if creds is None:
            logger.warning(
                "[WebDAV Auth] Basic auth credentials not provided by %s for path %s",
                _client(request), path,
            )
            return self._unauthorized()

        username, password = creds
        if not self._validator.validate(username, password):
            logger.warning(
                "[WebDAV Auth] Invalid basic auth credentials for user '%s' from %s for path %s",
                username, _client(request), path,
            )
            return self._unauthorized()

        return await call_next(request)

    def _unauthorized(self) -> Response:
        return Response(content="Unauthorized", status_code=401, headers=self._challenge)
