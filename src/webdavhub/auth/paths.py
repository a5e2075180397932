"""Paths that bypass bearer authentication."""

from __future__ import annotations

from collections.abc import Iterable

# Matched literally: exact match, or prefix followed by "/".
PUBLIC_PATHS: tuple[str, ...] = (
    "/api/health",
    "/api/auth/enabled",
    "/api/auth/test",
    "/api/auth/login",
    "/api/auth/check",
    "/api/download",
    "/api/config-status",
    "/api/config",
    "/api/config/update",
    "/api/config/update-silent",
    "/api/config/events",
    "/api/mediahub/message",
    "/api/mediahub/events",
    "/api/mediahub/logs",
    "/api/mediahub/logs/export",
    "/api/file-operations",
    "/api/file-operations/bulk",
    "/api/file-operations/events",
    "/api/source-browse",
    "/api/database/source-files",
    "/api/database/source-scans",
    "/api/dashboard/events",
    "/api/database/stats",
    "/api/database/search",
    "/api/database/export",
    "/api/stats",
    "/api/jobs",
    "/api/python-bridge/terminate",
    "/api/v3/system/status",
    "/api/system/status",
    "/api/v3/health",
    "/api/v3/rootfolder",
    "/api/v3/qualityprofile",
    "/api/v3/language",
    "/api/v3/languageprofile",
    "/api/v3/tag",
    "/api/v3/movie",
    "/api/v3/moviefile",
    "/api/v3/series",
    "/api/v3/episode",
    "/api/v3/episodefile",
    "/api/v3/images/movies/MediaCover",
    "/api/v3/images/series/MediaCover",
    "/api/spoofing/config",
    "/api/spoofing/switch",
    "/api/spoofing/regenerate-key",
    "/images/movies/MediaCover",
    "/images/series/MediaCover",
    "/MediaCover",
)

STATIC_PREFIX = "/static/"


class PublicPathClassifier:
    """Decide whether a request path needs no authentication.

    No normalization is done: ``/api/health/../me`` is public because it
    starts with ``/api/health/``. Routing must not canonicalize behind it.
    """

    def __init__(self, prefixes: Iterable[str] = PUBLIC_PATHS, static_prefix: str = STATIC_PREFIX):
        self._prefixes = tuple(prefixes)
        self._static_prefix = static_prefix

    @property
    def prefixes(self) -> tuple[str, ...]:
        return self._prefixes

    def is_public(self, path: str) -> bool:
        if self._static_prefix and path.startswith(self._static_prefix):
            return True
        for prefix in self._prefixes:
            if path == prefix or path.startswith(prefix + "/"):
                return True
        return False


_default = PublicPathClassifier()


def is_public(path: str) -> bool:
    """Classify *path* against the built-in public list."""
    return _default.is_public(path)
