"""Configuration loaded from config.json with CINESYNC_* env overrides."""

import json
import os
from pathlib import Path
from typing import Any

ENV_PREFIX = "CINESYNC_"

FALSE_VALUES = frozenset({"false", "0", "no", "off"})

# Module-level cache for singleton pattern
_config_cache: "Config | None" = None


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing or config reload."""
    global _config_cache
    _config_cache = None


def get_default_config_dir() -> Path:
    """Get default config directory, respecting CINESYNC_CONFIG_DIR env var."""
    config_dir = os.environ.get(f"{ENV_PREFIX}CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return Path.home() / ".config" / "webdavhub"


class ConfigMeta:
    """Schema definition - separate from runtime state."""

    TOGGLES: dict[str, str] = {
        "auth_enabled": "Require authentication for the API and WebDAV",
    }

    SETTINGS: dict[str, str] = {
        "username": "Login username",
        "password": "Login password",
        "jwt_secret": "Token signing secret (empty = random per process)",
        "token_ttl_hours": "Token lifetime in hours",
        "host": "Bind address",
        "port": "Bind port",
        "cors_origins": "Comma-separated CORS origins",
        "static_dir": "Dashboard build directory served under /static",
        "log_level": "Log level (debug|info|warning|error)",
    }

    # Never printed in clear
    SECRETS: frozenset[str] = frozenset({"password", "jwt_secret"})


class Config:
    """Runtime configuration with env override support."""

    DEFAULTS: dict[str, Any] = {
        # Toggles
        "auth_enabled": True,
        # Credentials
        "username": "admin",
        "password": "admin",
        "jwt_secret": "",
        "token_ttl_hours": 24,
        # Server
        "host": "127.0.0.1",
        "port": 8082,
        "cors_origins": "*",
        "static_dir": "",
        "log_level": "info",
    }

    def __init__(self, config_dir: Path | None = None):
        self._config_dir = config_dir or get_default_config_dir()
        self._config_file = self._config_dir / "config.json"
        self._data: dict[str, Any] = {}
        self._toggle_cache: tuple[tuple[int, int], Any] | None = None

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @classmethod
    def load(cls, config_dir: Path | None = None) -> "Config":
        """Factory method - explicit loading with caching."""
        global _config_cache

        if _config_cache is not None and config_dir is None:
            return _config_cache

        config = cls(config_dir)
        config._load_from_file()
        config._apply_env_overrides()

        if config_dir is None:
            _config_cache = config

        return config

    def __getattr__(self, name: str) -> Any:
        """Access config values as attributes."""
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._data:
            return self._data[name]
        if name in self.DEFAULTS:
            return self.DEFAULTS[name]
        raise AttributeError(f"Config has no attribute '{name}'")

    def is_auth_enabled(self) -> bool:
        """Read the auth toggle fresh from the environment, then config.json.

        Unlike the other keys this is not frozen at load time: the file is
        re-read whenever its mtime changes, so an operator can flip
        ``auth_enabled`` without restarting the server.
        """
        raw = os.environ.get(f"{ENV_PREFIX}AUTH_ENABLED")
        if raw and raw.strip():
            return self._coerce(raw, bool)
        return self._coerce_toggle(self._file_toggle())

    def _file_toggle(self) -> Any:
        """Current ``auth_enabled`` value on disk, cached per (mtime, size)."""
        try:
            st = self._config_file.stat()
        except OSError:
            return self._data.get("auth_enabled", self.DEFAULTS["auth_enabled"])

        cached = self._toggle_cache
        stamp = (st.st_mtime_ns, st.st_size)
        if cached is not None and cached[0] == stamp:
            return cached[1]

        try:
            data = json.loads(self._config_file.read_text() or "{}")
        except (OSError, json.JSONDecodeError):
            # Half-written or corrupted file: keep the last good value
            data = None
        if isinstance(data, dict):
            value = data.get("auth_enabled", self.DEFAULTS["auth_enabled"])
        elif cached is not None:
            value = cached[1]
        else:
            value = self._data.get("auth_enabled", self.DEFAULTS["auth_enabled"])

        # Single tuple assignment, safe under concurrent readers
        self._toggle_cache = (stamp, value)
        return value

    @classmethod
    def _coerce_toggle(cls, value: Any) -> bool:
        if isinstance(value, str):
            return cls._coerce(value, bool)
        if value is None:
            return True
        return bool(value)

    @property
    def jwt_secret_value(self) -> str:
        """Signing secret, falling back to the legacy JWT_SECRET variable."""
        return self._data.get("jwt_secret") or os.environ.get("JWT_SECRET", "")

    def get_settings(self) -> list[tuple[str, str, Any]]:
        """Return (key, description, value) with secrets masked."""
        rows = []
        for name, desc in {**ConfigMeta.TOGGLES, **ConfigMeta.SETTINGS}.items():
            value = getattr(self, name)
            if name in ConfigMeta.SECRETS:
                value = "********" if value else "(unset)"
            rows.append((name, desc, value))
        return rows

    def _load_from_file(self) -> None:
        if self._config_file.exists():
            try:
                content = self._config_file.read_text()
                if content.strip():
                    self._data = json.loads(content)
            except json.JSONDecodeError:
                # Corrupted config - use defaults
                self._data = {}

    def _apply_env_overrides(self) -> None:
        """Apply CINESYNC_* env vars (highest priority)."""
        for key, default in self.DEFAULTS.items():
            env_key = f"{ENV_PREFIX}{key.upper()}"
            if env_key in os.environ:
                self._data[key] = self._coerce(os.environ[env_key], type(default))

    @staticmethod
    def _coerce(value: str, target_type: type) -> Any:
        """Coerce string env value to target type."""
        if target_type is bool:
            # Fails closed: only an explicit false value disables
            return value.strip().lower() not in FALSE_VALUES
        if target_type is int:
            return int(value)
        return value
