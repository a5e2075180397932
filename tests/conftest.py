"""Pytest fixtures for webdavhub tests."""

import itertools
import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def clear_caches(monkeypatch: pytest.MonkeyPatch):
    """Clear the config cache and stray CINESYNC_* env vars around each test."""
    from webdavhub.config import clear_config_cache

    for key in list(os.environ):
        if key.startswith("CINESYNC_") or key == "JWT_SECRET":
            monkeypatch.delenv(key)

    clear_config_cache()
    yield
    clear_config_cache()


class FakeClock:
    """Settable UTC clock for expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def write_config(tmp_path: Path):
    """Merge values into tmp_path/config/config.json, as an operator would."""
    config_dir = tmp_path / "config"
    bumps = itertools.count(1)

    def write(**values) -> Path:
        path = config_dir / "config.json"
        data = json.loads(path.read_text()) if path.exists() else {}
        data.update(values)
        config_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2))
        # Distinct mtime even on filesystems with coarse timestamps
        st = path.stat()
        os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + next(bumps) * 10_000_000))
        return config_dir

    return write
