"""Tests for config system."""

import json
from pathlib import Path

import pytest

from webdavhub.config import Config, ConfigMeta, get_default_config_dir


class TestConfigDefaults:
    def test_default_credentials(self):
        config = Config(Path("/tmp/webdavhub-test-nonexistent"))
        assert config.username == "admin"
        assert config.password == "admin"

    def test_auth_enabled_by_default(self):
        config = Config(Path("/tmp/webdavhub-test-nonexistent"))
        assert config.is_auth_enabled() is True

    def test_unknown_attribute(self):
        config = Config(Path("/tmp/webdavhub-test-nonexistent"))
        with pytest.raises(AttributeError):
            config.nonexistent_key

    def test_default_config_dir_respects_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CINESYNC_CONFIG_DIR", str(tmp_path))
        assert get_default_config_dir() == tmp_path


class TestConfigLoad:
    def test_load_from_file(self, tmp_path: Path):
        (tmp_path / "config.json").write_text(
            json.dumps({"username": "alice", "auth_enabled": False})
        )
        config = Config.load(tmp_path)
        assert config.username == "alice"
        assert config.is_auth_enabled() is False

    def test_corrupted_file_uses_defaults(self, tmp_path: Path):
        (tmp_path / "config.json").write_text("{not json")
        config = Config.load(tmp_path)
        assert config.username == "admin"

    def test_load_picks_up_written_values(self, write_config):
        config_dir = write_config(username="bob")
        assert Config.load(config_dir).username == "bob"


class TestConfigEnvOverrides:
    def test_env_overrides_string(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CINESYNC_USERNAME", "carol")
        config = Config.load(tmp_path)
        assert config.username == "carol"

    def test_env_overrides_int(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CINESYNC_TOKEN_TTL_HOURS", "2")
        config = Config.load(tmp_path)
        assert config.token_ttl_hours == 2

    def test_legacy_jwt_secret(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("JWT_SECRET", "legacy")
        config = Config.load(tmp_path)
        assert config.jwt_secret_value == "legacy"

    def test_prefixed_jwt_secret_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("JWT_SECRET", "legacy")
        monkeypatch.setenv("CINESYNC_JWT_SECRET", "current")
        config = Config.load(tmp_path)
        assert config.jwt_secret_value == "current"


class TestAuthEnabledToggle:
    def test_read_fresh_each_call(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        config = Config.load(tmp_path)
        assert config.is_auth_enabled() is True

        monkeypatch.setenv("CINESYNC_AUTH_ENABLED", "false")
        assert config.is_auth_enabled() is False

        monkeypatch.setenv("CINESYNC_AUTH_ENABLED", "1")
        assert config.is_auth_enabled() is True

    def test_zero_disables(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CINESYNC_AUTH_ENABLED", "0")
        assert Config.load(tmp_path).is_auth_enabled() is False

    def test_empty_env_falls_back_to_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        (tmp_path / "config.json").write_text(json.dumps({"auth_enabled": False}))
        config = Config.load(tmp_path)
        monkeypatch.setenv("CINESYNC_AUTH_ENABLED", "")
        assert config.is_auth_enabled() is False

    def test_file_edit_toggles_without_reload(self, write_config):
        config = Config.load(write_config(auth_enabled=True))
        assert config.is_auth_enabled() is True

        write_config(auth_enabled=False)
        assert config.is_auth_enabled() is False

        write_config(auth_enabled=True)
        assert config.is_auth_enabled() is True

    def test_env_wins_over_file_edit(self, write_config, monkeypatch: pytest.MonkeyPatch):
        config = Config.load(write_config(auth_enabled=True))
        monkeypatch.setenv("CINESYNC_AUTH_ENABLED", "true")
        write_config(auth_enabled=False)
        assert config.is_auth_enabled() is True

    def test_corrupted_edit_keeps_last_value(self, write_config):
        config_dir = write_config(auth_enabled=False)
        config = Config.load(config_dir)
        assert config.is_auth_enabled() is False

        (config_dir / "config.json").write_text('{"auth_enabled": tr')
        assert config.is_auth_enabled() is False

    def test_deleted_key_reverts_to_default(self, write_config):
        config_dir = write_config(auth_enabled=False)
        config = Config.load(config_dir)
        assert config.is_auth_enabled() is False

        (config_dir / "config.json").write_text("{}")
        assert config.is_auth_enabled() is True

    @pytest.mark.parametrize("value", ["on", "enabled", "True ", " yes", "TRUE", "2", "garbage"])
    def test_unrecognised_env_value_keeps_auth_on(self, tmp_path: Path, monkeypatch, value):
        monkeypatch.setenv("CINESYNC_AUTH_ENABLED", value)
        assert Config.load(tmp_path).is_auth_enabled() is True

    @pytest.mark.parametrize("value", ["false", "FALSE", " 0 ", "no", "off", "Off"])
    def test_explicit_false_values_disable(self, tmp_path: Path, monkeypatch, value):
        monkeypatch.setenv("CINESYNC_AUTH_ENABLED", value)
        assert Config.load(tmp_path).is_auth_enabled() is False

    @pytest.mark.parametrize("value", ["on", "enabled", "yes "])
    def test_unrecognised_file_string_keeps_auth_on(self, write_config, value):
        assert Config.load(write_config(auth_enabled=value)).is_auth_enabled() is True

    def test_file_string_false_disables(self, write_config):
        assert Config.load(write_config(auth_enabled="off")).is_auth_enabled() is False


class TestSettingsListing:
    def test_secrets_masked(self, write_config):
        config = Config.load(write_config(jwt_secret="s3cret"))
        rows = {key: value for key, _, value in config.get_settings()}
        assert rows["password"] == "********"
        assert rows["jwt_secret"] == "********"
        assert rows["username"] == "admin"

    def test_every_key_described(self):
        described = set(ConfigMeta.TOGGLES) | set(ConfigMeta.SETTINGS)
        assert described == set(Config.DEFAULTS)
