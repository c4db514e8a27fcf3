"""
Unit tests for configuration loader.

Tests multi-layer config merging, environment variable overrides,
caching, XDG directory handling and layered .env loading.
"""

import json
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from shimhooks.core.config import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_user_env_path,
    load_config,
    load_layered_env,
)
from shimhooks.core.config.loader import (
    apply_env_overrides,
    deep_merge,
    get_default_config,
    get_xdg_config_home,
    load_json_file,
)
from shimhooks.core.config.models import LoggingConfig, ShimHooksConfig

# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    """Test the deep_merge helper function."""

    def test_simple_merge(self):
        """Test merging two simple dicts."""
        assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self):
        """Test merging nested dicts."""
        base = {"hooks": {"enabled": True}, "logging": {"level": "INFO", "format": "%(message)s"}}
        override = {"logging": {"level": "DEBUG"}}
        result = deep_merge(base, override)
        assert result == {
            "hooks": {"enabled": True},
            "logging": {"level": "DEBUG", "format": "%(message)s"},
        }

    def test_base_not_mutated(self):
        """Test that the base dict is left unchanged."""
        base = {"hooks": {"enabled": True}}
        deep_merge(base, {"hooks": {"enabled": False}})
        assert base == {"hooks": {"enabled": True}}


class TestLoadJsonFile:
    """Test the load_json_file helper function."""

    def test_load_existing_file(self, tmp_path):
        """Test loading a valid JSON file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"hooks": {"enabled": False}}))
        assert load_json_file(path) == {"hooks": {"enabled": False}}

    def test_load_nonexistent_file(self, tmp_path):
        """Test loading a file that doesn't exist."""
        assert load_json_file(tmp_path / "missing.json") is None

    def test_load_invalid_json(self, tmp_path, caplog):
        """Test that invalid JSON is logged and skipped."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with caplog.at_level(logging.WARNING, logger="shimhooks.core.config.loader"):
            assert load_json_file(path) is None

        assert "Failed to parse config" in caplog.text

    def test_load_non_object(self, tmp_path):
        """Test that a JSON document that isn't an object is ignored."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert load_json_file(path) is None


class TestApplyEnvOverrides:
    """Test environment variable overrides."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("true", True), ("1", True), ("yes", True), ("false", False), ("0", False), ("", False)],
    )
    def test_hooks_enabled(self, monkeypatch, value, expected):
        """Test SHIMHOOKS_HOOKS_ENABLED parsing."""
        monkeypatch.setenv("SHIMHOOKS_HOOKS_ENABLED", value)
        result = apply_env_overrides(get_default_config())
        assert result["hooks"]["enabled"] is expected

    def test_log_level(self, monkeypatch):
        """Test SHIMHOOKS_LOG_LEVEL override is upper-cased."""
        monkeypatch.setenv("SHIMHOOKS_LOG_LEVEL", "debug")
        result = apply_env_overrides(get_default_config())
        assert result["logging"]["level"] == "DEBUG"

    def test_invalid_log_level_ignored(self, monkeypatch, caplog):
        """Test that an unknown level name is ignored with a warning."""
        monkeypatch.setenv("SHIMHOOKS_LOG_LEVEL", "chatty")

        with caplog.at_level(logging.WARNING, logger="shimhooks.core.config.loader"):
            result = apply_env_overrides(get_default_config())

        assert result["logging"]["level"] == "WARNING"
        assert "Invalid SHIMHOOKS_LOG_LEVEL" in caplog.text

    def test_no_env_overrides(self):
        """Test that config is unchanged without env vars."""
        assert apply_env_overrides(get_default_config()) == get_default_config()


class TestXdgDirectories:
    """Test XDG and project path helpers."""

    def test_get_xdg_config_home_default(self, monkeypatch):
        """Test fallback to ~/.config."""
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_xdg_config_home() == Path.home() / ".config"

    def test_get_user_config_path(self, isolated_config):
        """Test user config path under XDG_CONFIG_HOME."""
        assert get_user_config_path() == isolated_config / "shimhooks" / "config.json"

    def test_get_project_config_path_custom(self, tmp_path):
        """Test project config path in a given directory."""
        assert get_project_config_path(tmp_path) == tmp_path / ".shimhooks.json"


# ==============================================================================
# load_config Tests
# ==============================================================================


def write_user_config(config_home: Path, data: dict) -> None:
    user_dir = config_home / "shimhooks"
    user_dir.mkdir(parents=True, exist_ok=True)
    (user_dir / "config.json").write_text(json.dumps(data))


class TestLoadConfig:
    """Test the full load_config precedence chain."""

    def test_defaults_only(self):
        """Test loading with no config files."""
        config = load_config()
        assert isinstance(config, ShimHooksConfig)
        assert config.hooks.enabled is True
        assert config.logging.level == "WARNING"

    def test_user_overrides_defaults(self, isolated_config):
        """Test that user config overrides defaults."""
        write_user_config(isolated_config, {"logging": {"level": "INFO"}})
        assert load_config().logging.level == "INFO"

    def test_project_overrides_user(self, isolated_config, tmp_path):
        """Test that project config overrides user config."""
        write_user_config(isolated_config, {"hooks": {"enabled": False}})
        project = tmp_path / "project"
        project.mkdir()
        (project / ".shimhooks.json").write_text(json.dumps({"hooks": {"enabled": True}}))

        assert load_config(project).hooks.enabled is True

    def test_env_overrides_all(self, isolated_config, monkeypatch):
        """Test that env vars override every file layer."""
        write_user_config(isolated_config, {"hooks": {"enabled": True}})
        (Path.cwd() / ".shimhooks.json").write_text(json.dumps({"hooks": {"enabled": True}}))
        monkeypatch.setenv("SHIMHOOKS_HOOKS_ENABLED", "false")

        assert load_config().hooks.enabled is False

    def test_caching(self, isolated_config):
        """Test that the loaded config is cached."""
        first = load_config()
        write_user_config(isolated_config, {"logging": {"level": "DEBUG"}})
        assert load_config() is first

    def test_clear_cache(self, isolated_config):
        """Test that clear_cache forces a reload."""
        load_config()
        write_user_config(isolated_config, {"logging": {"level": "DEBUG"}})
        clear_cache()
        assert load_config().logging.level == "DEBUG"

    def test_validation_error(self, isolated_config):
        """Test that an invalid merged config raises ValidationError."""
        write_user_config(isolated_config, {"logging": {"level": "LOUD"}})
        with pytest.raises(ValidationError):
            load_config()


class TestLoggingConfig:
    """Test the logging config model."""

    def test_level_normalized(self):
        """Test that level names are upper-cased."""
        assert LoggingConfig(level="info").level == "INFO"

    def test_level_number(self):
        """Test conversion to a numeric logging level."""
        assert LoggingConfig(level="DEBUG").level_number == logging.DEBUG


# ==============================================================================
# Layered .env Tests
# ==============================================================================


class TestLoadLayeredEnv:
    """Test .env layering."""

    def test_project_env_loaded(self, tmp_path):
        """Test that a project .env sets missing variables."""
        (tmp_path / ".env").write_text("SHIMHOOKS_LOG_LEVEL=INFO\n")

        with patch.dict(os.environ):
            load_layered_env(project_dir=tmp_path, user_env_paths=[])
            assert os.environ["SHIMHOOKS_LOG_LEVEL"] == "INFO"

    def test_os_env_wins(self, tmp_path, monkeypatch):
        """Test that .env files never override the OS environment."""
        monkeypatch.setenv("SHIMHOOKS_LOG_LEVEL", "ERROR")
        (tmp_path / ".env").write_text("SHIMHOOKS_LOG_LEVEL=INFO\n")

        load_layered_env(project_dir=tmp_path, user_env_paths=[])

        assert os.environ["SHIMHOOKS_LOG_LEVEL"] == "ERROR"

    def test_project_overrides_user(self, tmp_path):
        """Test that project .env overrides values set from the user .env."""
        user_env = tmp_path / "user.env"
        user_env.write_text("SHIMHOOKS_HOOKS_ENABLED=true\n")
        (tmp_path / ".env").write_text("SHIMHOOKS_HOOKS_ENABLED=false\n")

        with patch.dict(os.environ):
            load_layered_env(project_dir=tmp_path, user_env_paths=[user_env])
            assert os.environ["SHIMHOOKS_HOOKS_ENABLED"] == "false"

    def test_only_prefixed_keys_applied(self, tmp_path):
        """Test that keys for other tools are left out of the environment."""
        (tmp_path / ".env").write_text(
            "SHIMHOOKS_LOG_LEVEL=DEBUG\nSHIMHOOKS_TEST_UNRELATED_TOKEN=x\nUNRELATED_TOKEN=secret\n"
        )

        with patch.dict(os.environ):
            os.environ.pop("UNRELATED_TOKEN", None)
            applied = load_layered_env(project_dir=tmp_path, user_env_paths=[])

            assert "UNRELATED_TOKEN" not in os.environ
            assert applied == {
                "SHIMHOOKS_LOG_LEVEL": "DEBUG",
                "SHIMHOOKS_TEST_UNRELATED_TOKEN": "x",
            }

    def test_user_env_from_xdg_config_home(self, isolated_config, tmp_path):
        """Test that the default user .env sits beside the user config file."""
        assert get_user_env_path() == get_user_config_path().parent / ".env"

        get_user_env_path().parent.mkdir(parents=True, exist_ok=True)
        get_user_env_path().write_text("SHIMHOOKS_HOOKS_ENABLED=false\n")
        project = tmp_path / "empty-project"
        project.mkdir()

        with patch.dict(os.environ):
            load_layered_env(project_dir=project)
            assert os.environ["SHIMHOOKS_HOOKS_ENABLED"] == "false"

    def test_preset_keys_not_reported(self, tmp_path, monkeypatch):
        """Test that variables kept from the OS environment are not reported as applied."""
        monkeypatch.setenv("SHIMHOOKS_LOG_LEVEL", "ERROR")
        (tmp_path / ".env").write_text("SHIMHOOKS_LOG_LEVEL=INFO\n")

        assert load_layered_env(project_dir=tmp_path, user_env_paths=[]) == {}
