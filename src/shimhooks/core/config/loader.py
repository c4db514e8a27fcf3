"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import LOG_LEVELS, ShimHooksConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config on every phase
_config_cache: ShimHooksConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/shimhooks/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "shimhooks" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .shimhooks.json in that directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".shimhooks.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"hooks": {"enabled": True}}, {"logging": {"level": "DEBUG"}})
        {'hooks': {'enabled': True}, 'logging': {'level': 'DEBUG'}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def _env_flag(value: str) -> bool:
    return value.lower() not in ("false", "0", "")


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        SHIMHOOKS_HOOKS_ENABLED - overrides hooks.enabled
        SHIMHOOKS_LOG_LEVEL - overrides logging.level

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    enabled_str = os.environ.get("SHIMHOOKS_HOOKS_ENABLED")
    if enabled_str is not None:
        result["hooks"] = {**result.get("hooks", {}), "enabled": _env_flag(enabled_str)}

    if level_str := os.environ.get("SHIMHOOKS_LOG_LEVEL"):
        if level_str.upper() in LOG_LEVELS:
            result["logging"] = {**result.get("logging", {}), "level": level_str.upper()}
        else:
            logger.warning(f"Invalid SHIMHOOKS_LOG_LEVEL value '{level_str}', ignoring")

    return result


def get_default_config() -> dict[str, Any]:
    """Get hardcoded default configuration."""
    return {
        "hooks": {"enabled": True},
        "logging": {"level": "WARNING"},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> ShimHooksConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (SHIMHOOKS_*)
        2. Project config (.shimhooks.json)
        3. User config (~/.config/shimhooks/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Directory to load .shimhooks.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated ShimHooksConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = ShimHooksConfig(**merged)
    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
