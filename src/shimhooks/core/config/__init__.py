"""
Configuration models and loading.

This module provides Pydantic models for shimhooks configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .env import get_user_env_path, load_layered_env
from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import HooksConfig, LoggingConfig, ShimHooksConfig

__all__ = [
    # Models
    "HooksConfig",
    "LoggingConfig",
    "ShimHooksConfig",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_user_env_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_layered_env",
]
