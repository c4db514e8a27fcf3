"""
Layered .env support for SHIMHOOKS_* overrides.

The SHIMHOOKS_* variables read by the config loader may also come from .env
files. Layers, highest precedence first:
- OS environment
- Project environment files (.env, .env.local in the working directory)
- User environment file ($XDG_CONFIG_HOME/shimhooks/.env)

Only SHIMHOOKS_* keys are applied; anything else in a .env file belongs to
some other tool and is left out of the process environment. A .env file
never overrides a variable already present in the process environment.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)

ENV_PREFIX = "SHIMHOOKS_"


def get_user_env_path() -> Path:
    """Get path to the user .env file next to the user config."""
    return get_xdg_config_home() / "shimhooks" / ".env"


def read_env_overrides(path: Path) -> dict[str, str]:
    """
    Read the SHIMHOOKS_* assignments from one .env file.

    Args:
        path: .env file to read

    Returns:
        Prefixed keys with a value; empty if the file doesn't exist
    """
    if not path.exists():
        return {}

    overrides: dict[str, str] = {}
    for key, value in dotenv_values(path).items():
        if value is None:
            continue
        if not key.startswith(ENV_PREFIX):
            logger.debug(f"Ignoring {key} from {path}")
            continue
        overrides[key] = value
    return overrides


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """
    Export SHIMHOOKS_* overrides from user and project .env files.

    Keys set from a user file may be replaced by a project file; keys present
    in the OS environment beforehand are never touched.

    Args:
        project_dir: Base directory for project env files (defaults to cwd)
        user_env_paths: Explicit user env files (defaults to the XDG one)
        project_env_paths: Explicit project env files

    Returns:
        The variables this call set, with their final values
    """
    if project_dir is None:
        project_dir = Path.cwd()
    if user_env_paths is None:
        user_env_paths = [get_user_env_path()]
    if project_env_paths is None:
        project_env_paths = [project_dir / ".env", project_dir / ".env.local"]

    preset = {key for key in os.environ if key.startswith(ENV_PREFIX)}
    applied: dict[str, str] = {}

    for path in [*user_env_paths, *project_env_paths]:
        for key, value in read_env_overrides(Path(path)).items():
            if key in preset:
                continue
            os.environ[key] = value
            applied[key] = value

    if applied:
        logger.debug(f"Loaded {', '.join(sorted(applied))} from .env files")
    return applied
