"""
Pytest configuration and shared fixtures.

Provides fixtures for isolated configuration, temporary bundles and real
shell hook scripts used across the test suite.
"""

import json
import os
import stat
from pathlib import Path

import pytest

from shimhooks.core.config import clear_cache
from shimhooks.core.hooks.models import HookDescriptor

# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """
    Provide a completely isolated config environment.

    Removes SHIMHOOKS_* env vars, points XDG_CONFIG_HOME at a temporary
    location and runs each test from an empty working directory so no
    user or project config is picked up.
    """
    for key in list(os.environ.keys()):
        if key.startswith("SHIMHOOKS_"):
            monkeypatch.delenv(key, raising=False)

    config_home = tmp_path / "config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))

    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    clear_cache()
    yield config_home
    clear_cache()


# ==============================================================================
# Hook Fixtures
# ==============================================================================


def create_hook_script(hook_dir: Path, name: str, content: str, executable: bool = True) -> Path:
    """
    Create a shell hook script.

    Args:
        hook_dir: Directory to write the script into
        name: Script filename
        content: Script body (sh code, without shebang)
        executable: Whether to mark script as executable

    Returns:
        Path to created script
    """
    script_path = hook_dir / name
    script_path.write_text(f"#!/bin/sh\n{content}\n")

    if executable:
        script_path.chmod(script_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    return script_path


@pytest.fixture
def hook_dir(tmp_path):
    """Provide a directory for hook scripts."""
    path = tmp_path / "hooks"
    path.mkdir()
    return path


@pytest.fixture
def make_hook(hook_dir):
    """
    Factory for hook descriptors backed by real scripts.

    Example:
        def test_something(make_hook):
            hook = make_hook("fail.sh", "exit 1", timeout=5)
    """

    def factory(
        name: str,
        content: str,
        *,
        args: list[str] | None = None,
        env: list[str] | None = None,
        timeout: int | None = None,
    ) -> HookDescriptor:
        script = create_hook_script(hook_dir, name, content)
        return HookDescriptor(
            path=str(script),
            args=[name, *(args or [])],
            env=env,
            timeout=timeout,
        )

    return factory


@pytest.fixture
def bundle_dir(tmp_path):
    """Provide a temporary container bundle directory."""
    bundle = tmp_path / "bundle"
    bundle.mkdir()
    return bundle


def write_runtime_spec(bundle: Path, hooks: dict | None) -> Path:
    """Write an OCI-style config.json holding the given hooks section."""
    document: dict = {
        "ociVersion": "1.0.2",
        "process": {"args": ["/bin/sh"], "cwd": "/"},
        "root": {"path": "rootfs"},
    }
    if hooks is not None:
        document["hooks"] = hooks
    spec_path = bundle / "config.json"
    spec_path.write_text(json.dumps(document, indent=2))
    return spec_path


@pytest.fixture
def write_spec(bundle_dir):
    """Factory writing a runtime spec with the given hooks into the bundle."""

    def factory(hooks: dict | None) -> Path:
        return write_runtime_spec(bundle_dir, hooks)

    return factory
