"""
Hook data models for shimhooks.

Defines the hook descriptors read from a runtime spec, the lifecycle state
handed to every hook on stdin, and the results of running a phase.

Lifecycle phases:
- pre-start: After the container is created, before the user process starts
- post-start: After the user process has started
- post-stop: After the container has been torn down

The state payload is part of the contract with third-party hook executables.
Its field names (pid, bundle, id) must not change.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from shimhooks.core.hooks.errors import HookError


class HookPhase(str, Enum):
    """Lifecycle phase at which a hook list runs."""

    PRE_START = "pre-start"
    POST_START = "post-start"
    POST_STOP = "post-stop"

    @property
    def spec_field(self) -> str:
        """Name of the Hooks field holding this phase's hook list."""
        return self.value.replace("-", "")


class HookDescriptor(BaseModel):
    """
    A single hook executable as configured in the runtime spec.

    Descriptors arrive already validated; no checks beyond a non-empty path
    are made here. An unusable path surfaces later as a spawn failure.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    path: str = Field(min_length=1, description="Absolute path to the hook executable")
    args: list[str] = Field(
        default_factory=list,
        description="Argument vector, args[0] is conventionally the program name",
    )
    env: list[str] | None = Field(
        default=None,
        description="KEY=VALUE entries; None inherits the caller's environment",
    )
    timeout: int | None = Field(
        default=None,
        description="Seconds before the hook is killed; None waits forever",
    )

    def argv(self) -> list[str]:
        """Argument vector to exec, falling back to the path alone."""
        return list(self.args) if self.args else [self.path]

    def environ(self) -> dict[str, str] | None:
        """
        Environment mapping for the hook process.

        Returns:
            None to inherit the current environment, otherwise a dict built
            from the KEY=VALUE entries (entries without '=' are skipped)
        """
        if self.env is None:
            return None
        result: dict[str, str] = {}
        for entry in self.env:
            key, sep, value = entry.partition("=")
            if not sep or not key:
                continue
            result[key] = value
        return result


class Hooks(BaseModel):
    """Hook lists of a runtime spec, keyed by OCI field name."""

    model_config = ConfigDict(extra="ignore")

    prestart: list[HookDescriptor] | None = Field(default=None)
    poststart: list[HookDescriptor] | None = Field(default=None)
    poststop: list[HookDescriptor] | None = Field(default=None)

    def for_phase(self, phase: HookPhase) -> list[HookDescriptor]:
        """Return the hooks configured for a phase (empty if none)."""
        return list(getattr(self, phase.spec_field) or [])


class RuntimeSpec(BaseModel):
    """
    The slice of an OCI runtime spec (config.json) this package reads.

    Everything except the hooks section is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    hooks: Hooks | None = Field(default=None, description="Lifecycle hooks, if any")

    @classmethod
    def from_file(cls, path: Path) -> "RuntimeSpec":
        """Load and validate a runtime spec document."""
        return cls.model_validate_json(path.read_text())


class LifecycleState(BaseModel):
    """
    Container state written to each hook's standard input.

    Built fresh for every hook invocation so the pid always reflects the
    process actually running the hook.
    """

    pid: int = Field(description="Process id of the runtime issuing the hook")
    bundle: str = Field(description="Absolute path to the container bundle")
    id: str = Field(description="Container identifier")

    @classmethod
    def current(cls, container_id: str, bundle_path: str) -> "LifecycleState":
        """Build the state for the calling process."""
        return cls(pid=os.getpid(), bundle=bundle_path, id=container_id)

    def to_json(self) -> str:
        """Serialize to the wire payload."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, json_str: str) -> "LifecycleState":
        """Deserialize from the wire payload."""
        return cls.model_validate_json(json_str)


class HookFailureRecord(BaseModel):
    """Structured report emitted when a phase stops on a failing hook."""

    phase: HookPhase = Field(description="Phase that failed")
    hook_index: int = Field(description="Position of the failing hook in the list")
    hook_path: str = Field(description="Executable path of the failing hook")
    error_type: str = Field(description="Class name of the hook error")
    error: str = Field(description="Error detail including captured output")


@dataclass
class PhaseResult:
    """
    Outcome of running one phase.

    Either every hook succeeded, or `error` holds the first hook error
    exactly as the invoker raised it and `failed_index` points at the hook.
    """

    phase: HookPhase
    hooks_run: int = 0
    failed_index: int | None = None
    error: HookError | None = None
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return not self.success

    def failure_record(self) -> HookFailureRecord | None:
        """Build the structured failure record, or None on success."""
        if self.error is None or self.failed_index is None:
            return None
        hook = self.error.hook
        return HookFailureRecord(
            phase=self.phase,
            hook_index=self.failed_index,
            hook_path=hook.path if hook else "",
            error_type=type(self.error).__name__,
            error=str(self.error),
        )

    def raise_for_failure(self) -> None:
        """Re-raise the hook error if the phase failed."""
        if self.error is not None:
            raise self.error
