"""
Lifecycle hook execution for container runtimes.

Runs the OCI hooks configured in a runtime spec at three points of a
container's life: pre-start, post-start and post-stop. Each hook receives
the container state as JSON on stdin and signals success with exit code 0.

Key Functions:
    pre_start_hooks / post_start_hooks / post_stop_hooks: Run one phase
    run_hook: Run a single hook with timeout handling

Key Models:
    HookDescriptor: One configured hook executable
    RuntimeSpec: Runtime spec document holding the hooks section
    LifecycleState: State payload written to hook stdin
    PhaseResult: Outcome of a phase run

Usage:
    from shimhooks.core.hooks import RuntimeSpec, pre_start_hooks

    spec = RuntimeSpec.from_file(bundle / "config.json")
    result = pre_start_hooks(spec, "c1", str(bundle))
    if result.failed:
        print(f"pre-start failed: {result.error}")
"""

from shimhooks.core.hooks.errors import (
    HookError,
    HookFailedError,
    HookKillError,
    HookSpawnError,
    HookTimeoutError,
    StateEncodingError,
)
from shimhooks.core.hooks.invoker import run_hook
from shimhooks.core.hooks.lifecycle import (
    post_start_hooks,
    post_stop_hooks,
    pre_start_hooks,
    run_phase_hooks,
)
from shimhooks.core.hooks.models import (
    HookDescriptor,
    HookFailureRecord,
    HookPhase,
    Hooks,
    LifecycleState,
    PhaseResult,
    RuntimeSpec,
)
from shimhooks.core.hooks.runner import HookRunner, log_hook_failure

__all__ = [
    # Entry points
    "pre_start_hooks",
    "post_start_hooks",
    "post_stop_hooks",
    "run_phase_hooks",
    "run_hook",
    "HookRunner",
    "log_hook_failure",
    # Models
    "HookDescriptor",
    "HookFailureRecord",
    "HookPhase",
    "Hooks",
    "LifecycleState",
    "PhaseResult",
    "RuntimeSpec",
    # Errors
    "HookError",
    "HookFailedError",
    "HookKillError",
    "HookSpawnError",
    "HookTimeoutError",
    "StateEncodingError",
]
