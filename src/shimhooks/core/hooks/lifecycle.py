"""
Lifecycle hook entry points for the container runtime.

Container orchestration calls one of these at each point in a container's
life:
- pre-start: After the container is created
- post-start: After the user process has started
- post-stop: After the container has been torn down

Each takes the runtime spec plus the container id and bundle path, and
returns a PhaseResult. A spec without a hooks section is always a no-op
success. Whether a failed phase aborts the container operation is left to
the caller.

Usage:
    from shimhooks.core.hooks.lifecycle import pre_start_hooks

    result = pre_start_hooks(spec, container_id, bundle_path)
    result.raise_for_failure()
"""

import logging

from shimhooks.core.config.models import ShimHooksConfig
from shimhooks.core.hooks.models import HookPhase, PhaseResult, RuntimeSpec
from shimhooks.core.hooks.runner import FailureReporter, HookRunner

logger = logging.getLogger(__name__)


def run_phase_hooks(
    phase: HookPhase,
    spec: RuntimeSpec,
    container_id: str,
    bundle_path: str,
    *,
    config: ShimHooksConfig | None = None,
    reporter: FailureReporter | None = None,
) -> PhaseResult:
    """
    Run the hooks a runtime spec configures for one phase.

    Args:
        phase: Lifecycle phase to run
        spec: Runtime spec holding the hooks section
        container_id: Container identifier
        bundle_path: Container bundle directory
        config: shimhooks configuration (hooks run when omitted)
        reporter: Failure reporter (logs via the runner's logger by default)

    Returns:
        PhaseResult for the phase
    """
    if spec.hooks is None:
        return PhaseResult(phase=phase)

    if config is not None and not config.hooks.enabled:
        logger.debug(f"Hooks are disabled, skipping {phase.value}")
        return PhaseResult(phase=phase)

    runner = HookRunner(reporter)
    return runner.run(phase, spec.hooks.for_phase(phase), container_id, bundle_path)


def pre_start_hooks(
    spec: RuntimeSpec,
    container_id: str,
    bundle_path: str,
    *,
    config: ShimHooksConfig | None = None,
    reporter: FailureReporter | None = None,
) -> PhaseResult:
    """Run pre-start hooks once the container has been created."""
    return run_phase_hooks(
        HookPhase.PRE_START,
        spec,
        container_id,
        bundle_path,
        config=config,
        reporter=reporter,
    )


def post_start_hooks(
    spec: RuntimeSpec,
    container_id: str,
    bundle_path: str,
    *,
    config: ShimHooksConfig | None = None,
    reporter: FailureReporter | None = None,
) -> PhaseResult:
    """Run post-start hooks after the user process has started."""
    return run_phase_hooks(
        HookPhase.POST_START,
        spec,
        container_id,
        bundle_path,
        config=config,
        reporter=reporter,
    )


def post_stop_hooks(
    spec: RuntimeSpec,
    container_id: str,
    bundle_path: str,
    *,
    config: ShimHooksConfig | None = None,
    reporter: FailureReporter | None = None,
) -> PhaseResult:
    """Run post-stop hooks after the container has been torn down."""
    return run_phase_hooks(
        HookPhase.POST_STOP,
        spec,
        container_id,
        bundle_path,
        config=config,
        reporter=reporter,
    )
