"""
Phase runner for lifecycle hooks.

Runs the hook list of one phase strictly in order, one hook at a time.
The first failing hook ends the phase: later hooks are never started, the
failure is handed to a reporter, and the original error is returned in the
PhaseResult.

Reporting goes through an injectable callable so the runner stays usable
without a configured log sink. The default reporter writes to the module
logger.

Usage:
    from shimhooks.core.hooks.runner import HookRunner

    runner = HookRunner()
    result = runner.run(HookPhase.PRE_START, hooks, "c1", "/run/bundles/c1")
    if result.failed:
        print(f"Hook {result.failed_index} failed: {result.error}")
"""

import logging
import time
from collections.abc import Callable, Sequence

from shimhooks.core.hooks.errors import HookError
from shimhooks.core.hooks.invoker import run_hook
from shimhooks.core.hooks.models import (
    HookDescriptor,
    HookFailureRecord,
    HookPhase,
    LifecycleState,
    PhaseResult,
)

logger = logging.getLogger(__name__)

FailureReporter = Callable[[HookFailureRecord], None]


def log_hook_failure(record: HookFailureRecord) -> None:
    """Default reporter: log the failure as a single structured error."""
    logger.error(
        f"hook error: hook-type={record.phase.value} hook={record.hook_path} "
        f"error={record.error}",
        extra={"hook_type": record.phase.value, "error": record.error},
    )


class HookRunner:
    """
    Sequential runner for the hooks of a lifecycle phase.

    Attributes:
        reporter: Called with a HookFailureRecord when a phase fails
    """

    def __init__(self, reporter: FailureReporter | None = None):
        self.reporter = reporter or log_hook_failure

    def run(
        self,
        phase: HookPhase,
        hooks: Sequence[HookDescriptor] | None,
        container_id: str,
        bundle_path: str,
    ) -> PhaseResult:
        """
        Run every hook of a phase in list order.

        Args:
            phase: Phase the hooks belong to (used for reporting)
            hooks: Hooks to run; None or empty means nothing to do
            container_id: Container identifier passed in the state payload
            bundle_path: Bundle directory passed in the state payload

        Returns:
            PhaseResult; on failure it holds the first hook error unchanged
        """
        result = PhaseResult(phase=phase)
        if not hooks:
            logger.debug(f"No {phase.value} hooks configured")
            return result

        start_time = time.monotonic()
        for index, hook in enumerate(hooks):
            logger.debug(f"Running {phase.value} hook {index}: {hook.path}")
            try:
                run_hook(hook, LifecycleState.current(container_id, bundle_path))
            except HookError as e:
                result.hooks_run = index + 1
                result.failed_index = index
                result.error = e
                result.duration_seconds = time.monotonic() - start_time

                record = result.failure_record()
                if record is not None:
                    self.reporter(record)
                return result

        result.hooks_run = len(hooks)
        result.duration_seconds = time.monotonic() - start_time
        logger.info(
            f"Ran {result.hooks_run} {phase.value} hook(s) in {result.duration_seconds:.2f}s"
        )
        return result
