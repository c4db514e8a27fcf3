"""
Hook invoker for a single lifecycle hook.

Runs one hook executable to completion or timeout. The lifecycle state is
written to the hook's stdin as JSON; stdout and stderr are captured into
separate buffers and only surface when the hook fails.

Timeout handling:
- No timeout: the caller blocks until the process exits, however long
- With timeout: a waiter thread collects the process while the caller waits
  on a completion event. If the timer wins, the process gets SIGKILL and a
  HookTimeoutError is raised. A hook that has already exited when the timer
  fires is never signalled, so its pid cannot be confused with a reused one.
  The waiter thread finishes by itself once the process is gone.

Usage:
    from shimhooks.core.hooks.invoker import run_hook
    from shimhooks.core.hooks.models import HookDescriptor, LifecycleState

    hook = HookDescriptor(path="/usr/bin/setup-net", args=["setup-net"], timeout=5)
    state = LifecycleState.current("c1", "/run/bundles/c1")
    run_hook(hook, state)  # raises a HookError subclass on failure
"""

import logging
import signal
import subprocess
import threading

from shimhooks.core.hooks.errors import (
    HookFailedError,
    HookKillError,
    HookSpawnError,
    HookTimeoutError,
    StateEncodingError,
)
from shimhooks.core.hooks.models import HookDescriptor, LifecycleState

logger = logging.getLogger(__name__)

# Seconds to wait for output of a hook that exited just as its timeout expired
EXIT_DRAIN_GRACE = 1.0


class HookExecution:
    """
    One spawned hook process and the output collected from it.

    Lives only for the duration of a run_hook() call.

    Attributes:
        process: Handle of the spawned hook
        stdout: Bytes captured from standard output
        stderr: Bytes captured from standard error
        returncode: Exit code once the process has been reaped
        wait_error: Error raised while waiting, if any
        done: Set once wait() has finished, whatever the outcome
    """

    def __init__(self, process: subprocess.Popen[bytes], payload: bytes) -> None:
        self.process = process
        self.stdout = b""
        self.stderr = b""
        self.returncode: int | None = None
        self.wait_error: Exception | None = None
        self.done = threading.Event()
        self._payload = payload

    @property
    def pid(self) -> int:
        return self.process.pid

    def wait(self) -> None:
        """Feed the payload, drain both pipes and reap the process."""
        try:
            self.stdout, self.stderr = self.process.communicate(self._payload)
            self.returncode = self.process.returncode
        except Exception as e:
            self.wait_error = e
        finally:
            self.done.set()

    def check(self, hook: HookDescriptor) -> None:
        """
        Turn the collected outcome into success or HookFailedError.

        Raises:
            HookFailedError: If the wait failed, no exit status was collected,
                or the exit code is non-zero
        """
        stdout = self.stdout.decode(errors="replace")
        stderr = self.stderr.decode(errors="replace")

        if self.wait_error is not None:
            raise HookFailedError(
                str(self.wait_error), hook, stdout=stdout, stderr=stderr
            ) from self.wait_error

        # Falls back to the handle when the waiter reaped but has not finished
        returncode = self.returncode if self.returncode is not None else self.process.returncode
        if returncode is None:
            raise HookFailedError("no exit status collected", hook, stdout=stdout, stderr=stderr)

        if returncode:
            raise HookFailedError(
                _describe_exit(returncode),
                hook,
                exit_code=returncode,
                stdout=stdout,
                stderr=stderr,
            )


def _describe_exit(returncode: int) -> str:
    if returncode < 0:
        try:
            return f"signal: {signal.Signals(-returncode).name}"
        except ValueError:
            return f"signal: {-returncode}"
    return f"exit status {returncode}"


def _spawn(hook: HookDescriptor) -> subprocess.Popen[bytes]:
    try:
        return subprocess.Popen(
            hook.argv(),
            executable=hook.path,
            env=hook.environ(),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except (OSError, ValueError) as e:
        raise HookSpawnError(f"Failed to start hook {hook.path}: {e}", hook) from e


def run_hook(hook: HookDescriptor, state: LifecycleState) -> None:
    """
    Run a hook once and wait for it, honouring its timeout.

    Args:
        hook: Hook to execute
        state: Lifecycle state written to the hook's stdin

    Raises:
        StateEncodingError: If the state cannot be serialized
        HookSpawnError: If the process cannot be started
        HookFailedError: If the hook exits non-zero or the wait fails
        HookTimeoutError: If the timeout elapsed and the hook was killed
        HookKillError: If the timeout elapsed and the kill could not be sent
    """
    try:
        payload = state.to_json().encode()
    except (ValueError, TypeError) as e:
        raise StateEncodingError(f"Failed to encode lifecycle state: {e}", hook) from e

    process = _spawn(hook)
    execution = HookExecution(process, payload)
    logger.debug(f"Started hook {hook.path} (pid {execution.pid})")

    if hook.timeout is None:
        execution.wait()
        execution.check(hook)
        return

    waiter = threading.Thread(
        target=execution.wait,
        name=f"hook-wait-{execution.pid}",
        daemon=True,
    )
    waiter.start()

    if execution.done.wait(hook.timeout):
        execution.check(hook)
        return

    process = execution.process
    if execution.done.is_set() or process.poll() is not None:
        # Exited as the timer fired; the pid may already be reaped.
        execution.done.wait(EXIT_DRAIN_GRACE)
        execution.check(hook)
        return

    try:
        process.send_signal(signal.SIGKILL)
    except OSError as e:
        raise HookKillError(
            f"Failed to kill hook {hook.path} (pid {execution.pid}): {e}", hook
        ) from e

    logger.debug(f"Killed hook {hook.path} (pid {execution.pid}) after {hook.timeout}s")
    raise HookTimeoutError(hook.timeout, hook)
