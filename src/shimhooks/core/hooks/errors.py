"""
Exceptions raised while running a single hook.

Every error is local to one hook invocation. The phase runner stops on the
first one and hands it back unchanged, so callers can match on the concrete
class to tell a timeout from a crash.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shimhooks.core.hooks.models import HookDescriptor


class HookError(Exception):
    """
    Base class for hook invocation failures.

    Attributes:
        hook: Descriptor of the hook that failed (None if unknown)
        message: Human-readable error message
    """

    def __init__(self, message: str, hook: "HookDescriptor | None" = None) -> None:
        self.hook = hook
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class StateEncodingError(HookError):
    """The lifecycle state could not be serialized; nothing was spawned."""


class HookSpawnError(HookError):
    """The OS refused to start the hook process (bad path, permissions)."""


class HookFailedError(HookError):
    """
    The hook ran but exited non-zero, or waiting on it failed.

    The message carries the complete captured stdout and stderr, each as its
    own block, for diagnostics.

    Attributes:
        exit_code: Process exit code (negative signal number if killed,
            None if the wait itself failed)
        stdout: Captured standard output
        stderr: Captured standard error
    """

    def __init__(
        self,
        cause: str,
        hook: "HookDescriptor | None" = None,
        *,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"{cause}: stdout: {stdout}, stderr: {stderr}", hook)


class HookTimeoutError(HookError):
    """
    The hook outlived its timeout and a SIGKILL was sent.

    Delivery of the signal does not confirm the process is gone.
    """

    def __init__(self, timeout: int, hook: "HookDescriptor | None" = None) -> None:
        self.timeout = timeout
        super().__init__(f"Hook timeout after {timeout}s", hook)


class HookKillError(HookError):
    """The SIGKILL sent after a timeout could not be delivered."""


__all__ = [
    "HookError",
    "HookFailedError",
    "HookKillError",
    "HookSpawnError",
    "HookTimeoutError",
    "StateEncodingError",
]
