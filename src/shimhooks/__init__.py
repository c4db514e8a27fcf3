"""
shimhooks - OCI lifecycle hook runner

Runs the pre-start, post-start and post-stop hooks of a container runtime
spec with per-hook timeouts and first-failure reporting.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from shimhooks.core.config.models import ShimHooksConfig
from shimhooks.core.hooks.models import HookDescriptor, HookPhase, LifecycleState, RuntimeSpec

__all__ = [
    "HookDescriptor",
    "HookPhase",
    "LifecycleState",
    "RuntimeSpec",
    "ShimHooksConfig",
    "__version__",
]
