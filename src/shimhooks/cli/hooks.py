"""
Hook commands for running lifecycle phases by hand.

Provides `shimhooks run` to execute one phase of a bundle's runtime spec and
`shimhooks state` to print the state payload hooks would receive. Useful for
debugging hook executables outside a live container runtime.
"""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from shimhooks.core.config import load_config
from shimhooks.core.hooks.lifecycle import run_phase_hooks
from shimhooks.core.hooks.models import HookPhase, LifecycleState, RuntimeSpec

console = Console()
err_console = Console(stderr=True)


def run(
    phase: HookPhase = typer.Argument(
        ...,
        help="Lifecycle phase to run (pre-start, post-start, post-stop)",
    ),
    container_id: str = typer.Option(
        ...,
        "--id",
        "-i",
        help="Container identifier passed to the hooks",
    ),
    bundle: str = typer.Option(
        ".",
        "--bundle",
        "-b",
        help="Container bundle directory (default: current directory)",
    ),
    spec_file: str | None = typer.Option(
        None,
        "--spec",
        "-s",
        help="Runtime spec file (default: <bundle>/config.json)",
    ),
) -> None:
    """
    Run the hooks of one lifecycle phase.

    Hooks run in the order listed in the runtime spec. The first failing
    hook stops the phase and the command exits with status 1.

    Examples:
        shimhooks run pre-start --id c1 --bundle /run/bundles/c1
        shimhooks run post-stop --id c1 --spec ./config.json
    """
    bundle_path = Path(bundle).resolve()
    spec_path = Path(spec_file) if spec_file else bundle_path / "config.json"

    try:
        spec = RuntimeSpec.from_file(spec_path)
    except (OSError, ValidationError) as e:
        err_console.print(f"[red]Error: Cannot load runtime spec {spec_path}: {e}[/red]")
        raise typer.Exit(2)

    result = run_phase_hooks(
        phase,
        spec,
        container_id,
        str(bundle_path),
        config=load_config(),
    )

    if result.failed:
        record = result.failure_record()
        err_console.print(f"[red]✗ {phase.value} failed[/red]")
        if record is not None:
            err_console.print(f"  Hook {record.hook_index}: {record.hook_path}")
            err_console.print(f"  {record.error_type}: {record.error}", markup=False)
        raise typer.Exit(1)

    console.print(
        f"[green]✓[/green] {phase.value}: ran {result.hooks_run} hook(s) "
        f"in {result.duration_seconds:.2f}s"
    )


def state(
    container_id: str = typer.Option(
        ...,
        "--id",
        "-i",
        help="Container identifier",
    ),
    bundle: str = typer.Option(
        ".",
        "--bundle",
        "-b",
        help="Container bundle directory (default: current directory)",
    ),
) -> None:
    """
    Print the lifecycle state payload written to hook stdin.

    Examples:
        shimhooks state --id c1 --bundle /run/bundles/c1
    """
    payload = LifecycleState.current(container_id, str(Path(bundle).resolve()))
    console.print_json(payload.to_json())
