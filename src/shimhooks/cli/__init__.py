"""
shimhooks CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer

from shimhooks.cli import hooks
from shimhooks.core.config import load_config, load_layered_env

app = typer.Typer(
    name="shimhooks",
    help="Run OCI lifecycle hooks for a container bundle",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)


def setup_logging(level: int, fmt: str) -> None:
    """
    Configure logging for all commands.

    Args:
        level: Root log level
        fmt: logging format string
    """
    logging.basicConfig(level=level, format=fmt, stream=sys.stderr, force=True)


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    shimhooks - OCI lifecycle hook runner.

    Runs the pre-start, post-start and post-stop hooks configured in a
    bundle's runtime spec, killing any hook that outlives its timeout.
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()

    config = load_config()
    level = logging.DEBUG if debug else config.logging.level_number
    setup_logging(level, config.logging.format)

    ctx.obj = {"debug": debug}


app.command(name="run")(hooks.run)
app.command(name="state")(hooks.state)
