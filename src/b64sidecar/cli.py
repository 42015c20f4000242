#!/usr/bin/env python
"""
b64sidecar CLI - one-shot JSON over stdio base64 sidecar.

Run without a subcommand, the process reads one JSON request from stdin and
writes one JSON response line to stdout. The subcommands are conveniences for
developers poking at the sidecar by hand.
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .modules.actions import Action
from .modules.config_manager import ConfigManager
from .modules.data_types import SidecarRequest
from .modules.handler import emit_response, exit_code_for, respond, run
from .modules.logging_config import configure_logging

app = typer.Typer(add_completion=False)
console = Console()


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"b64sidecar version {__version__}")
        raise typer.Exit()


def _stdin():
    # Read raw bytes where possible so undecodable input does not crash the read
    return getattr(sys.stdin, "buffer", sys.stdin)


@app.callback(invoke_without_command=True)
def sidecar(
    ctx: typer.Context,
    _version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Config file (YAML or JSON)"
    ),
    strict_exit_code: Optional[bool] = typer.Option(
        None,
        "--strict-exit-code/--no-strict-exit-code",
        help="Exit with code 1 when the response reports a failure",
    ),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Append logs to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
):
    """Read one JSON request from stdin and write one JSON response to stdout."""
    manager = ConfigManager(config_path=config_path)
    config = manager.apply_overrides(strict_exit_code=strict_exit_code, log_file=log_file)
    configure_logging(config, verbose=verbose)
    ctx.obj = manager

    if ctx.invoked_subcommand is None:
        code = run(_stdin(), sys.stdout, strict_exit_code=config.strict_exit_code)
        raise typer.Exit(code=code)


def _run_action(ctx: typer.Context, action: Action, data: str) -> None:
    manager: ConfigManager = ctx.obj
    response = respond(SidecarRequest(action=action.value, data=data))
    emit_response(response, sys.stdout)
    raise typer.Exit(code=exit_code_for(response, manager.config.strict_exit_code))


@app.command()
def encode(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Text to encode"),
):
    """Base64-encode TEXT and print the response JSON."""
    _run_action(ctx, Action.BASE64_ENCODE, text)


@app.command()
def decode(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Base64 text to decode"),
):
    """Decode base64 TEXT and print the response JSON."""
    _run_action(ctx, Action.BASE64_DECODE, text)


@app.command("actions")
def list_actions():
    """List the supported actions."""
    table = Table(title="Supported actions")
    table.add_column("Action", style="cyan")
    table.add_column("Description")
    for action in Action:
        table.add_row(action.value, action.description)
    console.print(table)


@app.command("config")
def show_config(ctx: typer.Context):
    """Show the effective configuration and where it came from."""
    manager: ConfigManager = ctx.obj
    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in manager.config.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)
    console.print(f"Sources: {', '.join(manager.get_config_sources())}")


def main():
    """Main entry point for the CLI."""
    app(prog_name="b64sidecar")


if __name__ == "__main__":
    main()
