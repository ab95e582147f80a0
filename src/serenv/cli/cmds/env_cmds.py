"""
CLI commands for saving and restoring the environment.

Usage:
    serenv save                  # Capture the environment to .serenv.dat
    eval "$(serenv emit-sh)"     # Restore it in a POSIX shell
    serenv emit-cmd > restore.bat
    serenv emit --shell fish | source
    serenv diff                  # Show what restoring would change
    serenv diff --json
"""

from __future__ import annotations

import io
import json
from pathlib import Path

import typer

from serenv.cli.output import display, print_changes, print_cli_error, print_cli_success
from serenv.env.emitters import SUPPORTED_DIALECTS, get_emitter
from serenv.env.persistence import load_snapshot, save_snapshot
from serenv.env.reconcile import Assign, CollectingSink, reconcile
from serenv.env.snapshot import capture_environment
from serenv.errors import SerenvError
from serenv.logging import get_logger
from serenv.settings import SerenvSettings

logger = get_logger("cli")

PATH_OPTION_HELP = "Snapshot file (default: $SERENV_SNAPSHOT_PATH or .serenv.dat)"


def _settings(ctx: typer.Context) -> SerenvSettings:
    if isinstance(ctx.obj, SerenvSettings):
        return ctx.obj
    return SerenvSettings.from_env()


def _resolve_path(ctx: typer.Context, path: Path | None) -> Path:
    return path if path is not None else _settings(ctx).snapshot_path


def _fail(error: SerenvError) -> typer.Exit:
    logger.debug("Command failed", error=type(error).__name__, **error.details)
    print_cli_error(error.message, hint=error.hint)
    return typer.Exit(1)


def save_cmd(
    ctx: typer.Context,
    path: Path | None = typer.Option(None, "--path", "-p", help=PATH_OPTION_HELP),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Don't print a confirmation"),
):
    """Save the current environment."""
    try:
        snapshot = capture_environment()
        written = save_snapshot(snapshot, _resolve_path(ctx, path))
    except SerenvError as e:
        raise _fail(e)

    if not quiet:
        print_cli_success(f"Saved {len(snapshot)} variables to {written}")


def run_emit(ctx: typer.Context, dialect: str, path: Path | None) -> None:
    """Load the snapshot and write restore statements for ``dialect`` to stdout.

    The script is rendered in full before anything is printed, so a variable
    the dialect cannot represent leaves stdout empty.
    """
    script = io.StringIO()
    try:
        emitter = get_emitter(dialect, script)
        saved = load_snapshot(_resolve_path(ctx, path))
        stats = reconcile(saved, capture_environment(), emitter)
    except SerenvError as e:
        raise _fail(e)

    typer.echo(script.getvalue(), nl=False)
    logger.info("Emitted restore statements", dialect=dialect, **stats.to_dict())


def _make_emit_cmd(dialect: str):
    def emit_cmd(
        ctx: typer.Context,
        path: Path | None = typer.Option(None, "--path", "-p", help=PATH_OPTION_HELP),
    ):
        run_emit(ctx, dialect, path)

    emit_cmd.__doc__ = f'Emit "{dialect}"-format commands to restore a saved environment.'
    emit_cmd.__name__ = f"emit_{dialect}_cmd"
    return emit_cmd


def emit_cmd(
    ctx: typer.Context,
    shell: str = typer.Option(
        "sh",
        "--shell",
        "-s",
        help=f"Shell dialect: {', '.join(SUPPORTED_DIALECTS)}",
    ),
    path: Path | None = typer.Option(None, "--path", "-p", help=PATH_OPTION_HELP),
):
    """Emit commands in the given shell dialect to restore a saved environment."""
    run_emit(ctx, shell, path)


def diff_cmd(
    ctx: typer.Context,
    path: Path | None = typer.Option(None, "--path", "-p", help=PATH_OPTION_HELP),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show what restoring the saved environment would change."""
    try:
        saved = load_snapshot(_resolve_path(ctx, path))
    except SerenvError as e:
        raise _fail(e)

    sink = CollectingSink()
    stats = reconcile(saved, capture_environment(), sink)

    if output_json:
        payload = {
            "changes": [
                {"action": "assign", "name": display(c.name), "value": display(c.value)}
                if isinstance(c, Assign)
                else {"action": "unset", "name": display(c.name)}
                for c in sink.changes
            ],
            "stats": stats.to_dict(),
        }
        typer.echo(json.dumps(payload, indent=2))
    else:
        print_changes(sink.changes, stats)


def register(parent: typer.Typer):
    """Register environment commands with the parent CLI app."""
    parent.command("save")(save_cmd)
    parent.command("emit")(emit_cmd)
    for dialect in SUPPORTED_DIALECTS:
        parent.command(f"emit-{dialect}")(_make_emit_cmd(dialect))
    parent.command("diff")(diff_cmd)
