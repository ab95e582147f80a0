"""Rich output helpers for the serenv CLI.

Status messages go to stderr so that stdout carries nothing but the shell
statements produced by the ``emit-*`` commands.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from serenv.env.reconcile import Assign, EnvironmentChange, ReconcileStats

console = Console()
err_console = Console(stderr=True)

# Longest value shown in the diff table before truncation
MAX_VALUE_WIDTH = 60


def display(raw: bytes) -> str:
    """Decode a name or value for display, replacing undecodable bytes."""
    return raw.decode("utf-8", errors="replace")


def _truncate(text: str, width: int = MAX_VALUE_WIDTH) -> str:
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def print_cli_error(message: str, hint: str | None = None) -> None:
    """Print an error with an optional hint."""
    # Text objects, not markup: paths and values may contain "[".
    err_console.print(Text.assemble(("✗ ", "red"), (message, "bold")), soft_wrap=True)
    if hint:
        err_console.print(Text(f"  {hint}", style="dim"), soft_wrap=True)


def print_cli_success(message: str) -> None:
    err_console.print(Text.assemble(("✓ ", "green"), message), soft_wrap=True)


def print_changes(changes: list[EnvironmentChange], stats: ReconcileStats) -> None:
    """Print pending changes as a table followed by a summary line."""
    if not changes:
        console.print(Text(stats.summary(), style="dim"))
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("", width=1)
    table.add_column("Variable", style="bold")
    table.add_column("Saved value", overflow="fold")

    for change in changes:
        if isinstance(change, Assign):
            value = _truncate(display(change.value)) or '""'
            table.add_row(Text("~", style="yellow"), display(change.name), value)
        else:
            table.add_row(Text("-", style="red"), display(change.name), Text("(unset)", style="dim"))

    console.print(table)
    console.print()
    console.print(Text(stats.summary(), style="dim"))
