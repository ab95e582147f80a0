from __future__ import annotations

import typer
from rich.text import Text

from serenv import __version__
from serenv.cli.cmds import register_env
from serenv.cli.output import err_console, print_cli_error
from serenv.errors import ConfigurationError
from serenv.logging import configure_logging
from serenv.settings import SerenvSettings


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        err_console.print(Text(f"serenv v{__version__}", style="bold"))
        raise typer.Exit()


_TYPER_HELP = """Save and restore the shell environment.

**Quick start:**

* `serenv save` — Save the current environment to `.serenv.dat`
* `eval "$(serenv emit-sh)"` — Restore it in a POSIX shell
* `serenv diff` — Show what restoring would change
"""

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=_TYPER_HELP,
    rich_markup_mode="markdown",
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level for diagnostics on stderr (default: $SERENV_LOG_LEVEL or WARNING)",
    ),
    log_json: bool = typer.Option(
        False,
        "--log-json",
        help="Write diagnostics as JSON lines",
    ),
):
    """serenv — save and restore the shell environment."""
    try:
        settings = SerenvSettings.from_env().with_overrides(
            log_level=log_level,
            log_format="json" if log_json else None,
        )
    except ConfigurationError as e:
        print_cli_error(e.message, hint=e.hint)
        raise typer.Exit(1)

    configure_logging(level=settings.log_level, format=settings.log_format)
    ctx.obj = settings


register_env(app)


def main():
    app()


if __name__ == "__main__":
    main()
