from __future__ import annotations

import logging

import typer

from . import __version__
from .commands import register_todolists, register_todos
from .settings import get_settings

app = typer.Typer(
    name="tort-todo",
    help="Personal todo lists with +project and @context tags, kept under git.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tort-todo {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output to stderr",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
):
    """Configure logging before any command runs."""
    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(levelname)s %(name)s: %(message)s",
    )


register_todos(app)
register_todolists(app)


if __name__ == "__main__":
    app()
