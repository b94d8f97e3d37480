from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..errors import TodoError
from ..repositories import TodoStore, get_repository

logger = logging.getLogger(__name__)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_cli_error(message: str, hint: Optional[str] = None) -> None:
    """Print a one-line error, plus an optional dim hint, to stderr."""
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    if hint:
        err_console.print(f"[dim]{escape(hint)}[/dim]", soft_wrap=True)


@contextmanager
def cli_errors() -> Iterator[None]:
    """
    Turn TodoError into a diagnostic and exit code 1 at the command boundary.
    """
    try:
        yield
    except TodoError as e:
        logger.debug("Command failed", exc_info=True)
        print_cli_error(str(e))
        raise typer.Exit(1)


@contextmanager
def active_store() -> Iterator[TodoStore]:
    """
    Load the active list, hand it to the command, and save it afterwards.

    Nothing is written if the body raises.
    """
    repo = get_repository()
    store = repo.load()
    yield store
    repo.save(store)
