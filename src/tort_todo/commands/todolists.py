"""
CLI commands for managing named todolists and their git history.

Usage:
    tort-todo todolist init work
    tort-todo todolist list
    tort-todo todolist set-active work
    tort-todo todolist delete groceries
    tort-todo todolist nuke --yes
    tort-todo git log --oneline
"""

from __future__ import annotations

import typer

from ..settings import get_settings
from ..todolists import TodolistDirectory
from .common import cli_errors, console

app = typer.Typer(help="Create, switch and remove todolists")


def _directory() -> TodolistDirectory:
    return TodolistDirectory.from_settings(get_settings())


@app.command("list")
def list_cmd():
    """List todolists, marking the active one."""
    with cli_errors():
        entries = _directory().list_names()
    if not entries:
        console.print("no todos yet!")
        return
    for entry in entries:
        console.print(f"{entry.name} (active)" if entry.active else entry.name, markup=False)


@app.command("init")
def init_cmd(name: str = typer.Argument(..., help="Name of the new todolist")):
    """Create an empty todolist; the first one created becomes active."""
    with cli_errors():
        path = _directory().init(name)
    console.print(f"Created todolist {name} at {path}", markup=False, soft_wrap=True)


@app.command("set-active")
def set_active_cmd(name: str = typer.Argument(..., help="Todolist to make active")):
    """Make a todolist the target of todo commands."""
    with cli_errors():
        _directory().set_active(name)
    console.print(f"{name} is now the active todolist.")


@app.command("delete")
def delete_cmd(name: str = typer.Argument(..., help="Todolist to delete")):
    """Delete a todolist."""
    with cli_errors():
        _directory().delete(name)
    console.print(f"Deleted todolist {name}.")


@app.command("nuke")
def nuke_cmd(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip the confirmation prompt",
    ),
):
    """Remove every todolist and the history repository."""
    directory = _directory()
    if not yes:
        typer.confirm(f"Really delete {directory.root} and everything in it?", abort=True)
    with cli_errors():
        root = directory.nuke()
    console.print(f"{root} has been nuked. Kaboom.")


def git_cmd(ctx: typer.Context):
    """Run git inside the todolist directory, e.g. 'git commit -am \"done\"'."""
    with cli_errors():
        output = _directory().run_git(list(ctx.args))
    typer.echo(output, nl=False)


def register(parent: typer.Typer):
    """Register todolist commands with the parent CLI app."""
    parent.add_typer(app, name="todolist", rich_help_panel="Todolists")
    parent.command(
        "git",
        rich_help_panel="Todolists",
        context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    )(git_cmd)
