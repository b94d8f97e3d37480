"""
CLI commands that read or change the todos of the active list.

Usage:
    tort-todo list --group project --notes
    tort-todo add Buy milk +grocery @errand --due tom
    tort-todo edit 3 Buy oat milk +grocery --due Sat
    tort-todo status 3 waiting
    tort-todo complete 3
    tort-todo note add 3 the one with the blue cap
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

import typer

from ..dates import parse_date
from ..repositories import get_repository
from ..views import GroupOption, print_todos
from .common import active_store, cli_errors, console

note_app = typer.Typer(help="Manage the notes attached to a todo")


def list_cmd(
    group: Optional[GroupOption] = typer.Option(
        None,
        "--group",
        "-g",
        help="Group todos by project, context or status",
    ),
    notes: bool = typer.Option(
        False,
        "--notes",
        "-n",
        help="Show notes under each todo",
    ),
):
    """List the todos of the active list."""
    today = date.today()
    with cli_errors():
        store = get_repository().load()
        if not print_todos(console, store, group, today, show_notes=notes):
            console.print("Nothing to do.")


def add_cmd(
    subject: List[str] = typer.Argument(..., help="Subject words; +project and @context become tags"),
    due: Optional[str] = typer.Option(
        None,
        "--due",
        "-d",
        help="Due date: today, tom, Sat, Nov28 or yyyy-mm-dd",
    ),
    recur: Optional[str] = typer.Option(None, "--recur", "-r", help="Recurrence rule (stored only)"),
):
    """Add a todo."""
    today = date.today()
    with cli_errors():
        due_date = parse_date(due, today)
        with active_store() as store:
            todo_id = store.add(" ".join(subject), due_date, recur)
        console.print(f"Todo {todo_id} added.")


def edit_cmd(
    todo_id: int = typer.Argument(..., help="Id of the todo"),
    subject: List[str] = typer.Argument(..., help="New subject words"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="New due date; omitted keeps the current one"),
    recur: Optional[str] = typer.Option(None, "--recur", "-r", help="New recurrence rule"),
):
    """Replace the subject (and optionally due date / recurrence) of a todo."""
    today = date.today()
    with cli_errors():
        due_date = parse_date(due, today)
        with active_store() as store:
            store.edit(todo_id, " ".join(subject), due_date, recur)
        console.print(f"Todo {todo_id} edited.")


def delete_cmd(todo_id: int = typer.Argument(..., help="Id of the todo")):
    """Delete a todo."""
    with cli_errors(), active_store() as store:
        store.delete(todo_id)
    console.print(f"Todo {todo_id} deleted.")


def status_cmd(
    todo_id: int = typer.Argument(..., help="Id of the todo"),
    text: Optional[List[str]] = typer.Argument(None, help="Status label; omit to clear"),
):
    """Set or clear the status label of a todo."""
    label = " ".join(text or [])
    with cli_errors(), active_store() as store:
        store.set_status(todo_id, label)
    console.print(f"Todo {todo_id} status {'set' if label else 'cleared'}.")


def _flag_command(action, verb: str):
    def command(todo_id: int = typer.Argument(..., help="Id of the todo")):
        with cli_errors(), active_store() as store:
            action(store, todo_id)
        console.print(f"Todo {todo_id} {verb}.")

    command.__doc__ = f"Mark a todo as {verb}."
    return command


complete_cmd = _flag_command(lambda s, i: s.complete(i, True), "completed")
uncomplete_cmd = _flag_command(lambda s, i: s.complete(i, False), "not completed")
prioritize_cmd = _flag_command(lambda s, i: s.prioritize(i, True), "prioritized")
unprioritize_cmd = _flag_command(lambda s, i: s.prioritize(i, False), "not prioritized")
archive_cmd = _flag_command(lambda s, i: s.archive(i, True), "archived")
unarchive_cmd = _flag_command(lambda s, i: s.archive(i, False), "unarchived")


@note_app.command("add")
def note_add_cmd(
    todo_id: int = typer.Argument(..., help="Id of the todo"),
    text: List[str] = typer.Argument(..., help="Note text"),
):
    """Attach a note to a todo."""
    with cli_errors(), active_store() as store:
        index = store.add_note(todo_id, " ".join(text))
    console.print(f"Note {index} added to todo {todo_id}.")


@note_app.command("edit")
def note_edit_cmd(
    todo_id: int = typer.Argument(..., help="Id of the todo"),
    index: int = typer.Argument(..., help="Index of the note, as shown by 'list --notes'"),
    text: List[str] = typer.Argument(..., help="Replacement text"),
):
    """Replace the text of a note."""
    with cli_errors(), active_store() as store:
        store.edit_note(todo_id, index, " ".join(text))
    console.print(f"Note {index} of todo {todo_id} edited.")


@note_app.command("delete")
def note_delete_cmd(
    todo_id: int = typer.Argument(..., help="Id of the todo"),
    index: int = typer.Argument(..., help="Index of the note"),
):
    """Remove a note."""
    with cli_errors(), active_store() as store:
        store.delete_note(todo_id, index)
    console.print(f"Note {index} of todo {todo_id} deleted.")


def register(parent: typer.Typer):
    """Register todo commands with the parent CLI app."""
    parent.command("list", rich_help_panel="Todos")(list_cmd)
    parent.command("add", rich_help_panel="Todos")(add_cmd)
    parent.command("edit", rich_help_panel="Todos")(edit_cmd)
    parent.command("delete", rich_help_panel="Todos")(delete_cmd)
    parent.command("status", rich_help_panel="Todos")(status_cmd)
    parent.command("complete", rich_help_panel="Todos")(complete_cmd)
    parent.command("uncomplete", rich_help_panel="Todos")(uncomplete_cmd)
    parent.command("prioritize", rich_help_panel="Todos")(prioritize_cmd)
    parent.command("unprioritize", rich_help_panel="Todos")(unprioritize_cmd)
    parent.command("archive", rich_help_panel="Todos")(archive_cmd)
    parent.command("unarchive", rich_help_panel="Todos")(unarchive_cmd)
    parent.add_typer(note_app, name="note", rich_help_panel="Todos")
