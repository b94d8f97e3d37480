"""
Grouping and terminal rendering of todos for the 'list' command.
"""
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .dates import CalendarDate, Ordering, compare
from .models import Todo
from .utils import CONTEXT_SIGIL, PROJECT_SIGIL

FULL_GROUP_LABEL = "All"
NO_PROJECT_LABEL = "No projects"
NO_CONTEXT_LABEL = "No contexts"
NO_STATUS_LABEL = "No status"

PROJECT_STYLE = "magenta"
CONTEXT_STYLE = "green"
OVERDUE_STYLE = "red"
PRIORITY_STYLE = "bold"


class GroupOption(str, Enum):
    project = "project"
    context = "context"
    status = "status"


def _fan_out(todos: Iterable[Todo], tags_of, empty_label: str) -> Dict[str, List[Todo]]:
    groups: Dict[str, List[Todo]] = {}
    for todo in todos:
        for label in tags_of(todo) or [empty_label]:
            groups.setdefault(label, []).append(todo)
    return groups


# PUBLIC_INTERFACE
def group_todos(todos: Iterable[Todo], mode: Optional[GroupOption] = None) -> Dict[str, List[Todo]]:
    """
    Partition todos into labelled groups.

    - None: one 'All' group
    - project / context: a todo joins one group per tag, or the sentinel group when it has none
    - status: one group per distinct status, 'No status' for the empty one

    Archived todos are kept here; render_group() drops them. Order within a
    group follows the input; order between groups carries no meaning.
    """
    if mode is None:
        return {FULL_GROUP_LABEL: list(todos)}
    if mode is GroupOption.project:
        return _fan_out(todos, lambda t: t.projects, NO_PROJECT_LABEL)
    if mode is GroupOption.context:
        return _fan_out(todos, lambda t: t.contexts, NO_CONTEXT_LABEL)
    return _fan_out(todos, lambda t: [t.status] if t.status else [], NO_STATUS_LABEL)


def style_subject(subject: str) -> Text:
    """Highlight +project and @context words; other words stay plain."""
    text = Text()
    for i, word in enumerate(subject.split()):
        if i:
            text.append(" ")
        if word.startswith(PROJECT_SIGIL):
            text.append(word, style=PROJECT_STYLE)
        elif word.startswith(CONTEXT_SIGIL):
            text.append(word, style=CONTEXT_STYLE)
        else:
            text.append(word)
    return text


def style_due(due: CalendarDate, today: CalendarDate) -> Text:
    # Due today or earlier; unset never qualifies.
    if compare(today, due) is not Ordering.LESS:
        return Text(due.display(), style=OVERDUE_STYLE)
    return Text(due.display())


def _checkbox(done: bool) -> str:
    return "[x]" if done else "[ ]"


# PUBLIC_INTERFACE
def render_group(todos: Iterable[Todo], today: date, show_notes: bool = False) -> Optional[Table]:
    """
    Build the table for one group, or None when every todo in it is archived.

    Columns: id, completion box, due, status, subject. Priority rows are bold.
    With show_notes, each note is an extra row under its todo, carrying
    '<index>: <text>' in the subject column.
    """
    ref = CalendarDate(today)
    table = Table(box=None, show_header=False, pad_edge=False)
    table.add_column("id", style="yellow", justify="right")
    table.add_column("done", style="blue")
    table.add_column("due")
    table.add_column("status", style="red")
    table.add_column("subject")

    rows = 0
    for todo in todos:
        if todo.archived:
            continue
        table.add_row(
            str(todo.id),
            Text(_checkbox(todo.completed)),
            style_due(todo.due, ref),
            Text(todo.status),
            style_subject(todo.subject),
            style=PRIORITY_STYLE if todo.is_priority else None,
        )
        rows += 1
        if show_notes and todo.notes:
            for index, note in enumerate(todo.notes):
                table.add_row("", "", "", "", Text(f"  {index}: {note}", style="dim"))
    return table if rows else None


# PUBLIC_INTERFACE
def print_todos(
    console: Console,
    todos: Iterable[Todo],
    mode: Optional[GroupOption],
    today: date,
    show_notes: bool = False,
) -> int:
    """
    Print every group that has visible todos as '<title>:' followed by its table.

    Returns the number of groups printed.
    """
    printed = 0
    for title, members in group_todos(todos, mode).items():
        table = render_group(members, today, show_notes)
        if table is None:
            continue
        console.print(Text(f"{title}:", style="bold"))
        console.print(table)
        printed += 1
    return printed
