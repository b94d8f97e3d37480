from __future__ import annotations

from pathlib import Path
from typing import Optional


# PUBLIC_INTERFACE
class TodoError(Exception):
    """
    Base class for every error surfaced to the command boundary.

    The string form is the one-line diagnostic shown to the user.
    """


class IdNotFound(TodoError):
    def __init__(self, todo_id: int) -> None:
        self.todo_id = todo_id
        super().__init__(f"No todo with id {todo_id}")


class NoteNotFound(TodoError):
    def __init__(self, todo_id: int, index: int) -> None:
        self.todo_id = todo_id
        self.index = index
        super().__init__(f"Todo {todo_id} has no note at index {index}")


class NoConfigurationDirectory(TodoError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Configuration directory {path} does not exist; create a list with 'todolist init <name>'"
        )


class NoActiveTodolist(TodoError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"No active todolist in {path}; pick one with 'todolist set-active <name>'")


class TodolistNotFound(TodoError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No todolist named '{name}'")


class TodolistAlreadyExists(TodoError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"A todolist named '{name}' already exists")


class InvalidTodolistName(TodoError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid todolist name '{name}'; names cannot contain path separators")


class DateParseError(TodoError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Could not understand date '{value}'")


class DocumentError(TodoError):
    """Raised when a stored list cannot be read, validated or written."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"{path}: {detail}")


class GitError(TodoError):
    def __init__(self, detail: str, returncode: Optional[int] = None) -> None:
        self.detail = detail
        self.returncode = returncode
        super().__init__(detail)
