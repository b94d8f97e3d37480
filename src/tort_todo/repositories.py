from __future__ import annotations

import logging
import os
import stat
import tempfile
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from .dates import CalendarDate
from .errors import DocumentError, IdNotFound, NoteNotFound
from .models import COMPLETED_STATUS, Todo
from .schemas import dump_document, load_document
from .settings import Settings, get_settings
from .todolists import TodolistDirectory
from .utils import lowest_free_id, split_tags

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TodoStore:
    """
    In-memory, ordered collection of todos for one list.

    Every id-based operation raises IdNotFound for an unknown id and leaves
    the collection untouched. Ids are never renumbered; freed ids are handed
    out again by add().
    """

    def __init__(self, todos: Optional[List[Todo]] = None) -> None:
        self._todos: List[Todo] = list(todos or [])

    def __len__(self) -> int:
        return len(self._todos)

    def __iter__(self) -> Iterator[Todo]:
        return iter(self._todos)

    @property
    def todos(self) -> List[Todo]:
        return self._todos

    def _now(self) -> datetime:
        return datetime.now().astimezone()

    def _allocate_id(self) -> int:
        return lowest_free_id(t.id for t in self._todos)

    def add(self, subject: str, due: Optional[CalendarDate] = None, recur: Optional[str] = None) -> int:
        """
        Create a todo and return its id.

        Tags are captured from the subject now and are not refreshed by later edits.
        """
        projects, contexts = split_tags(subject)
        todo = Todo(
            id=self._allocate_id(),
            uuid=str(uuid.uuid4()),
            subject=subject,
            projects=projects,
            contexts=contexts,
            due=due or CalendarDate.unset(),
            recur=recur or "",
        )
        self._todos.append(todo)
        logger.info("Added todo %d (%s)", todo.id, todo.uuid)
        return todo.id

    def find(self, todo_id: int) -> int:
        """Return the position of the first todo with this id."""
        for i, todo in enumerate(self._todos):
            if todo.id == todo_id:
                return i
        logger.debug("Lookup of id %d failed", todo_id)
        raise IdNotFound(todo_id)

    def find_mut(self, todo_id: int) -> Todo:
        return self._todos[self.find(todo_id)]

    def edit(
        self,
        todo_id: int,
        subject: str,
        due: Optional[CalendarDate] = None,
        recur: Optional[str] = None,
    ) -> None:
        """
        Replace the subject, and the due date / recurrence when given.

        An unset due date means 'keep the current one'.
        """
        todo = self.find_mut(todo_id)
        if due is not None and due.is_set():
            todo.due = due
        if recur is not None:
            todo.recur = recur
        todo.subject = subject
        logger.info("Edited todo %d", todo_id)

    def delete(self, todo_id: int) -> None:
        i = self.find(todo_id)
        removed = self._todos.pop(i)
        logger.info("Deleted todo %d (%s)", removed.id, removed.uuid)

    def set_status(self, todo_id: int, status: str) -> None:
        todo = self.find_mut(todo_id)
        todo.status = status
        logger.info("Set status of todo %d to %r", todo_id, status)

    def complete(self, todo_id: int, done: bool = True) -> None:
        """
        Mark a todo completed (restamping completed_date each time) or reopen it.
        """
        todo = self.find_mut(todo_id)
        if done:
            todo.status = COMPLETED_STATUS
            todo.completed = True
            todo.completed_date = self._now()
        else:
            todo.status = ""
            todo.completed = False
            todo.completed_date = None
        logger.info("Todo %d completed=%s", todo_id, done)

    def prioritize(self, todo_id: int, flag: bool = True) -> None:
        self.find_mut(todo_id).is_priority = flag
        logger.info("Todo %d is_priority=%s", todo_id, flag)

    def archive(self, todo_id: int, flag: bool = True) -> None:
        self.find_mut(todo_id).archived = flag
        logger.info("Todo %d archived=%s", todo_id, flag)

    def add_note(self, todo_id: int, text: str) -> int:
        """Append a note and return its index."""
        todo = self.find_mut(todo_id)
        if todo.notes is None:
            todo.notes = [text]
        else:
            todo.notes.append(text)
        logger.info("Added note %d to todo %d", len(todo.notes) - 1, todo_id)
        return len(todo.notes) - 1

    def _note_list(self, todo_id: int, index: int) -> List[str]:
        notes = self.find_mut(todo_id).notes
        if notes is None or not 0 <= index < len(notes):
            raise NoteNotFound(todo_id, index)
        return notes

    def edit_note(self, todo_id: int, index: int, text: str) -> None:
        notes = self._note_list(todo_id, index)
        notes[index] = text
        logger.info("Edited note %d of todo %d", index, todo_id)

    def delete_note(self, todo_id: int, index: int) -> None:
        notes = self._note_list(todo_id, index)
        del notes[index]
        if not notes:
            self.find_mut(todo_id).notes = None
        logger.info("Deleted note %d of todo %d", index, todo_id)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract contract for where a todolist document is kept."""

    @abstractmethod
    def load(self) -> TodoStore:
        """Read the document and return it as a TodoStore."""

    @abstractmethod
    def save(self, store: TodoStore) -> None:
        """Persist the store, replacing the previous document."""


class JsonFileRepository(Repository):
    """
    A todolist kept as a UTF-8 JSON file.

    save() serializes the full document before touching the destination and
    swaps it in with os.replace, so a failed save leaves the old file intact.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> TodoStore:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise DocumentError(self._path, e.strerror or str(e)) from e
        todos = load_document(raw, self._path)
        logger.debug("Loaded %d todos from %s", len(todos), self._path)
        return TodoStore(todos)

    def save(self, store: TodoStore) -> None:
        payload = dump_document(store.todos)
        # Write through the symlink to the list it points at.
        target = self._path.resolve()
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=str(target.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            # mkstemp creates 0600; keep the mode of the file being replaced.
            if target.exists():
                os.chmod(tmp_name, stat.S_IMODE(target.stat().st_mode))
            os.replace(tmp_name, target)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise DocumentError(self._path, e.strerror or str(e)) from e
        logger.debug("Saved %d todos to %s", len(store), target)


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> Repository:
    """
    Factory returning the repository for the active todolist.

    Raises:
        NoConfigurationDirectory / NoActiveTodolist: when there is no active list to open.
    """
    settings = settings or get_settings()
    directory = TodolistDirectory.from_settings(settings)
    return JsonFileRepository(directory.resolve_active())
