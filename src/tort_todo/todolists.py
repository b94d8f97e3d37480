"""
Named todolists kept in a configuration directory.

Layout under <config_root>/tort_todo:
- todolists/<name>.json   one document per list
- active_todos.json       symlink to the active list
- active_todos.pointer    stand-in for the symlink where symlinks are unavailable
- .git/                   history of the directory
"""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import (
    GitError,
    InvalidTodolistName,
    NoActiveTodolist,
    NoConfigurationDirectory,
    TodolistAlreadyExists,
    TodolistNotFound,
)
from .settings import Settings

logger = logging.getLogger(__name__)

APP_DIR_NAME = "tort_todo"
LISTS_DIR_NAME = "todolists"
ACTIVE_LINK_NAME = "active_todos.json"
ACTIVE_POINTER_NAME = "active_todos.pointer"
LIST_SUFFIX = ".json"
EMPTY_DOCUMENT = "[]"


@dataclass(frozen=True)
class TodolistEntry:
    name: str
    active: bool


def _list_file_name(name: str) -> str:
    separators = {"/", os.sep, os.altsep} - {None}
    if not name or name in (".", "..") or any(sep in name for sep in separators):
        raise InvalidTodolistName(name)
    return f"{name}{LIST_SUFFIX}"


# PUBLIC_INTERFACE
class TodolistDirectory:
    """
    Manages the configuration directory, its named lists and the active-list
    indirection.

    Switching lists removes the old indirection before creating the new one;
    a concurrent invocation in that window sees no active list.
    """

    def __init__(self, config_root: Path, git_executable: str = "git", enable_git: bool = True) -> None:
        self._root = Path(config_root) / APP_DIR_NAME
        self._git = git_executable
        self._enable_git = enable_git

    @classmethod
    def from_settings(cls, settings: Settings) -> "TodolistDirectory":
        return cls(settings.config_root, settings.git_executable, settings.enable_git)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def lists_dir(self) -> Path:
        return self._root / LISTS_DIR_NAME

    @property
    def active_link(self) -> Path:
        return self._root / ACTIVE_LINK_NAME

    @property
    def _pointer(self) -> Path:
        return self._root / ACTIVE_POINTER_NAME

    def list_path(self, name: str) -> Path:
        return self.lists_dir / _list_file_name(name)

    def _require_root(self) -> Path:
        if not self._root.is_dir():
            raise NoConfigurationDirectory(self._root)
        return self._root

    def _ensure_root(self) -> Path:
        if not self._root.is_dir():
            self.lists_dir.mkdir(parents=True)
            logger.info("Created configuration directory %s", self._root)
        # Retried on every init until a repository exists.
        if self._enable_git and not (self._root / ".git").exists():
            self.run_git(["init"])
        return self._root

    # Indirection

    def _active_name(self) -> Optional[str]:
        if self.active_link.is_symlink():
            return Path(os.readlink(self.active_link)).stem
        if self._pointer.is_file():
            name = self._pointer.read_text(encoding="utf-8").strip()
            return name or None
        return None

    def _clear_active(self) -> None:
        if self.active_link.is_symlink() or self.active_link.exists():
            self.active_link.unlink()
        if self._pointer.exists():
            self._pointer.unlink()

    def _point_at(self, name: str) -> None:
        self._clear_active()
        # Relative to the link's own directory, so a relative config root still resolves.
        target = Path(LISTS_DIR_NAME) / _list_file_name(name)
        try:
            os.symlink(target, self.active_link)
        except (OSError, NotImplementedError):
            logger.debug("Symlinks unavailable, writing %s instead", self._pointer)
            fd, tmp_name = tempfile.mkstemp(dir=str(self._root))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(name)
            os.replace(tmp_name, self._pointer)
        logger.info("Active todolist is now %s", name)

    # Operations

    def resolve_active(self) -> Path:
        """
        Return the path of the active list document.

        Raises:
            NoConfigurationDirectory: nothing has been initialized yet.
            NoActiveTodolist: the directory exists but no list is active.
        """
        self._require_root()
        if self.active_link.is_symlink():
            return self.active_link
        name = self._active_name()
        if name is None:
            raise NoActiveTodolist(self._root)
        return self.list_path(name)

    def init(self, name: str) -> Path:
        """
        Create a new, empty list, creating the directory and its git
        repository on first use. The first list created becomes active.
        """
        path = self.list_path(name)
        self._ensure_root()
        self.lists_dir.mkdir(exist_ok=True)
        if path.exists():
            raise TodolistAlreadyExists(name)
        path.write_text(EMPTY_DOCUMENT, encoding="utf-8")
        logger.info("Created todolist %s at %s", name, path)
        if self._active_name() is None:
            self._point_at(name)
        return path

    def set_active(self, name: str) -> None:
        self._require_root()
        if not self.list_path(name).is_file():
            raise TodolistNotFound(name)
        self._point_at(name)

    def list_names(self) -> List[TodolistEntry]:
        """Return every list, sorted by name, flagging the active one."""
        self._require_root()
        if not self.lists_dir.is_dir():
            return []
        active = self._active_name()
        names = sorted(p.stem for p in self.lists_dir.iterdir() if p.suffix == LIST_SUFFIX)
        return [TodolistEntry(name=n, active=(n == active)) for n in names]

    def delete(self, name: str) -> None:
        """Remove a list; if it was active, the indirection goes with it."""
        self._require_root()
        path = self.list_path(name)
        if not path.is_file():
            raise TodolistNotFound(name)
        path.unlink()
        logger.info("Deleted todolist %s", name)
        if self._active_name() == name:
            self._clear_active()
            logger.info("Cleared active todolist")

    def nuke(self) -> Path:
        """Irreversibly remove the whole configuration directory."""
        root = self._require_root()
        shutil.rmtree(root)
        logger.info("Removed %s", root)
        return root

    def run_git(self, args: Sequence[str]) -> str:
        """
        Run a git command inside the configuration directory.

        Args:
            args: Git arguments (without 'git').

        Returns:
            The command's stdout.

        Raises:
            GitError: git is missing or exits non-zero.
        """
        self._require_root()
        cmd = [self._git, "-C", str(self._root), *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise GitError(f"Git executable '{self._git}' not found") from e
        if result.returncode != 0:
            detail = result.stderr.strip() or f"git {' '.join(args)} exited with {result.returncode}"
            raise GitError(detail, returncode=result.returncode)
        return result.stdout
