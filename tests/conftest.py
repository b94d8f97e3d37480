from datetime import date
from pathlib import Path

import pytest

from tort_todo.repositories import TodoStore
from tort_todo.todolists import TodolistDirectory

# A Monday.
TODAY = date(2026, 10, 19)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def config_home(tmp_path: Path, monkeypatch) -> Path:
    """Point the application at a throwaway config root with git disabled."""
    monkeypatch.setenv("TORT_TODO_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("TORT_TODO_ENABLE_GIT", "false")
    return tmp_path


@pytest.fixture
def directory(config_home: Path) -> TodolistDirectory:
    return TodolistDirectory(config_home, enable_git=False)


@pytest.fixture
def store() -> TodoStore:
    return TodoStore()
