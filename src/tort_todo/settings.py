from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - TORT_TODO_CONFIG_HOME: root under which the 'tort_todo' directory lives.
      Defaults to $XDG_CONFIG_HOME, then ~/.config
    - TORT_TODO_GIT: git executable used for the history repository (default: git)
    - TORT_TODO_ENABLE_GIT: 'false' to skip initializing the history repository
    - TORT_TODO_LOG_LEVEL: logging level name (default: WARNING)
    """

    config_root: Path
    git_executable: str
    enable_git: bool
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _default_config_root() -> str:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return xdg
    return str(Path.home() / ".config")


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    config_root = Path(_get_env("TORT_TODO_CONFIG_HOME", _default_config_root()).strip()).expanduser()
    git_executable = _get_env("TORT_TODO_GIT", "git").strip()
    enable_git = _parse_bool(_get_env("TORT_TODO_ENABLE_GIT", "true"), True)

    log_level = _get_env("TORT_TODO_LOG_LEVEL", "WARNING").strip().upper()
    if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        # Fallback to WARNING if unsupported
        log_level = "WARNING"

    return Settings(
        config_root=config_root,
        git_executable=git_executable,
        enable_git=enable_git,
        log_level=log_level,
    )
