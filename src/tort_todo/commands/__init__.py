from .todolists import register as register_todolists
from .todos import register as register_todos

__all__ = [
    "register_todolists",
    "register_todos",
]
