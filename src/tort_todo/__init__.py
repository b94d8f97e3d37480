"""
tort-todo: a personal todo-list manager.

Todos live in named JSON lists under the user's configuration directory; one
list is active at a time and the directory is kept under git. The command-line
entry point is tort_todo.main:app.
"""

__version__ = "0.1.0"
