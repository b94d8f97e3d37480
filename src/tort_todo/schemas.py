from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import RootModel, ValidationError

from .errors import DocumentError
from .models import Todo


# PUBLIC_INTERFACE
class TodoDocument(RootModel[List[Todo]]):
    """
    Schema for a stored todolist: a JSON array of Todo objects.
    """


def _describe(exc: ValidationError) -> str:
    """
    Flatten pydantic errors into one line, each scoped to its field path
    (e.g. '3.due: invalid due date ...').
    """
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}" if loc else err.get("msg", "invalid value"))
    return "; ".join(parts)


# PUBLIC_INTERFACE
def load_document(raw: str, path: Path) -> List[Todo]:
    """
    Deserialize and validate a stored todolist.

    Raises:
        DocumentError: if the text is not JSON or a record fails validation.
    """
    try:
        return TodoDocument.model_validate_json(raw).root
    except ValidationError as e:
        raise DocumentError(path, _describe(e)) from e


# PUBLIC_INTERFACE
def dump_document(todos: List[Todo]) -> str:
    """Serialize todos into the stored JSON form."""
    return TodoDocument(todos).model_dump_json(indent=2)
