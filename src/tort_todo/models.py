from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .dates import CalendarDate
from .errors import DateParseError

COMPLETED_STATUS = "completed"


# PUBLIC_INTERFACE
class Todo(BaseModel):
    """
    A single todo record as held in a list document.

    Fields:
    - id: Small integer handle shown to the user; unique among live todos, reused after deletes
    - uuid: Opaque identifier assigned at creation and never reused
    - subject: Free text, may contain +project and @context tags
    - projects / contexts: Tags captured from the subject when the todo was added
    - due: CalendarDate, stored as yyyy-mm-dd or '' when unset
    - completed / completed_date: Completion flag and the moment it was last set
    - status: Free-form label; '' means no status
    - archived: Hidden from listings but kept in the document
    - is_priority: Rendered emphasized
    - notes: None, or a non-empty list of note strings
    - recur / recur_until / prev_recur_todo_uuid: Recurrence metadata, stored but not acted upon
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: int = Field(..., ge=0)
    uuid: str = ""
    subject: str
    projects: List[str] = Field(default_factory=list)
    contexts: List[str] = Field(default_factory=list)
    due: CalendarDate = Field(default_factory=CalendarDate.unset)
    completed: bool = False
    completed_date: Optional[datetime] = None
    status: str = ""
    archived: bool = False
    is_priority: bool = False
    notes: Optional[List[str]] = None
    recur: str = ""
    recur_until: str = ""
    prev_recur_todo_uuid: str = ""

    @field_validator("due", mode="before")
    @classmethod
    def parse_due(cls, v: object) -> CalendarDate:
        """
        Accept a CalendarDate, a date, None, or the stored yyyy-mm-dd string.
        """
        if isinstance(v, CalendarDate):
            return v
        if v is None:
            return CalendarDate.unset()
        if isinstance(v, date):
            return CalendarDate(v)
        if isinstance(v, str):
            try:
                return CalendarDate.deserialize(v.strip())
            except DateParseError as e:
                raise ValueError(f"invalid due date '{v}', expected yyyy-mm-dd") from e
        raise ValueError("due must be a yyyy-mm-dd string")

    @field_validator("completed_date", mode="before")
    @classmethod
    def parse_completed_date(cls, v: object) -> object:
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def normalize_notes(cls, v: object) -> object:
        # An empty list and an absent list are the same state; keep only the absent form.
        if isinstance(v, list) and not v:
            return None
        return v

    @field_serializer("due")
    def serialize_due(self, due: CalendarDate) -> str:
        return due.serialize()

    @field_serializer("completed_date")
    def serialize_completed_date(self, value: Optional[datetime]) -> str:
        return "" if value is None else value.isoformat(timespec="seconds")
