"""
Due-date handling: a tolerant parser for short date expressions and the
CalendarDate value type used by the todo model and the list view.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from functools import total_ordering
from typing import Dict, Optional

from .errors import DateParseError

logger = logging.getLogger(__name__)

SERIAL_FORMAT = "%Y-%m-%d"
DISPLAY_FORMAT = "%a %b %d"

_WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
_MONTH_NAMES = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]


def _name_table(names: list, start: int) -> Dict[str, int]:
    table: Dict[str, int] = {}
    for i, name in enumerate(names, start=start):
        table[name] = i
        table[name[:3]] = i
    return table


_WEEKDAYS = _name_table(_WEEKDAY_NAMES, 0)
_MONTHS = _name_table(_MONTH_NAMES, 1)

_TODAY_WORDS = {"today", "tod"}
_TOMORROW_WORDS = {"tomorrow", "tom"}
_MONTH_DAY_RE = re.compile(r"^([a-z]+)\s*(\d{1,2})$")
_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


class Ordering(Enum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


# PUBLIC_INTERFACE
@total_ordering
@dataclass(frozen=True)
class CalendarDate:
    """
    A calendar date that may be unset.

    Unset sorts after every real date, so undated todos land at the end of
    any ordering. Two unset dates are equal.
    """

    value: Optional[date] = None

    @classmethod
    def unset(cls) -> "CalendarDate":
        return cls(None)

    @classmethod
    def today(cls) -> "CalendarDate":
        return cls(date.today())

    def is_set(self) -> bool:
        return self.value is not None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return compare(self, other) is Ordering.LESS

    def serialize(self) -> str:
        """Return the stored form: yyyy-mm-dd, or an empty string when unset."""
        return "" if self.value is None else self.value.strftime(SERIAL_FORMAT)

    def display(self) -> str:
        """Return the list-view form, e.g. 'Sat Nov 28', or an empty string when unset."""
        return "" if self.value is None else self.value.strftime(DISPLAY_FORMAT)

    def __str__(self) -> str:
        return self.display()

    @classmethod
    def deserialize(cls, text: str) -> "CalendarDate":
        """Inverse of serialize(). Only the literal yyyy-mm-dd form is accepted."""
        if text == "":
            return cls.unset()
        match = _ISO_RE.match(text)
        if match is None:
            raise DateParseError(text)
        return cls(_make_date(text, *(int(g) for g in match.groups())))


# PUBLIC_INTERFACE
def compare(a: CalendarDate, b: CalendarDate) -> Ordering:
    """Order two dates; unset compares greater than any set date."""
    if a.value is not None and b.value is not None:
        if a.value < b.value:
            return Ordering.LESS
        if a.value > b.value:
            return Ordering.GREATER
        return Ordering.EQUAL
    if a.value is None and b.value is None:
        return Ordering.EQUAL
    return Ordering.GREATER if a.value is None else Ordering.LESS


def _make_date(raw: str, year: int, month: int, day: int) -> date:
    try:
        return date(year, month, day)
    except ValueError as e:
        raise DateParseError(raw) from e


def _resolve_month_day(raw: str, month: int, day: int, today: date) -> date:
    # Approximate ordinal: a (month, day) already behind today rolls into next year.
    passed = today.month * 31 + today.day > month * 31 + day
    return _make_date(raw, today.year + (1 if passed else 0), month, day)


# PUBLIC_INTERFACE
def parse_date(expr: Optional[str], today: Optional[date] = None) -> CalendarDate:
    """
    Parse a due-date expression into a CalendarDate.

    Accepted forms:
    - None: unset
    - 'today' / 'tod', 'tomorrow' / 'tom'
    - a weekday name ('Sat', 'saturday'): the next such day, today included
    - a month name and day ('Nov28', 'Nov 28'): this year, or next year if already behind today
    - 'yyyy-mm-dd'

    Args:
        expr: The user's input, or None when no due date was given.
        today: Reference day. Pass one snapshot per command so parsing and
            display agree; defaults to the local date.

    Raises:
        DateParseError: when the input matches none of the forms above.
    """
    if expr is None:
        return CalendarDate.unset()

    ref = today or date.today()
    s = expr.strip().lower()

    if s in _TODAY_WORDS:
        return CalendarDate(ref)
    if s in _TOMORROW_WORDS:
        return CalendarDate(ref + timedelta(days=1))

    if s in _WEEKDAYS:
        days_until = (_WEEKDAYS[s] - ref.weekday()) % 7
        return CalendarDate(ref + timedelta(days=days_until))

    match = _MONTH_DAY_RE.match(s)
    if match and match.group(1) in _MONTHS:
        month = _MONTHS[match.group(1)]
        return CalendarDate(_resolve_month_day(expr, month, int(match.group(2)), ref))

    match = _ISO_RE.match(s)
    if match:
        return CalendarDate(_make_date(expr, *(int(g) for g in match.groups())))

    logger.debug("Rejected date expression %r", expr)
    raise DateParseError(expr)
