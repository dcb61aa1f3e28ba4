"""Calendar date parsing and formatting for due dates and outline timestamps.

Remote due dates arrive as ISO 8601 strings that may carry a time of day and a
UTC offset. Only the written calendar day is kept: the offset is never applied,
so ``2024-03-01T23:30:00-05:00`` stays on March 1st.
"""

from __future__ import annotations

import datetime
import re
from typing import Any, Optional

from dateutil import parser as dateutil_parser

from orgsync.errors import DateFormatError

_ORG_TIMESTAMP = re.compile(r"<(\d{4}-\d{2}-\d{2})(?:\s+[^>]*)?>")


def parse_due_date(value: Any) -> datetime.date:
    """Return the calendar day written in ``value``.

    Args:
        value: ISO 8601 date or datetime string (``2024-03-01``,
            ``2024-03-01T10:00:00Z``) or a ``date``/``datetime`` instance

    Raises:
        DateFormatError: the value is not a readable calendar date
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise DateFormatError(value)

    try:
        parsed = dateutil_parser.isoparse(value.strip())
    except (ValueError, OverflowError) as exc:
        raise DateFormatError(value) from exc

    return datetime.date(parsed.year, parsed.month, parsed.day)


def parse_optional_due_date(value: Any) -> Optional[datetime.date]:
    """Like :func:`parse_due_date` but maps an absent value to None."""
    if value is None or value == "":
        return None
    return parse_due_date(value)


def format_org_date(value: datetime.date) -> str:
    """Render a date as an active outline timestamp, e.g. ``<2024-03-01 Fri>``."""
    # strftime("%a") follows the process locale
    weekday = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")[value.weekday()]
    return f"<{value.isoformat()} {weekday}>"


def parse_org_timestamp(text: str) -> datetime.date:
    """Extract the calendar day from an outline timestamp like ``<2024-03-01 Fri>``.

    The weekday written in the timestamp is ignored.
    """
    match = _ORG_TIMESTAMP.search(text)
    if match is None:
        raise DateFormatError(text)
    return parse_due_date(match.group(1))


__all__ = [
    "format_org_date",
    "parse_due_date",
    "parse_optional_due_date",
    "parse_org_timestamp",
]
