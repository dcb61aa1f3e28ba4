"""Domain models shared by the outline parser and the record mapper."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

TODO_STATE = "TODO"
DONE_STATE = "DONE"
STATES = (TODO_STATE, DONE_STATE)


class Priority(IntEnum):
    """Task urgency, valued by the remote service's priority level."""

    NONE = 1
    C = 2
    B = 3
    A = 4

    @property
    def marker(self) -> Optional[str]:
        """Return the outline cookie (``[#A]``) or None for unprioritized tasks."""

        if self is Priority.NONE:
            return None
        return f"[#{self.name}]"


@dataclass(slots=True)
class Headline:
    """A single outline heading with the metadata lines that follow it."""

    level: int
    title: str
    line_number: int
    state: Optional[str] = None
    priority: Priority = Priority.NONE
    identifier: Optional[str] = None
    scheduled: Optional[datetime.date] = None

    @property
    def is_done(self) -> bool:
        return self.state == DONE_STATE


@dataclass(slots=True)
class Project:
    """Remote top-level task container, rendered as a level-1 headline."""

    name: str
    id: Optional[str] = None


@dataclass(slots=True)
class Task:
    """A unit of work owned by a project, rendered as a level-2 headline."""

    content: str
    project_id: Optional[str] = None
    id: Optional[str] = None
    completed: bool = False
    priority: Priority = Priority.NONE
    due_date: Optional[datetime.date] = None

    @property
    def is_synced(self) -> bool:
        """Return True once the remote service has assigned an identifier."""

        return self.id is not None


__all__ = [
    "DONE_STATE",
    "Headline",
    "Priority",
    "Project",
    "STATES",
    "TODO_STATE",
    "Task",
]
