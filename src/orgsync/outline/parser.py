"""Read outline text into headlines and task entities."""

from __future__ import annotations

import re
from functools import reduce
from typing import List, NamedTuple, Optional

from orgsync.errors import DateFormatError, MalformedOutline
from orgsync.utils.datetime_utils import parse_org_timestamp

from .models import STATES, Headline, Priority, Task

PROJECT_LEVEL = 1
TASK_LEVEL = 2

_HEADLINE = re.compile(r"^(?P<stars>\*+)\s+(?P<rest>.*?)\s*$")
_PRIORITY_COOKIE = re.compile(r"^\[#(?P<priority>[ABC])\]\s*")
_SCHEDULED = re.compile(r"^\s*SCHEDULED:\s*(?P<stamp><[^>]*>)")
_PROPERTY = re.compile(r"^\s*:(?P<key>[A-Za-z0-9_-]+):\s*(?P<value>.*?)\s*$")


def _split_title(rest: str) -> tuple[Optional[str], Priority, str]:
    state: Optional[str] = None
    keyword, _, remainder = rest.partition(" ")
    if keyword in STATES:
        state = keyword
        rest = remainder.lstrip()

    priority = Priority.NONE
    match = _PRIORITY_COOKIE.match(rest)
    if match:
        priority = Priority[match.group("priority")]
        rest = rest[match.end():]

    return state, priority, rest.strip()


def parse_headlines(text: str) -> List[Headline]:
    """Tokenise ``text`` into headlines in document order.

    A ``SCHEDULED:`` line and the ``:ID:`` entry of a ``:PROPERTIES:`` drawer
    are attached to the closest preceding headline. Any other line is inert.
    """

    headlines: List[Headline] = []
    current: Optional[Headline] = None
    in_drawer = False

    for index, line in enumerate(text.splitlines()):
        match = _HEADLINE.match(line)
        if match:
            state, priority, title = _split_title(match.group("rest"))
            current = Headline(
                level=len(match.group("stars")),
                title=title,
                line_number=index,
                state=state,
                priority=priority,
            )
            headlines.append(current)
            in_drawer = False
            continue

        if current is None:
            continue

        stripped = line.strip()
        if stripped == ":PROPERTIES:":
            in_drawer = True
            continue
        if stripped == ":END:":
            in_drawer = False
            continue

        if in_drawer:
            prop = _PROPERTY.match(line)
            if prop and prop.group("key").upper() == "ID" and prop.group("value"):
                current.identifier = prop.group("value")
            continue

        scheduled = _SCHEDULED.match(line)
        if scheduled:
            try:
                current.scheduled = parse_org_timestamp(scheduled.group("stamp"))
            except DateFormatError as exc:
                raise MalformedOutline(
                    f"Unreadable SCHEDULED date {scheduled.group('stamp')}",
                    headline=current.title,
                    line_number=index,
                ) from exc

    return headlines


class _ParseState(NamedTuple):
    project: Optional[Headline]
    tasks: tuple[Task, ...]


def _task_from_headline(project: Optional[Headline], headline: Headline) -> Task:
    if project is None:
        raise MalformedOutline(
            "Task headline has no enclosing project",
            headline=headline.title,
            line_number=headline.line_number,
        )
    if not project.identifier:
        raise MalformedOutline(
            f"Project {project.title!r} has no ID property",
            headline=headline.title,
            line_number=headline.line_number,
        )

    return Task(
        content=headline.title,
        project_id=project.identifier,
        id=headline.identifier,
        completed=headline.is_done,
        priority=headline.priority,
        due_date=headline.scheduled,
    )


def _step(state: _ParseState, headline: Headline) -> _ParseState:
    if headline.level == PROJECT_LEVEL:
        return _ParseState(headline, state.tasks)
    if headline.level == TASK_LEVEL:
        task = _task_from_headline(state.project, headline)
        return _ParseState(state.project, state.tasks + (task,))
    # Deeper levels (notes, sub-items) carry no mapping.
    return state


def parse(text: str) -> List[Task]:
    """Return the tasks of ``text`` in document order.

    Each level-2 headline belongs to the nearest preceding level-1 headline,
    whose ``:ID:`` becomes the task's ``project_id``.

    Raises:
        MalformedOutline: a task has no enclosing project, its project has no
            identifier, or its SCHEDULED date is unreadable
    """

    final = reduce(_step, parse_headlines(text), _ParseState(None, ()))
    return list(final.tasks)


__all__ = ["PROJECT_LEVEL", "TASK_LEVEL", "parse", "parse_headlines"]
