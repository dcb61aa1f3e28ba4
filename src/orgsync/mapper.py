"""Conversion between outline entities, outline text and remote records.

Every function here is pure: records in, entities or text out.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .outline.models import DONE_STATE, TODO_STATE, Priority, Project, Task
from .outline.parser import parse_headlines
from .utils.datetime_utils import format_org_date, parse_optional_due_date

logger = logging.getLogger(__name__)

BODY_INDENT = "   "


def priority_from_level(level: Any) -> Priority:
    """Map a remote priority level to a Priority; unknown levels are NONE."""

    if isinstance(level, bool):
        return Priority.NONE
    if isinstance(level, float) and not level.is_integer():
        return Priority.NONE
    try:
        return Priority(int(level))
    except (TypeError, ValueError):
        return Priority.NONE


def _optional_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def record_identifier(record: Mapping[str, Any]) -> Optional[str]:
    return _optional_id(record.get("id"))


def project_from_record(record: Mapping[str, Any]) -> Project:
    return Project(name=record.get("name", ""), id=record_identifier(record))


def task_from_record(record: Mapping[str, Any]) -> Task:
    """Build a Task from a remote task record.

    Raises:
        DateFormatError: the record carries a due date that is not a
            readable calendar date
    """

    due = record.get("due")
    if isinstance(due, Mapping):
        due = due.get("date")

    return Task(
        content=record.get("content", ""),
        project_id=_optional_id(record.get("project_id")),
        id=record_identifier(record),
        completed=bool(record.get("is_completed", False)),
        priority=priority_from_level(record.get("priority")),
        due_date=parse_optional_due_date(due),
    )


def _property_drawer(identifier: Optional[str]) -> List[str]:
    return [
        f"{BODY_INDENT}:PROPERTIES:",
        f"{BODY_INDENT}:ID: {identifier if identifier is not None else ''}".rstrip(),
        f"{BODY_INDENT}:END:",
    ]


def render_project(project: Project) -> str:
    lines = [f"* {project.name}", *_property_drawer(project.id)]
    return "\n".join(lines) + "\n"


def render_task(task: Task) -> str:
    """Render a task headline with its SCHEDULED line and property drawer.

    The headline carries ``content`` verbatim, so content that itself starts
    with a priority cookie such as ``[#A]`` reads back as that priority, and
    leading or trailing spaces are lost on the next parse.
    """

    state = DONE_STATE if task.completed else TODO_STATE
    priority = (
        task.priority if isinstance(task.priority, Priority) else priority_from_level(task.priority)
    )

    heading = ["**", state]
    if priority.marker:
        heading.append(priority.marker)
    heading.append(task.content)

    lines = [" ".join(heading)]
    if task.due_date is not None:
        lines.append(f"{BODY_INDENT}SCHEDULED: {format_org_date(task.due_date)}")
    lines.extend(_property_drawer(task.id))
    return "\n".join(lines) + "\n"


def group_tasks(tasks: Iterable[Task]) -> Dict[Optional[str], List[Task]]:
    """Group tasks by project id, keeping their relative order."""

    grouped: Dict[Optional[str], List[Task]] = {}
    for task in tasks:
        grouped.setdefault(task.project_id, []).append(task)
    return grouped


def render_outline(projects: Sequence[Project], tasks: Sequence[Task]) -> str:
    """Render every project followed by its tasks, in the order supplied."""

    grouped = group_tasks(tasks)
    chunks: List[str] = []
    for project in projects:
        chunks.append(render_project(project))
        chunks.extend(render_task(task) for task in grouped.pop(project.id, []))

    orphaned = sum(len(group) for group in grouped.values())
    if orphaned:
        logger.warning(
            "Skipping %d task(s) whose project is not among the fetched projects: %s",
            orphaned,
            ", ".join(sorted(str(key) for key in grouped)),
        )

    return "".join(chunks)


def to_create_request(task: Task) -> Dict[str, Any]:
    """Return the creation payload for a local task: content and project only."""

    return {"content": task.content, "project_id": task.project_id}


def attach_identifiers(text: str, assignments: Mapping[int, str]) -> str:
    """Insert an ``:ID:`` property drawer under the headlines at the given lines.

    Args:
        text: outline text the line numbers refer to
        assignments: zero-based headline line number -> assigned identifier

    Only the new lines are added; the rest of ``text`` is left as is. A drawer
    already present under the headline receives the ``:ID:`` entry instead.
    """

    if not assignments:
        return text

    headline_lines = {headline.line_number for headline in parse_headlines(text)}
    lines = text.splitlines()
    insert_after: Dict[int, List[str]] = {}

    for line_number, identifier in assignments.items():
        if line_number not in headline_lines:
            raise ValueError(f"No headline at line {line_number + 1}")
        anchor = line_number
        if anchor + 1 < len(lines) and lines[anchor + 1].lstrip().startswith("SCHEDULED:"):
            anchor += 1
        if anchor + 1 < len(lines) and lines[anchor + 1].strip() == ":PROPERTIES:":
            insert_after[anchor + 1] = [f"{BODY_INDENT}:ID: {identifier}"]
        else:
            insert_after[anchor] = _property_drawer(identifier)

    output: List[str] = []
    for index, line in enumerate(lines):
        output.append(line)
        output.extend(insert_after.get(index, ()))

    result = "\n".join(output)
    if text.endswith("\n"):
        result += "\n"
    return result


__all__ = [
    "attach_identifiers",
    "group_tasks",
    "priority_from_level",
    "project_from_record",
    "record_identifier",
    "render_outline",
    "render_project",
    "render_task",
    "task_from_record",
    "to_create_request",
]
