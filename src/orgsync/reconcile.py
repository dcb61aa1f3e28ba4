"""Identify outline tasks that do not exist on the remote service yet."""

from __future__ import annotations

from typing import Iterable, List

from .outline.models import Task


def find_new(tasks: Iterable[Task]) -> List[Task]:
    """Return the tasks without a remote identifier, in their original order."""

    return [task for task in tasks if task.id is None]


__all__ = ["find_new"]
