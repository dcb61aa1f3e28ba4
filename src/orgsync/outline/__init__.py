"""Outline domain package: entity models and the outline parser."""

from .models import Headline, Priority, Project, Task
from .parser import parse, parse_headlines

__all__ = [
    "Headline",
    "Priority",
    "Project",
    "Task",
    "parse",
    "parse_headlines",
]
