"""Utility helpers shared across the sync core."""

from .datetime_utils import format_org_date, parse_due_date, parse_org_timestamp

__all__ = ["format_org_date", "parse_due_date", "parse_org_timestamp"]
