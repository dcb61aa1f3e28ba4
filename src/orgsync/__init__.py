"""Two-way sync between an Org-style outline file and Todoist."""

__version__ = "0.1.0"
