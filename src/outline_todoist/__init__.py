"""Sync Markdown task outlines with Todoist."""

__version__ = "0.1.0"
