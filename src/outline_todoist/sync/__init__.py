"""Outline <-> Todoist sync passes.

Public API for reconciling a Markdown task outline with Todoist.

Architecture
------------
A sync run is two sequential passes over the document text. Nothing is
persisted locally: the only link between a line and a Todoist task is the
id marker stamped on the line.

Modules:

- ``engine``    -- ``SyncEngine``: pull then push, aggregate results.
- ``pull``      -- ``PullReconciler``: tick lines completed in Todoist.
- ``push``      -- ``PushReconciler``: create/update Todoist tasks.
- ``mapper``    -- ``TagMapper``: first-match tag to project routing.
- ``hierarchy`` -- parent resolution from indentation.
- ``models``    -- ``SyncFailure``, ``PullResult``, ``PushResult``,
  ``SyncResult``: core data contracts.
- ``reporter``  -- Human-readable and JSON result formatting.

Usage example
-------------
::

    from pathlib import Path
    from outline_todoist.config import load_config_from_sources
    from outline_todoist.sync import SyncEngine, format_sync_notice

    config, _, _ = load_config_from_sources()
    engine = SyncEngine.from_config(config)

    result = engine.sync_file(Path("/home/me/notes/tasks.md").resolve())
    print(format_sync_notice(result))
"""

from .engine import SyncEngine
from .mapper import TagMapper
from .models import PullResult, PushResult, SyncFailure, SyncResult
from .pull import PullReconciler
from .push import PushReconciler
from .reporter import format_sync_notice, format_sync_report, result_to_json

__all__ = [
    "PullReconciler",
    "PullResult",
    "PushReconciler",
    "PushResult",
    "SyncEngine",
    "SyncFailure",
    "SyncResult",
    "TagMapper",
    "format_sync_notice",
    "format_sync_report",
    "result_to_json",
]
