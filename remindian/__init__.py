"""
Remindian

Keeps Markdown checklist lines (`- [ ] Task  %% comment %%`) in sync with
Apple Reminders.
"""

from .models import ChecklistItem, SyncOutcome, SyncResult
from .annotation import decode_annotation, encode_annotation
from .checklist_parser import parse_line, parse_lines, encode_item
from .reminder_store import ReminderStore, InMemoryReminderStore
from .apple_reminders import AppleReminders
from .sync_engine import SyncEngine, reconcile, rewrite_document, rewrite_file
from .sync_log import SyncLog

__all__ = [
    "ChecklistItem",
    "SyncOutcome",
    "SyncResult",
    "decode_annotation",
    "encode_annotation",
    "parse_line",
    "parse_lines",
    "encode_item",
    "ReminderStore",
    "InMemoryReminderStore",
    "AppleReminders",
    "SyncEngine",
    "reconcile",
    "rewrite_document",
    "rewrite_file",
    "SyncLog",
]

__version__ = "0.1.0"
