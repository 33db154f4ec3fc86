"""
Data Models for Remindian

Defines the ChecklistItem model parsed from Markdown documents and the
structures used to report the outcome of a sync pass against Apple Reminders.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ChecklistItem:
    """
    One recognized checklist line of a document.

    Items are immutable: the parser creates them, and every sync step builds
    a new item with dataclasses.replace() instead of mutating the old one.
    """
    raw_line: str
    checked: bool
    title: str
    comment: Optional[str] = None
    line_number: int = 1
    list_name: str = "remindian"

    # Link to the reminder, set together or not at all
    external_id: Optional[str] = None
    external_list: Optional[str] = None

    @property
    def has_comment(self) -> bool:
        return self.comment is not None

    @property
    def is_linked(self) -> bool:
        """True when the item points at a reminder."""
        return self.external_id is not None and self.external_list is not None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "line_number": self.line_number,
            "list": self.list_name,
            "checked": self.checked,
            "title": self.title,
            "comment": self.comment,
            "external_id": self.external_id,
            "external_list": self.external_list,
        }

    def __str__(self) -> str:
        status = "[x]" if self.checked else "[ ]"
        prefix = f"[{self.list_name} | line: {self.line_number}] {status} {self.title}"
        if self.comment is not None:
            return f"{prefix} (comment: {self.comment})"
        return prefix


class SyncOutcome:
    """What a single reconciliation did with an item."""
    CREATED = "created"              # new reminder created, annotation added
    PUSHED = "pushed"                # local title pushed, completion pulled from store
    IN_SYNC = "in_sync"              # reminder exists and already agreed
    MISSING = "missing"              # annotation points at a reminder that is gone
    CREATE_FAILED = "create_failed"
    UPDATE_FAILED = "update_failed"
    NO_ACCESS = "no_access"          # store refused access, item only re-formatted

    ALL = (
        CREATED,
        PUSHED,
        IN_SYNC,
        MISSING,
        CREATE_FAILED,
        UPDATE_FAILED,
        NO_ACCESS,
    )


@dataclass
class SyncResult:
    """Summary of one document pass."""
    started_at: datetime
    completed_at: Optional[datetime] = None
    document: Optional[str] = None
    lines: int = 0
    items: int = 0
    created: int = 0
    pushed: int = 0
    in_sync: int = 0
    missing: int = 0
    create_failed: int = 0
    update_failed: int = 0
    no_access: int = 0
    errors: list = field(default_factory=list)

    def record(self, outcome: str) -> None:
        """Count one reconciliation outcome."""
        if outcome not in SyncOutcome.ALL:
            raise ValueError(f"Unknown sync outcome: {outcome}")
        setattr(self, outcome, getattr(self, outcome) + 1)
        self.items += 1

    @property
    def failed(self) -> int:
        return self.create_failed + self.update_failed

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "document": self.document,
            "lines": self.lines,
            "items": self.items,
            "outcomes": {outcome: getattr(self, outcome) for outcome in SyncOutcome.ALL},
            "errors": self.errors,
        }

    def summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            f"Sync completed at {self.completed_at}",
            f"Checklist items: {self.items} (of {self.lines} lines)",
            f"Reminders: {self.created} created, {self.pushed} updated, "
            f"{self.in_sync} already in sync",
            f"Missing reminders: {self.missing}",
            f"Failed writes: {self.failed}",
        ]
        if self.no_access:
            lines.append(f"Skipped (no Reminders access): {self.no_access}")
        if self.errors:
            lines.append(f"Warnings: {len(self.errors)}")
        return "\n".join(lines)
