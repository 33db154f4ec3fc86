"""
Sync Engine

Keeps checklist lines of a Markdown document in sync with reminders.

Policy:
- completion status always flows reminder -> document
- the title always flows document -> reminder
- lines without a reminder annotation get a new reminder

Items are reconciled one at a time, in line order. The reminder store is not
transactional, so overlapping calls could create duplicate reminders for the
same line.
"""

from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Optional, Union
import logging
import os
import sqlite3
import tempfile

from .annotation import decode_annotation, encode_annotation
from .checklist_parser import DEFAULT_LIST, encode_item, parse_line, split_lines
from .models import ChecklistItem, SyncOutcome, SyncResult
from .reminder_store import ReminderStore
from .sync_log import SyncLog

logger = logging.getLogger(__name__)


def reconcile_with_outcome(item: ChecklistItem, store: ReminderStore) -> tuple[ChecklistItem, str]:
    """
    Reconcile one item with the store and report what happened.

    Never raises for store failures: they are logged and the returned item
    keeps its local state.
    """
    if not store.request_access():
        logger.warning(f"No Reminders access, leaving line {item.line_number} unsynced: '{item.title}'")
        return item, SyncOutcome.NO_ACCESS

    link = decode_annotation(item.comment)
    if link is None:
        return _create_reminder(item, store)

    reminder_id, reminder_list = link
    linked = replace(item, external_id=reminder_id, external_list=reminder_list)

    resolved_checked = store.is_completed(reminder_id)
    pushed = resolved_checked != item.checked
    updated = True
    if pushed:
        updated = store.update_record(reminder_id, item.title, resolved_checked)

    if not store.record_exists(reminder_id):
        # The link is kept and the document's checked state wins
        logger.warning(
            f"Reminder {reminder_id} in '{reminder_list}' no longer exists "
            f"(line {item.line_number}: '{item.title}')"
        )
        return linked, SyncOutcome.MISSING

    if not updated:
        logger.warning(f"Failed to update reminder {reminder_id} for '{item.title}'")
        return linked, SyncOutcome.UPDATE_FAILED

    synced = replace(
        linked,
        checked=resolved_checked,
        comment=encode_annotation(reminder_id, reminder_list),
    )
    if pushed:
        state = "completed" if resolved_checked else "not completed"
        logger.info(f"  ✓ '{item.title}' is {state} in Reminders")
        return synced, SyncOutcome.PUSHED
    return synced, SyncOutcome.IN_SYNC


def _create_reminder(item: ChecklistItem, store: ReminderStore) -> tuple[ChecklistItem, str]:
    """Create a reminder for an unlinked item. Any old comment text is replaced."""
    reminder_id = store.create_record(item.title, item.list_name)
    if not reminder_id:
        logger.warning(f"Failed to create reminder for line {item.line_number}: '{item.title}'")
        return item, SyncOutcome.CREATE_FAILED

    if item.comment:
        logger.debug(f"Replacing comment '{item.comment}' on line {item.line_number}")

    logger.info(f"  ✓ Created reminder {reminder_id} in '{item.list_name}': '{item.title}'")
    created = replace(
        item,
        comment=encode_annotation(reminder_id, item.list_name),
        external_id=reminder_id,
        external_list=item.list_name,
    )
    return created, SyncOutcome.CREATED


def reconcile(item: ChecklistItem, store: ReminderStore) -> ChecklistItem:
    """Return a new item reflecting the outcome of syncing `item` with `store`."""
    return reconcile_with_outcome(item, store)[0]


def write_atomically(destination: Path, content: str) -> None:
    """
    Replace `destination` with `content`.

    Writes to a temporary file next to the destination and renames it into
    place, so readers see either the old file or the new one.
    """
    destination = Path(destination)
    fd, tmp_name = tempfile.mkstemp(
        dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if destination.exists():
            os.chmod(tmp_name, destination.stat().st_mode & 0o7777)
        os.replace(tmp_name, destination)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class SyncEngine:
    """
    Rewrites documents after reconciling their checklist lines.

    Key features:
    - Non-checklist lines are kept byte-for-byte
    - Checklist lines come back in canonical form, even without store access
    - Strictly sequential store calls
    - Optional audit log of each pass
    """

    def __init__(self, store: ReminderStore, sync_log: Optional[SyncLog] = None):
        """
        Initialize the sync engine.

        Args:
            store: ReminderStore to sync against
            sync_log: SyncLog to record passes in (no logging if None)
        """
        self.store = store
        self.sync_log = sync_log
        self.last_result: Optional[SyncResult] = None

    def rewrite_document(self, content: str, list_name: str = DEFAULT_LIST, document: Optional[str] = None) -> str:
        """Reconcile every checklist line of `content` and return the new text."""
        rendered = self._render(content, list_name, document)
        self._log_pass()
        return rendered

    def _log_pass(self):
        """Record the last pass in the sync log. A log failure never fails the pass."""
        if self.sync_log is None or self.last_result is None:
            return
        try:
            self.sync_log.log_action(
                "document_synced",
                document=self.last_result.document,
                details=self.last_result.to_dict(),
            )
        except sqlite3.Error as e:
            logger.warning(f"Could not write sync log {self.sync_log.db_path}: {e}")

    def _render(self, content: str, list_name: str, document: Optional[str]) -> str:
        result = SyncResult(started_at=datetime.now(), document=document)
        lines = split_lines(content)
        result.lines = len(lines)

        rendered = []
        for idx, line in enumerate(lines):
            item = parse_line(line, list_name=list_name, line_number=idx + 1)
            if item is None:
                rendered.append(line)
                continue

            updated, outcome = reconcile_with_outcome(item, self.store)
            result.record(outcome)
            if outcome in (SyncOutcome.MISSING, SyncOutcome.CREATE_FAILED, SyncOutcome.UPDATE_FAILED):
                result.errors.append(f"line {item.line_number}: {outcome} ('{item.title}')")
            rendered.append(encode_item(updated))

        result.completed_at = datetime.now()
        self.last_result = result
        return "\n".join(rendered)

    def rewrite_file(
        self,
        source: Union[str, Path],
        destination: Optional[Union[str, Path]] = None,
        list_name: str = DEFAULT_LIST,
    ) -> Path:
        """
        Sync a Markdown file and write the result.

        Args:
            source: File to read
            destination: File to write (defaults to overwriting source)
            list_name: Reminder list for new items

        Returns:
            The destination path

        Raises:
            OSError, UnicodeDecodeError: if the file can't be read or written
        """
        source = Path(source)
        destination = Path(destination) if destination is not None else source

        content = source.read_text(encoding="utf-8")
        logger.info(f"Syncing {source} with list '{list_name}'")
        rendered = self._render(content, list_name, str(source))
        # New annotations must reach disk before anything else can fail
        write_atomically(destination, rendered)
        logger.info(f"Wrote {destination}")
        self._log_pass()
        return destination


def rewrite_document(content: str, list_name: str, store: ReminderStore) -> str:
    """Reconcile every checklist line of a document against `store`."""
    return SyncEngine(store).rewrite_document(content, list_name=list_name)


def rewrite_file(
    source: Union[str, Path],
    store: ReminderStore,
    destination: Optional[Union[str, Path]] = None,
    list_name: str = DEFAULT_LIST,
) -> Path:
    """Sync a Markdown file against `store`; returns the path written."""
    return SyncEngine(store).rewrite_file(source, destination=destination, list_name=list_name)
