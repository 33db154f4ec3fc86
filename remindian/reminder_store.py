"""
Reminder Store Interface

The sync engine talks to reminders only through the ReminderStore protocol.
AppleReminders (apple_reminders.py) is the live backend; InMemoryReminderStore
keeps everything in a dict and is used by the tests.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable
import logging

logger = logging.getLogger(__name__)


@runtime_checkable
class ReminderStore(Protocol):
    """Operations the sync engine needs from a reminders backend."""

    def request_access(self) -> bool:
        """Ask for access. Other operations are only honored once granted."""
        ...

    def is_completed(self, reminder_id: str) -> bool:
        """Completion flag of a reminder; False if the reminder is unknown."""
        ...

    def create_record(self, title: str, list_name: str) -> Optional[str]:
        """Create a reminder (and its list if needed). Returns the new ID or None."""
        ...

    def record_exists(self, reminder_id: str) -> bool:
        ...

    def update_record(self, reminder_id: str, title: str, completed: bool) -> bool:
        ...

    def delete_record(self, reminder_id: str) -> bool:
        ...


@dataclass
class StoredReminder:
    """A reminder held by InMemoryReminderStore."""
    reminder_id: str
    title: str
    list_name: str
    completed: bool = False


class InMemoryReminderStore:
    """
    Dict-backed ReminderStore.

    Every call is appended to ``calls`` as ``(operation, args)`` so tests can
    assert on exactly what the engine asked for.
    """

    def __init__(
        self,
        grant_access: bool = True,
        fail_creates: bool = False,
        fail_updates: bool = False,
        id_prefix: str = "MEM",
    ):
        self.grant_access = grant_access
        self.fail_creates = fail_creates
        self.fail_updates = fail_updates
        self.id_prefix = id_prefix
        self.reminders: dict[str, StoredReminder] = {}
        self.lists: set[str] = set()
        self.calls: list[tuple[str, tuple]] = []
        self._authorized = False
        self._next_id = 1

    def _record_call(self, operation: str, *args) -> None:
        self.calls.append((operation, args))

    def calls_to(self, operation: str) -> list[tuple]:
        """Arguments of every call made to one operation."""
        return [args for name, args in self.calls if name == operation]

    def request_access(self) -> bool:
        self._record_call("request_access")
        self._authorized = self.grant_access
        return self._authorized

    def is_completed(self, reminder_id: str) -> bool:
        self._record_call("is_completed", reminder_id)
        reminder = self.reminders.get(reminder_id) if self._authorized else None
        return reminder.completed if reminder else False

    def create_record(self, title: str, list_name: str) -> Optional[str]:
        self._record_call("create_record", title, list_name)
        if not self._authorized or self.fail_creates:
            logger.debug(f"Refusing to create reminder '{title}'")
            return None

        self.lists.add(list_name)
        reminder_id = f"{self.id_prefix}-{self._next_id}"
        self._next_id += 1
        self.reminders[reminder_id] = StoredReminder(reminder_id, title, list_name)
        return reminder_id

    def record_exists(self, reminder_id: str) -> bool:
        self._record_call("record_exists", reminder_id)
        return self._authorized and reminder_id in self.reminders

    def update_record(self, reminder_id: str, title: str, completed: bool) -> bool:
        self._record_call("update_record", reminder_id, title, completed)
        reminder = self.reminders.get(reminder_id) if self._authorized else None
        if reminder is None or self.fail_updates:
            return False

        reminder.title = title
        reminder.completed = completed
        return True

    def delete_record(self, reminder_id: str) -> bool:
        self._record_call("delete_record", reminder_id)
        if not self._authorized:
            return False
        return self.reminders.pop(reminder_id, None) is not None

    # Test helpers (not part of the ReminderStore protocol)

    def add_record(self, reminder_id: str, title: str, list_name: str, completed: bool = False) -> StoredReminder:
        """Seed a reminder directly, bypassing access checks and call tracking."""
        self.lists.add(list_name)
        reminder = StoredReminder(reminder_id, title, list_name, completed)
        self.reminders[reminder_id] = reminder
        return reminder

    def get_record(self, reminder_id: str) -> Optional[StoredReminder]:
        return self.reminders.get(reminder_id)

    def list_names(self) -> list[str]:
        return sorted(self.lists)
