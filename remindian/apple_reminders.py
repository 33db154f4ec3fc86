"""
Apple Reminders Interface

Implements the ReminderStore protocol on top of reminders-cli
(https://github.com/keith/reminders-cli), which talks to EventKit natively.

Commands used: show-lists, show-all, new-list, add, complete, uncomplete,
edit, delete.

The show-all listing is read once and reused until a command changes
Reminders or refresh() is called.
"""

import json
import logging
import os
import subprocess
from typing import Optional

from . import config

logger = logging.getLogger(__name__)

# Errors from running reminders-cli that we report instead of raising
CLI_ERRORS = (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError)
READ_ERRORS = CLI_ERRORS + (json.JSONDecodeError,)

# Commands that only read; anything else invalidates the cached listing
READ_COMMANDS = ("show-lists", "show-all")


def normalize_apple_id(apple_id: Optional[str]) -> Optional[str]:
    """
    Normalize Apple reminder ID to plain UUID format.

    Some sources return: x-apple-reminder://UUID
    reminders-cli returns: UUID
    We standardize on: UUID
    """
    if not apple_id:
        return None
    if apple_id.startswith("x-apple-reminder://"):
        return apple_id[len("x-apple-reminder://"):]
    return apple_id


class AppleReminders:
    """
    ReminderStore backed by Apple Reminders through reminders-cli.

    Backend failures are logged and reported as False/None so a single
    broken reminder never aborts a document pass.
    """

    def __init__(self, reminders_cli_path: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize the Apple Reminders interface.

        Args:
            reminders_cli_path: Path to reminders-cli binary (env: REMINDERS_CLI_PATH)
            timeout: Seconds to wait for each reminders-cli call (env: REMINDERS_CLI_TIMEOUT)
        """
        self.reminders_cli = reminders_cli_path or config.REMINDERS_CLI_PATH
        self.timeout = timeout if timeout is not None else config.REMINDERS_CLI_TIMEOUT
        self._authorized = False
        self._listing: Optional[list[dict]] = None

    def _run_reminders_cli(self, *args: str) -> str:
        """Run reminders-cli and return output."""
        cmd = [self.reminders_cli] + list(args)
        if args[0] not in READ_COMMANDS:
            self._listing = None
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
            timeout=self.timeout,
        )
        return result.stdout

    def request_access(self) -> bool:
        """
        Check that reminders-cli is installed and allowed to read Reminders.

        The first run of reminders-cli triggers the macOS permission prompt;
        a granted result is cached for the lifetime of this object.
        """
        if self._authorized:
            return True

        if not os.path.exists(self.reminders_cli):
            logger.warning(
                f"reminders-cli not found at {self.reminders_cli}. "
                "Install it from https://github.com/keith/reminders-cli "
                "or set REMINDERS_CLI_PATH."
            )
            return False

        try:
            self._run_reminders_cli("show-lists")
        except CLI_ERRORS as e:
            logger.warning(f"Reminders access denied: {e}")
            return False

        self._authorized = True
        return True

    def list_lists(self) -> list[str]:
        """Get all reminder list names."""
        output = self._run_reminders_cli("show-lists")
        return [line.strip() for line in output.strip().split("\n") if line.strip()]

    def refresh(self) -> None:
        """Drop the cached listing so the next lookup reads Reminders again."""
        self._listing = None

    def get_all_reminders(self) -> list[dict]:
        """Get every reminder, including completed ones, as reminders-cli JSON."""
        if self._listing is None:
            output = self._run_reminders_cli("show-all", "--format", "json", "--include-completed")
            self._listing = json.loads(output) if output.strip() else []
        return self._listing

    def get_reminder_by_id(self, reminder_id: str) -> Optional[dict]:
        """
        Get a reminder by its external ID, or None if it doesn't exist.

        Raises:
            CalledProcessError, TimeoutExpired, OSError, JSONDecodeError:
            if the listing can't be read
        """
        for reminder in self.get_all_reminders():
            if normalize_apple_id(reminder.get("externalId")) == reminder_id:
                return reminder
        return None

    def ensure_list(self, list_name: str) -> None:
        """Create a reminder list if it doesn't exist yet."""
        if list_name not in self.list_lists():
            logger.info(f"Creating reminder list '{list_name}'")
            self._run_reminders_cli("new-list", list_name)

    def is_completed(self, reminder_id: str) -> bool:
        try:
            reminder = self.get_reminder_by_id(reminder_id)
        except READ_ERRORS as e:
            logger.warning(f"Could not read reminder {reminder_id}: {e}")
            return False
        if reminder is None:
            return False
        return bool(reminder.get("isCompleted", False))

    def record_exists(self, reminder_id: str) -> bool:
        """True unless the listing was read and the reminder is not in it."""
        try:
            return self.get_reminder_by_id(reminder_id) is not None
        except READ_ERRORS as e:
            logger.warning(f"Could not read reminders, assuming {reminder_id} still exists: {e}")
            return True

    def create_record(self, title: str, list_name: str) -> Optional[str]:
        """
        Create a new reminder.

        Returns:
            The created reminder's external ID, or None on failure
        """
        try:
            self.ensure_list(list_name)
            output = self._run_reminders_cli("add", list_name, title, "--format", "json")
            result = json.loads(output) if output.strip() else {}
        except READ_ERRORS as e:
            logger.error(f"Failed to create reminder '{title}' in '{list_name}': {e}")
            return None

        return normalize_apple_id(result.get("externalId"))

    def update_record(self, reminder_id: str, title: str, completed: bool) -> bool:
        """
        Set the title and completion flag of an existing reminder.

        Only the fields that differ from the current reminder are written.
        """
        try:
            current = self.get_reminder_by_id(reminder_id)
        except READ_ERRORS as e:
            logger.error(f"Could not read reminder {reminder_id}: {e}")
            return False
        if current is None:
            logger.error(f"Reminder not found with ID: {reminder_id}")
            return False

        current_list = current.get("list", "")
        try:
            if completed != bool(current.get("isCompleted", False)):
                command = "complete" if completed else "uncomplete"
                self._run_reminders_cli(command, current_list, reminder_id)

            if title != current.get("title", ""):
                self._run_reminders_cli("edit", current_list, reminder_id, title)
        except CLI_ERRORS as e:
            logger.error(f"Failed to update reminder {reminder_id}: {e}")
            return False

        return True

    def delete_record(self, reminder_id: str) -> bool:
        """Delete a reminder by ID."""
        try:
            current = self.get_reminder_by_id(reminder_id)
        except READ_ERRORS as e:
            logger.error(f"Could not read reminder {reminder_id}: {e}")
            return False
        if current is None:
            logger.error(f"Reminder not found with ID: {reminder_id}")
            return False

        try:
            self._run_reminders_cli("delete", current.get("list", ""), reminder_id)
        except CLI_ERRORS as e:
            logger.error(f"Failed to delete reminder {reminder_id}: {e}")
            return False
        return True
