"""
Reminder Annotations

A synced checklist line carries a link to its reminder inside the Obsidian
comment region: ``%% <REMINDER-ID> -- <list name> %%``.
"""

import re
from typing import Optional

SEPARATOR = " -- "

# Reminder ID token (uppercase letters, digits, hyphens), the separator,
# then the list name up to the end of the comment.
ANNOTATION_PATTERN = re.compile(r"([A-Z0-9-]+) -- (.*)")


def decode_annotation(comment: Optional[str]) -> Optional[tuple[str, str]]:
    """
    Extract (reminder_id, list_name) from a comment.

    Free-form comments that don't follow the annotation format return None.
    Any comment containing an ID token followed by " -- " is taken as an
    annotation, even if the user wrote it.
    """
    if not comment:
        return None

    match = ANNOTATION_PATTERN.search(comment)
    if not match:
        return None

    list_name = match.group(2).strip()
    if not list_name:
        return None
    return match.group(1), list_name


def encode_annotation(reminder_id: str, list_name: str) -> str:
    """Build the comment payload linking a line to its reminder."""
    return f"{reminder_id}{SEPARATOR}{list_name}"
