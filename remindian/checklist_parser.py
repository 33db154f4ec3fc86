"""
Checklist Parser

Recognizes Markdown checklist lines of the form

    - [ ] Task text  %% optional comment %%

and writes items back in canonical form. Every other line of a document is
ignored by the parser and left alone by the rewriter.
"""

import re
from dataclasses import replace
from typing import Optional

from .annotation import decode_annotation
from .models import ChecklistItem

DEFAULT_LIST = "remindian"

# Pattern enforces:
# - optional leading indentation (spaces/tabs)
# - hyphen, exactly one space, then [], [ ], [x] or [X]
# - exactly one space after ] before the title
# - title runs until an optional Obsidian comment (%% ... %%) or line end
# - optional spaces/tabs before the opening %%, and at the end of the line
# An unclosed %% makes the whole line fail to match.
CHECKLIST_PATTERN = re.compile(
    r"^[\t ]*- \[(?P<token>[xX ]?)\] "
    r"(?P<title>(?:(?!%%).)*?)"
    r"(?:[\t ]*%%(?P<comment>.*?)%%)?"
    r"[\t ]*$"
)

INDENT_PATTERN = re.compile(r"^[\t ]*")
LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


def split_lines(content: str) -> list[str]:
    """Split a document on any line terminator, keeping a trailing empty line."""
    return LINE_BREAK_PATTERN.split(content)


def parse_line(line: str, list_name: str = DEFAULT_LIST, line_number: int = 1) -> Optional[ChecklistItem]:
    """
    Parse a single line.

    Returns None when the line is not a checklist line or its title is blank.
    """
    match = CHECKLIST_PATTERN.match(line)
    if not match:
        return None

    title = match.group("title").strip()
    if not title:
        return None

    comment = match.group("comment")
    if comment is not None:
        comment = comment.strip()

    item = ChecklistItem(
        raw_line=line,
        checked=match.group("token") in ("x", "X"),
        title=title,
        comment=comment,
        line_number=line_number,
        list_name=list_name,
    )

    link = decode_annotation(comment)
    if link:
        item = replace(item, external_id=link[0], external_list=link[1])
    return item


def parse_lines(content: str, list_name: str = DEFAULT_LIST) -> list[ChecklistItem]:
    """Parse every checklist line of a document, in line order."""
    items = []
    for idx, line in enumerate(split_lines(content)):
        item = parse_line(line, list_name=list_name, line_number=idx + 1)
        if item:
            items.append(item)
    return items


def leading_indent(line: str) -> str:
    """Return the run of spaces/tabs a line starts with."""
    return INDENT_PATTERN.match(line).group(0)


def encode_item(item: ChecklistItem) -> str:
    """
    Render an item as a canonical checklist line.

    Indentation is taken from the original line; everything else is
    normalized ([] becomes [ ], two spaces before the comment).
    """
    status = "[x]" if item.checked else "[ ]"
    line = f"{leading_indent(item.raw_line)}- {status} {item.title}"
    if item.comment is not None:
        line += f"  %% {item.comment} %%"
    return line
