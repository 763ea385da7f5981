from __future__ import annotations

"""Read the Markdown outline format into active and archive item lists.

Format summary::

    ## Heading
    - [ ] parent task
        - [x] child task (tab or four spaces per level)
        ```plane
        note attached to the previous item
        ```
    ## Archive
    - [x] archived task

A heading titled ``Archive`` is not kept as an item; it switches the reader
into the archive section until another heading appears. Lines that match
none of the forms are ignored.
"""

from dataclasses import dataclass, field
import logging
import re
from typing import List, Optional

from archytask.core.models import (
    ARCHIVE_TITLE,
    INDENT_CHILD,
    Item,
    make_heading,
    make_todo,
)

__all__ = ["ParseResult", "parse_markdown", "NOTE_FENCE", "NOTE_PREFIX"]

logger = logging.getLogger(__name__)

NOTE_FENCE = "```plane"
NOTE_PREFIX = "    "

_TODO_RE = re.compile(r"^(\s*)-\s\[([ x])\]\s(.*)$")


@dataclass
class ParseResult:
    items: List[Item] = field(default_factory=list)
    archived_items: List[Item] = field(default_factory=list)


def _indent_of(prefix: str) -> int:
    if "\t" in prefix:
        level = prefix.count("\t")
    else:
        level = len(prefix) // 4
    return min(level, INDENT_CHILD)


def _strip_note_prefix(line: str) -> str:
    if line.startswith(NOTE_PREFIX):
        return line[len(NOTE_PREFIX):]
    return line.lstrip()


def parse_markdown(content: str) -> ParseResult:
    """Parse *content* and return fresh items with newly generated ids."""
    result = ParseResult()
    last_item: Optional[Item] = None
    in_archive = False
    note_lines: Optional[List[str]] = None

    # Only "\n" ends a line; splitlines() would also break on U+2028 and \x0c
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        if line.endswith("\r"):
            line = line[:-1]
        stripped = line.strip()

        if note_lines is not None:
            if stripped.startswith("```"):
                if last_item is not None:
                    last_item.note = "\n".join(note_lines)
                else:
                    logger.debug("Dropping note with no preceding item")
                note_lines = None
            else:
                note_lines.append(_strip_note_prefix(line))
            continue
        if stripped.startswith(NOTE_FENCE):
            note_lines = []
            continue

        if stripped.startswith("## "):
            title = stripped[3:].strip()
            if title == ARCHIVE_TITLE:
                in_archive = True
                continue
            in_archive = False
            last_item = make_heading(title)
            result.items.append(last_item)
            continue

        match = _TODO_RE.match(line)
        if match is None:
            continue
        prefix, mark, title = match.groups()
        todo = make_todo(title=title, indent=_indent_of(prefix), is_checked=mark == "x")
        if in_archive:
            todo.is_checked = True
            result.archived_items.append(todo)
        else:
            result.items.append(todo)
        last_item = todo

    if note_lines is not None:
        logger.warning("Unterminated note block at end of document")
    logger.debug("Parsed outline: items=%d archived=%d", len(result.items), len(result.archived_items))
    return result
