"""Serialize outline lists back into the Markdown outline format."""

from __future__ import annotations

from typing import Iterable, List

from archytask.core.models import ARCHIVE_TITLE, Heading, Item, Todo
from archytask.core.parser.markdown_parser import NOTE_FENCE, NOTE_PREFIX

__all__ = ["stringify_items"]


def _todo_line(todo: Todo, checked: bool) -> str:
    mark = "x" if checked else " "
    indent = "\t" * todo.indent
    return f"{indent}- [{mark}] {todo.title}"


def _note_lines(item: Item) -> List[str]:
    if not item.note or not item.note.strip():
        return []
    lines = [NOTE_PREFIX + NOTE_FENCE]
    lines.extend(NOTE_PREFIX + line for line in item.note.split("\n"))
    lines.append(NOTE_PREFIX + "```")
    return lines


def stringify_items(items: Iterable[Item], archived_items: Iterable[Item] = ()) -> str:
    """Render *items* followed by a trailing ``## Archive`` section.

    The archive section is written only when *archived_items* is non-empty;
    its todos are always written checked. Every line ends with a newline.
    """
    lines: List[str] = []
    for item in items:
        if isinstance(item, Heading):
            lines.append(f"## {item.title}")
        else:
            lines.append(_todo_line(item, item.is_checked))
        lines.extend(_note_lines(item))

    archived = list(archived_items)
    if archived:
        lines.append(f"## {ARCHIVE_TITLE}")
        for item in archived:
            if isinstance(item, Todo):
                lines.append(_todo_line(item, True))
            lines.extend(_note_lines(item))

    return "".join(line + "\n" for line in lines)
