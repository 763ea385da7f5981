from __future__ import annotations

"""Shared data structures used across the ArchyTask core.

This package exposes the outline item variant and value objects used by the
services and other core layers. It is intentionally free of UI / I/O code so
that the contained objects can be reused in any context (unit-tests, CLI,
host sidebars, etc.).

Items are a tagged variant: ``Item = Union[Todo, Heading]``. Consumers branch
with ``isinstance`` on the two concrete classes; there is no shared base class.
"""

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, List, Literal, Optional, Tuple, Union
import uuid

__all__ = [
    "ItemType",
    "Todo",
    "Heading",
    "Item",
    "INDENT_PARENT",
    "INDENT_CHILD",
    "ARCHIVE_TITLE",
    "clamp_indent",
    "new_item_id",
    "make_todo",
    "make_heading",
    "clone_item",
    "clone_items",
    "item_to_dict",
    "item_from_dict",
    "OutlineSnapshot",
    "Notice",
    "NOTICE_COPIED",
    "NOTICE_CUT",
    "NOTICE_PASTED",
    "NOTICE_DUPLICATED",
    "NOTICE_UNDO",
    "NOTICE_REDO",
    "deleted_notice",
    "archived_notice",
    "restored_notice",
]

ItemType = Literal["todo", "heading"]

INDENT_PARENT = 0
INDENT_CHILD = 1
ARCHIVE_TITLE = "Archive"


def clamp_indent(value: int) -> int:
    """Clamp an indent level into the supported ``{0, 1}`` range."""
    try:
        value = int(value)
    except (TypeError, ValueError):
        return INDENT_PARENT
    return max(INDENT_PARENT, min(INDENT_CHILD, value))


def new_item_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Todo:
    """A task line. ``indent`` 0 is a parent task, 1 a subtask."""

    id: str
    title: str = ""
    indent: int = INDENT_PARENT
    is_checked: bool = False
    note: str = ""

    type: ClassVar[ItemType] = "todo"

    def __post_init__(self) -> None:
        self.indent = clamp_indent(self.indent)


@dataclass
class Heading:
    """A section heading. Headings always sit at indent 0."""

    id: str
    title: str = ""
    note: str = ""

    type: ClassVar[ItemType] = "heading"

    @property
    def indent(self) -> int:
        return INDENT_PARENT


Item = Union[Todo, Heading]


def make_todo(title: str = "", indent: int = INDENT_PARENT, is_checked: bool = False,
              note: str = "", item_id: Optional[str] = None) -> Todo:
    return Todo(id=item_id or new_item_id(), title=title, indent=indent,
                is_checked=is_checked, note=note)


def make_heading(title: str = "", note: str = "", item_id: Optional[str] = None) -> Heading:
    return Heading(id=item_id or new_item_id(), title=title, note=note)


def clone_item(item: Item, new_id: bool = False) -> Item:
    """Return an independent copy of *item*, optionally with a fresh id."""
    if new_id:
        return replace(item, id=new_item_id())
    return replace(item)


def clone_items(items, new_ids: bool = False) -> List[Item]:
    return [clone_item(i, new_id=new_ids) for i in items]


def item_to_dict(item: Item) -> Dict[str, Any]:
    """Serialize an item to the JSON shape exchanged with host sidebars."""
    data: Dict[str, Any] = {
        "id": item.id,
        "type": item.type,
        "title": item.title,
        "indent": item.indent,
        "note": item.note,
    }
    if isinstance(item, Todo):
        data["isChecked"] = item.is_checked
    return data


def item_from_dict(data: Dict[str, Any]) -> Item:
    """Build an item from its host JSON shape.

    Missing ids are generated; unknown ``type`` values are read as todos.
    """
    item_id = str(data.get("id") or new_item_id())
    title = str(data.get("title") or "")
    note = str(data.get("note") or "")
    if data.get("type") == "heading":
        return Heading(id=item_id, title=title, note=note)
    return Todo(
        id=item_id,
        title=title,
        indent=data.get("indent", INDENT_PARENT),
        is_checked=bool(data.get("isChecked", False)),
        note=note,
    )


@dataclass(frozen=True)
class OutlineSnapshot:
    """Immutable copy of the active and archive lists.

    Items are cloned on the way in and again on the way out, so neither the
    stored snapshot nor a restored list can alias live session objects.
    """

    items: Tuple[Item, ...] = field(default_factory=tuple)
    archived_items: Tuple[Item, ...] = field(default_factory=tuple)

    @classmethod
    def capture(cls, items, archived_items) -> "OutlineSnapshot":
        return cls(items=tuple(clone_items(items)), archived_items=tuple(clone_items(archived_items)))

    def materialize(self) -> Tuple[List[Item], List[Item]]:
        return clone_items(self.items), clone_items(self.archived_items)


@dataclass(frozen=True)
class Notice:
    """User-facing notification emitted after an operation."""

    message: str
    icon: str


NOTICE_COPIED = Notice("Copied", "copy")
NOTICE_CUT = Notice("Cut", "cut")
NOTICE_PASTED = Notice("Pasted", "paste")
NOTICE_DUPLICATED = Notice("Duplicated", "copy")
NOTICE_UNDO = Notice("Undo", "discard")
NOTICE_REDO = Notice("Redo", "redo")


def deleted_notice(count: int) -> Notice:
    return Notice(f"{count} item(s) deleted", "trash")


def archived_notice(count: int) -> Notice:
    return Notice(f"{count} item(s) archived", "archive")


def restored_notice(count: int) -> Notice:
    return Notice(f"{count} item(s) restored", "discard")
