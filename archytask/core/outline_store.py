from __future__ import annotations

"""Structural queries over the flat outline list.

The outline is a flat ``List[Item]`` in display order. Hierarchy is implied by
position: a heading opens a section, an indent-0 todo is a parent, and the
indent-1 todos directly after it are its children. All helpers here are pure
and tolerate invalid indices (they return neutral values rather than raising).
"""

from typing import Iterable, List, Optional, Sequence, Set, Tuple

from archytask.core.models import (
    ARCHIVE_TITLE,
    INDENT_CHILD,
    INDENT_PARENT,
    Heading,
    Item,
    Todo,
    clamp_indent,
)

__all__ = [
    "INDENT_PARENT",
    "INDENT_CHILD",
    "ARCHIVE_TITLE",
    "clamp_indent",
    "is_heading",
    "is_parent",
    "is_child",
    "is_archive_sentinel",
    "find_archive_index",
    "child_count",
    "block_extent",
    "has_ancestor_parent_in_section",
    "is_child_of_selected_parent",
    "collect_effective_selection",
    "adjust_orphaned_indent",
    "expand_with_children",
    "is_contiguous",
    "section_bounds",
    "archive_family_indices",
    "index_of_id",
]


def is_heading(item: Optional[Item]) -> bool:
    return isinstance(item, Heading)


def is_parent(item: Optional[Item]) -> bool:
    """True for an indent-0 todo."""
    return isinstance(item, Todo) and item.indent == INDENT_PARENT


def is_child(item: Optional[Item]) -> bool:
    return isinstance(item, Todo) and item.indent == INDENT_CHILD


def is_archive_sentinel(item: Optional[Item]) -> bool:
    return is_heading(item) and item.title == ARCHIVE_TITLE


def find_archive_index(items: Sequence[Item]) -> int:
    for i, item in enumerate(items):
        if is_archive_sentinel(item):
            return i
    return -1


def index_of_id(items: Sequence[Item], item_id: Optional[str]) -> int:
    if item_id is None:
        return -1
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return -1


def _valid(items: Sequence[Item], index: int) -> bool:
    return 0 <= index < len(items)


def child_count(items: Sequence[Item], parent_index: int) -> int:
    """Number of contiguous indent-1 items owned by the parent at *parent_index*."""
    if not _valid(items, parent_index) or not is_parent(items[parent_index]):
        return 0
    count = 0
    for item in items[parent_index + 1:]:
        if not is_child(item):
            break
        count += 1
    return count


def block_extent(items: Sequence[Item], index: int) -> Tuple[List[Item], int]:
    """Return ``(block_items, count)`` for the block rooted at *index*.

    - heading: itself plus every item up to the next heading
    - parent: itself plus its children
    - child: itself alone
    """
    if not _valid(items, index):
        return [], 0
    root = items[index]
    count = 1
    if is_heading(root):
        for item in items[index + 1:]:
            if is_heading(item):
                break
            count += 1
    elif root.indent == INDENT_PARENT:
        count += child_count(items, index)
    return list(items[index:index + count]), count


def has_ancestor_parent_in_section(items: Sequence[Item], position: int) -> bool:
    """True when an indent-0 todo sits above *position* within the same section."""
    for i in range(min(position, len(items)) - 1, -1, -1):
        item = items[i]
        if is_heading(item):
            return False
        if item.indent == INDENT_PARENT:
            return True
    return False


def _parent_index_of(items: Sequence[Item], child_index: int) -> int:
    for i in range(child_index - 1, -1, -1):
        item = items[i]
        if is_heading(item):
            return -1
        if item.indent == INDENT_PARENT:
            return i
    return -1


def is_child_of_selected_parent(items: Sequence[Item], child_index: int, selected: Iterable[int]) -> bool:
    if not _valid(items, child_index) or not is_child(items[child_index]):
        return False
    parent_index = _parent_index_of(items, child_index)
    return parent_index != -1 and parent_index in set(selected)


def collect_effective_selection(items: Sequence[Item], selected: Iterable[int],
                                exclude_headings: bool = True) -> List[Item]:
    """Selected items in ascending order, minus children already carried by a selected parent."""
    selected_set: Set[int] = set(selected)
    result: List[Item] = []
    for index in sorted(selected_set):
        if not _valid(items, index):
            continue
        item = items[index]
        if exclude_headings and is_heading(item):
            continue
        if is_child(item) and is_child_of_selected_parent(items, index, selected_set):
            continue
        result.append(item)
    return result


def adjust_orphaned_indent(to_insert: List[Item], items: Sequence[Item], position: int) -> None:
    """Promote the first inserted item to indent 0 if it would have no parent above it.

    Mutates ``to_insert[0]`` in place; callers pass freshly cloned items.
    """
    if not to_insert or not is_child(to_insert[0]):
        return
    if position <= 0 or not has_ancestor_parent_in_section(items, position):
        to_insert[0].indent = INDENT_PARENT


def expand_with_children(indices: Iterable[int], items: Sequence[Item]) -> List[int]:
    """Add the children of every selected parent; return sorted indices."""
    expanded: Set[int] = set()
    for index in indices:
        if not _valid(items, index):
            continue
        expanded.add(index)
        if is_parent(items[index]):
            expanded.update(range(index + 1, index + 1 + child_count(items, index)))
    return sorted(expanded)


def is_contiguous(indices: Sequence[int]) -> bool:
    return all(b == a + 1 for a, b in zip(indices, indices[1:]))


def section_bounds(items: Sequence[Item], index: int) -> Tuple[int, int]:
    """Return ``(start, end)`` inclusive bounds of the section content around *index*.

    Bounds exclude the opening and closing headings. An empty section yields
    ``start > end``.
    """
    start = 0
    for i in range(index, -1, -1):
        if is_heading(items[i]):
            start = i + 1
            break
    end = len(items) - 1
    for i in range(index + 1, len(items)):
        if is_heading(items[i]):
            end = i - 1
            break
    return start, end


def archive_family_indices(archived_items: Sequence[Item], index: int) -> List[int]:
    """Indices restored together when the archive entry at *index* is restored.

    The archive list carries no headings, so families are delimited by indent
    only: a parent brings all its children, a child brings its parent and all
    siblings, and a child with no parent above comes back alone.
    """
    if not _valid(archived_items, index):
        return []
    parent_index = index
    if archived_items[index].indent != INDENT_PARENT:
        parent_index = -1
        for i in range(index - 1, -1, -1):
            if archived_items[i].indent == INDENT_PARENT:
                parent_index = i
                break
        if parent_index == -1:
            return [index]
    family = [parent_index]
    for i in range(parent_index + 1, len(archived_items)):
        if archived_items[i].indent == INDENT_PARENT:
            break
        family.append(i)
    return family
