from __future__ import annotations

"""Service layer for structural edits on an in-memory outline.

This module provides a UI-agnostic, testable service that encapsulates the
business logic for manipulating the flat outline held by an
:class:`~archytask.core.session.OutlineSession` (indent, reorder, clipboard,
archive/restore, section moves and selection routing).

Scope and guarantees:
- Operates purely in-memory on the session, no file I/O nor UI imports.
- Conservative behavior with boundary checks; invalid or rejected operations
  return OperationResult(success=False, ...) and never raise.
- Feasibility is decided before the history snapshot is taken, so a rejected
  operation leaves no undo entry behind.
- Selection is re-resolved by item id after every reorder; raw indices are
  never carried across a mutation.

Examples
--------
Basic usage:

    service = StructureEditingService()
    session.selection.set_single(2)
    result = service.move(session, "up")
    if not result.success:
        print(result.message)

"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Set, Tuple

from archytask.core.models import (
    INDENT_CHILD,
    INDENT_PARENT,
    NOTICE_COPIED,
    NOTICE_CUT,
    NOTICE_DUPLICATED,
    NOTICE_PASTED,
    Heading,
    Item,
    Notice,
    Todo,
    archived_notice,
    clone_item,
    clone_items,
    deleted_notice,
    restored_notice,
)
from archytask.core.outline_store import (
    adjust_orphaned_indent,
    archive_family_indices,
    block_extent,
    child_count,
    collect_effective_selection,
    expand_with_children,
    find_archive_index,
    has_ancestor_parent_in_section,
    index_of_id,
    is_archive_sentinel,
    is_child,
    is_contiguous,
    section_bounds,
)
from archytask.core.selection import SelectionCapture


__all__ = ["OperationResult", "StructureEditingService"]

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]


@dataclass(frozen=True)
class OperationResult:
    """Result of a structural editing operation.

    Attributes
    ----------
    success
        Whether the operation changed anything.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic, such as
        ``displaced_ids`` (items that shifted out of the way, for the host to
        animate) and counts.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


@dataclass
class _MovePlan:
    items: List[Item]
    moved_ids: Set[str]
    displaced: List[Item]


class StructureEditingService:
    """Encapsulates structural edit operations on an outline session.

    Every public method takes the session first. Mutating methods follow the
    same sequence: check feasibility, ``session.history.save(session)``,
    mutate, re-validate selection, then fire ``outline_changed`` and, for
    user-facing operations, ``notify``.

    Notes
    -----
    Items after an ``Archive`` sentinel heading are outside the editable
    outline: inserts are clamped before it and moves never cross it.
    """

    # -------------------------------------------------------------------------
    # Indent
    # -------------------------------------------------------------------------

    def change_indent(self, session, delta: int) -> OperationResult:
        """Shift the indent of every selected todo by *delta*.

        Applied per item in ascending order, not block-aware. An increase is
        rejected for the first item and for an item right after a heading.
        """
        logger.info("Edit: change_indent delta=%d selected=%d", delta, len(session.selection.selected))
        items = session.items
        planned: List[Tuple[Todo, int]] = []
        for index in self._valid_selected(session):
            item = items[index]
            if isinstance(item, Heading):
                continue
            new_indent = item.indent + delta
            if new_indent < INDENT_PARENT or new_indent > INDENT_CHILD or new_indent == item.indent:
                continue
            if delta > 0 and (index == 0 or isinstance(items[index - 1], Heading)):
                continue
            planned.append((item, new_indent))

        if not planned:
            return self._noop("change_indent", "Indent unchanged.", reason="policy")

        session.history.save(session)
        for item, new_indent in planned:
            item.indent = new_indent
        self._finish(session)
        logger.info("Edit OK: change_indent changed=%d", len(planned))
        return OperationResult(True, "Changed indent.", {"changed": len(planned), "ids": [i.id for i, _ in planned]})

    # -------------------------------------------------------------------------
    # Move
    # -------------------------------------------------------------------------

    def move(self, session, direction: Direction) -> OperationResult:
        """Move the active block (or a contiguous multi-selection) up or down."""
        logger.info("Edit: move direction=%s selected=%d", direction, len(session.selection.selected))
        if direction not in ("up", "down"):
            return OperationResult(False, f"Unsupported move direction '{direction}'.", {"allowed": ["up", "down"]})

        items = session.items
        selection = session.selection
        active = selection.active_index
        if not 0 <= active < len(items):
            return self._noop("move", "Nothing to move.", reason="no_active", direction=direction)
        if is_archive_sentinel(items[active]):
            return self._noop("move", "The archive heading cannot move.", reason="sentinel", direction=direction)

        multi = len(selection.selected) > 1
        if multi:
            plan = self._plan_multi_move(items, selection.sorted_indices(), direction)
        else:
            plan = self._plan_single_move(items, active, direction)
        if plan is None:
            return self._noop("move", f"Cannot move {direction}.", reason="boundary", direction=direction)

        captured = selection.capture(items)
        anchor_id = items[selection.anchor_index].id if 0 <= selection.anchor_index < len(items) else None

        session.history.save(session)
        session.items = plan.items
        if multi:
            selection.restore(plan.items, SelectionCapture(frozenset(plan.moved_ids), captured.active_id))
            anchor = index_of_id(plan.items, anchor_id)
            selection.anchor_index = anchor if anchor != -1 else selection.active_index
        else:
            selection.set_single(index_of_id(plan.items, captured.active_id))
        self._finish(session)

        displaced_ids = [i.id for i in plan.displaced]
        logger.info("Edit OK: move direction=%s moved=%d displaced=%d", direction, len(plan.moved_ids), len(displaced_ids))
        return OperationResult(
            True,
            f"Moved {direction}.",
            {"direction": direction, "moved_ids": sorted(plan.moved_ids), "displaced_ids": displaced_ids},
        )

    def _plan_single_move(self, items: List[Item], index: int, direction: Direction) -> Optional[_MovePlan]:
        item = items[index]
        block, count = block_extent(items, index)
        moved_ids = {i.id for i in block}

        if direction == "up":
            if index == 0:
                return None
            if is_child(item):
                if not is_child(items[index - 1]):
                    return None
                sibling = index - 1
            else:
                sibling = -1
                for i in range(index - 1, -1, -1):
                    candidate = items[i]
                    if isinstance(item, Heading):
                        if isinstance(candidate, Heading):
                            sibling = i
                            break
                    elif candidate.indent == INDENT_PARENT:
                        sibling = i
                        break
                if sibling == -1:
                    return None
            displaced = items[sibling:index]
            new_items = items[:sibling] + block + displaced + items[index + count:]
            return _MovePlan(new_items, moved_ids, displaced)

        next_index = index + count
        if next_index >= len(items):
            return None
        next_item = items[next_index]
        if is_archive_sentinel(next_item):
            return None
        if is_child(item):
            if not is_child(next_item):
                return None
            next_count = 1
        else:
            next_count = 1
            if isinstance(next_item, Heading) and isinstance(item, Heading):
                for i in range(next_index + 1, len(items)):
                    if isinstance(items[i], Heading):
                        break
                    next_count += 1
            elif next_item.indent == INDENT_PARENT:
                for i in range(next_index + 1, len(items)):
                    if items[i].indent == INDENT_PARENT:
                        break
                    next_count += 1
        displaced = items[next_index:next_index + next_count]
        new_items = items[:index] + displaced + block + items[next_index + next_count:]
        return _MovePlan(new_items, moved_ids, displaced)

    def _plan_multi_move(self, items: List[Item], selected: Sequence[int], direction: Direction) -> Optional[_MovePlan]:
        final = expand_with_children(selected, items)
        if not final:
            return None
        # A topmost child whose parent is also selected has ambiguous ownership
        if is_child(items[final[0]]) and any(items[i].indent == INDENT_PARENT for i in final):
            return None
        if not is_contiguous(final):
            return None

        start, count = final[0], len(final)
        moving = items[start:start + count]
        moved_ids = {i.id for i in moving}
        parent_led = items[start].indent == INDENT_PARENT

        if direction == "up":
            if start == 0:
                return None
            target = start - 1
            swap_start = target
            if parent_led:
                if is_child(items[target]):
                    for i in range(target, -1, -1):
                        if items[i].indent == INDENT_PARENT:
                            swap_start = i
                            break
            elif not is_child(items[target]):
                return None
            displaced = items[swap_start:start]
            new_items = items[:swap_start] + moving + displaced + items[start + count:]
            return _MovePlan(new_items, moved_ids, displaced)

        end = start + count
        if end >= len(items):
            return None
        if any(is_archive_sentinel(i) for i in items[end:]):
            return None
        if parent_led:
            swap_count = 1
            for i in range(end + 1, len(items)):
                if items[i].indent == INDENT_PARENT:
                    break
                swap_count += 1
        else:
            if not is_child(items[end]):
                return None
            swap_count = 1
        displaced = items[end:end + swap_count]
        new_items = items[:start] + displaced + moving + items[end + swap_count:]
        return _MovePlan(new_items, moved_ids, displaced)

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete_selected(self, session, notify: bool = True) -> OperationResult:
        """Delete the selection plus the children of every selected parent."""
        logger.info("Edit: delete_selected selected=%d", len(session.selection.selected))
        indices = self._valid_selected(session)
        if not indices:
            return self._noop("delete_selected", "Nothing selected.", reason="empty_selection")

        session.history.save(session)
        deleted_ids = self._remove_with_children(session, indices)
        self._finish(session, deleted_notice(len(deleted_ids)) if notify else None)
        logger.info("Edit OK: delete_selected deleted=%d", len(deleted_ids))
        return OperationResult(True, f"{len(deleted_ids)} item(s) deleted", {"deleted": len(deleted_ids), "ids": deleted_ids})

    def delete_item(self, session, index: int, notify: bool = True, record_history: bool = True) -> OperationResult:
        """Delete the single item at *index*.

        When a parent goes, its first child would be left without a parent, so
        it is promoted to indent 0. ``record_history=False`` lets the edit
        session drop a just-created item without a snapshot of its own.
        """
        logger.info("Edit: delete_item index=%d", index)
        items = session.items
        if not 0 <= index < len(items):
            return self._noop("delete_item", "Item not found.", reason="out_of_range", index=index)

        if record_history:
            session.history.save(session)
        removed = items.pop(index)
        if index < len(items) and is_child(items[index]) and not has_ancestor_parent_in_section(items, index):
            promoted = clone_item(items[index])
            promoted.indent = INDENT_PARENT
            items[index] = promoted
        removed_type = "parent" if removed.indent == INDENT_PARENT else "child"
        self._place_cursor(session.selection, items, index, {removed_type})
        self._finish(session, deleted_notice(1) if notify else None)
        logger.info("Edit OK: delete_item id=%s", removed.id)
        return OperationResult(True, "1 item(s) deleted", {"deleted": 1, "ids": [removed.id]})

    def _remove_with_children(self, session, indices: Iterable[int]) -> List[str]:
        items = session.items
        targets = expand_with_children(indices, items)
        removed_types = {"parent" if items[i].indent == INDENT_PARENT else "child" for i in targets}
        removed_ids = [items[i].id for i in targets]
        for i in reversed(targets):
            del items[i]
        self._place_cursor(session.selection, items, targets[0], removed_types)
        return removed_ids

    def _place_cursor(self, selection, items: Sequence[Item], reference: int, removed_types: Set[str]) -> None:
        cursor = self._cursor_after_removal(items, reference, removed_types)
        if cursor >= 0:
            selection.set_single(cursor)
        else:
            selection.clear()

    def _cursor_after_removal(self, items: Sequence[Item], reference: int, removed_types: Set[str]) -> int:
        """Where the cursor lands after items were removed at *reference*.

        Removing only parents steps off a heading. Removing only children steps
        back over headings and parents until another child (or the top) is hit.
        """
        if not items:
            return -1
        cursor = min(reference, len(items) - 1)
        if cursor < 0:
            cursor = 0
        item = items[cursor]
        if removed_types == {"parent"}:
            if isinstance(item, Heading) and cursor > 0:
                return cursor - 1
        elif removed_types == {"child"}:
            if isinstance(item, Heading) or item.indent == INDENT_PARENT:
                return self._cursor_after_removal(items, cursor - 1, set())
        return cursor

    # -------------------------------------------------------------------------
    # Clipboard
    # -------------------------------------------------------------------------

    def copy(self, session) -> OperationResult:
        """Copy the effective selection's blocks into the clipboard, ids kept."""
        logger.info("Edit: copy selected=%d", len(session.selection.selected))
        blocks = self._effective_blocks(session.items, self._valid_selected(session))
        if not blocks:
            return self._noop("copy", "Nothing to copy.", reason="empty_selection")
        session.clipboard[:] = clone_items(blocks)
        session.notify(NOTICE_COPIED)
        logger.info("Edit OK: copy items=%d", len(blocks))
        return OperationResult(True, "Copied", {"copied": len(blocks)})

    def cut(self, session) -> OperationResult:
        """Copy, then delete the selection under a single "Cut" notice."""
        logger.info("Edit: cut selected=%d", len(session.selection.selected))
        indices = self._valid_selected(session)
        blocks = self._effective_blocks(session.items, indices)
        if not blocks:
            return self._noop("cut", "Nothing to cut.", reason="empty_selection")
        session.clipboard[:] = clone_items(blocks)

        session.history.save(session)
        deleted_ids = self._remove_with_children(session, indices)
        self._finish(session, NOTICE_CUT)
        logger.info("Edit OK: cut copied=%d deleted=%d", len(blocks), len(deleted_ids))
        return OperationResult(True, "Cut", {"copied": len(blocks), "deleted": len(deleted_ids), "ids": deleted_ids})

    def paste(self, session) -> OperationResult:
        """Insert fresh clones of the clipboard after the active block."""
        logger.info("Edit: paste clipboard=%d", len(session.clipboard))
        if not session.clipboard:
            return self._noop("paste", "Clipboard is empty.", reason="empty_clipboard")

        items = session.items
        active = session.selection.active_index
        if 0 <= active < len(items):
            position = active + 1
            if items[active].indent == INDENT_PARENT:
                position += child_count(items, active)
        else:
            position = len(items)
        return self._insert_clones(session, session.clipboard, position, "paste", NOTICE_PASTED)

    def duplicate(self, session) -> OperationResult:
        """Insert copies (new ids) of the selected blocks after the last selected block."""
        logger.info("Edit: duplicate selected=%d", len(session.selection.selected))
        indices = self._valid_selected(session)
        blocks = self._effective_blocks(session.items, indices)
        if not blocks:
            return self._noop("duplicate", "Nothing to duplicate.", reason="empty_selection")
        last = indices[-1]
        position = last + 1 + child_count(session.items, last)
        return self._insert_clones(session, blocks, position, "duplicate", NOTICE_DUPLICATED)

    def _insert_clones(self, session, source: Sequence[Item], position: int, op: str, notice: Notice) -> OperationResult:
        items = session.items
        archive_index = find_archive_index(items)
        if archive_index != -1 and position > archive_index:
            position = archive_index
        clones = clone_items(source, new_ids=True)
        adjust_orphaned_indent(clones, items, position)

        session.history.save(session)
        items[position:position] = clones
        session.selection.select_range(position, len(clones))
        self._finish(session, notice)
        inserted_ids = [c.id for c in clones]
        logger.info("Edit OK: %s inserted=%d at=%d", op, len(clones), position)
        return OperationResult(True, notice.message, {"inserted_ids": inserted_ids, "position": position})

    @staticmethod
    def _effective_blocks(items: Sequence[Item], indices: Sequence[int]) -> List[Item]:
        blocks: List[Item] = []
        for root in collect_effective_selection(items, indices, exclude_headings=True):
            block, _ = block_extent(items, index_of_id(items, root.id))
            blocks.extend(block)
        return blocks

    # -------------------------------------------------------------------------
    # Archive
    # -------------------------------------------------------------------------

    def archive(self, session) -> OperationResult:
        """Move the selected blocks to the head of the archive list, checked."""
        items = session.items
        indices = self._valid_selected(session)
        if not indices and 0 <= session.selection.active_index < len(items):
            indices = [session.selection.active_index]
        logger.info("Edit: archive selected=%d", len(indices))
        roots = collect_effective_selection(items, indices, exclude_headings=True)
        if not roots:
            return self._noop("archive", "Nothing to archive.", reason="empty_selection")

        root_types = {"parent" if r.indent == INDENT_PARENT else "child" for r in roots}
        reference = indices[0]

        session.history.save(session)
        moved: List[Item] = []
        for root in reversed(roots):
            index = index_of_id(items, root.id)
            if index == -1:
                continue
            block, count = block_extent(items, index)
            del items[index:index + count]
            for item in block:
                if isinstance(item, Todo):
                    item.is_checked = True
            moved.extend(block)
        session.archived_items[0:0] = moved

        self._place_cursor(session.selection, items, reference, root_types)
        session.archive_selection.clear()
        self._finish(session, archived_notice(len(moved)))
        logger.info("Edit OK: archive moved=%d", len(moved))
        return OperationResult(True, f"{len(moved)} item(s) archived", {"archived": len(moved), "ids": [i.id for i in moved]})

    def restore(self, session) -> OperationResult:
        """Bring the selected archive families back to the end of the outline, unchecked."""
        archived = session.archived_items
        selected = [i for i in session.archive_selection.sorted_indices() if 0 <= i < len(archived)]
        logger.info("Edit: restore selected=%d", len(selected))
        if not selected:
            return self._noop("restore", "Nothing to restore.", reason="empty_selection")

        to_restore: Set[int] = set()
        for index in selected:
            to_restore.update(archive_family_indices(archived, index))

        session.history.save(session)
        restored: List[Item] = []
        for index in sorted(to_restore, reverse=True):
            item = archived.pop(index)
            if isinstance(item, Todo):
                item.is_checked = False
            restored.append(item)
        restored.reverse()

        items = session.items
        position = find_archive_index(items)
        if position == -1:
            position = len(items)
        adjust_orphaned_indent(restored, items, position)
        items[position:position] = restored

        session.selection.select_range(position, len(restored))
        session.archive_selection.clear()
        self._finish(session, restored_notice(len(restored)))
        logger.info("Edit OK: restore restored=%d at=%d", len(restored), position)
        return OperationResult(True, f"{len(restored)} item(s) restored", {"restored": len(restored), "ids": [i.id for i in restored]})

    def delete_archived(self, session) -> OperationResult:
        """Delete the selected archive entries; parents take their children along."""
        archived = session.archived_items
        selected = [i for i in session.archive_selection.sorted_indices() if 0 <= i < len(archived)]
        logger.info("Edit: delete_archived selected=%d", len(selected))
        if not selected:
            return self._noop("delete_archived", "Nothing selected.", reason="empty_selection")

        targets: Set[int] = set()
        for index in selected:
            targets.add(index)
            if archived[index].indent == INDENT_PARENT:
                for i in range(index + 1, len(archived)):
                    if archived[i].indent == INDENT_PARENT:
                        break
                    targets.add(i)

        session.history.save(session)
        ordered = sorted(targets)
        deleted_ids = [archived[i].id for i in ordered]
        for i in reversed(ordered):
            del archived[i]
        if archived:
            session.archive_selection.set_single(min(ordered[0], len(archived) - 1))
        else:
            session.archive_selection.clear()
        self._finish(session, deleted_notice(len(deleted_ids)))
        logger.info("Edit OK: delete_archived deleted=%d", len(deleted_ids))
        return OperationResult(True, f"{len(deleted_ids)} item(s) deleted", {"deleted": len(deleted_ids), "ids": deleted_ids})

    def clear_archive(self, session) -> OperationResult:
        logger.info("Edit: clear_archive archived=%d", len(session.archived_items))
        if not session.archived_items:
            return self._noop("clear_archive", "Archive is empty.", reason="empty_archive")
        session.history.save(session)
        count = len(session.archived_items)
        session.archived_items = []
        session.archive_selection.clear()
        self._finish(session)
        logger.info("Edit OK: clear_archive removed=%d", count)
        return OperationResult(True, "Archive cleared.", {"deleted": count})

    # -------------------------------------------------------------------------
    # Section moves
    # -------------------------------------------------------------------------

    def move_to_next_heading(self, session) -> OperationResult:
        """Relocate each selected block to just below the next heading."""
        return self._move_to_heading(session, "next")

    def move_to_prev_heading(self, session) -> OperationResult:
        """Relocate each selected block to just below the second heading above."""
        return self._move_to_heading(session, "prev")

    def _move_to_heading(self, session, target: Literal["next", "prev"]) -> OperationResult:
        op = f"move_to_{target}_heading"
        items = session.items
        selection = session.selection
        indices = self._valid_selected(session)
        if not indices and 0 <= selection.active_index < len(items):
            indices = [selection.active_index]
        logger.info("Edit: %s selected=%d", op, len(indices))
        roots = collect_effective_selection(items, indices, exclude_headings=True)
        if not roots:
            return self._noop(op, "Nothing to move.", reason="empty_selection")

        captured = SelectionCapture(
            frozenset(items[i].id for i in indices),
            items[selection.active_index].id if 0 <= selection.active_index < len(items) else None,
        )
        moving_ids = {r.id for r in roots}
        work = list(items)
        displaced: List[Item] = []
        moved = 0
        for root in reversed(roots):
            index = index_of_id(work, root.id)
            if index == -1:
                continue
            block, count = block_extent(work, index)
            if target == "next":
                insert = self._next_heading_slot(work, index + count)
                if insert == -1:
                    continue
                displaced.extend(i for i in work[index + count:insert] if i.id not in moving_ids)
                insert -= count
            else:
                insert = self._prev_heading_slot(work, index)
                if insert == index:
                    continue
                displaced.extend(i for i in work[insert:index] if i.id not in moving_ids)
            if is_child(root):
                promoted = clone_item(block[0])
                promoted.indent = INDENT_PARENT
                block[0] = promoted
            del work[index:index + count]
            work[insert:insert] = block
            moved += 1

        if not moved:
            return self._noop(op, "Nothing could move.", reason="no_target")

        session.history.save(session)
        session.items = work
        selection.restore(work, captured)
        self._finish(session)
        logger.info("Edit OK: %s moved=%d", op, moved)
        return OperationResult(True, "Moved to section.", {"moved": moved, "displaced_ids": [i.id for i in displaced]})

    @staticmethod
    def _next_heading_slot(items: Sequence[Item], start: int) -> int:
        """Index just after the next heading at or after *start*; -1 if none or the archive."""
        for i in range(start, len(items)):
            if isinstance(items[i], Heading):
                if is_archive_sentinel(items[i]):
                    return -1
                return i + 1
        return -1

    @staticmethod
    def _prev_heading_slot(items: Sequence[Item], index: int) -> int:
        headings = [i for i in range(index - 1, -1, -1) if isinstance(items[i], Heading)]
        if len(headings) > 1:
            return headings[1] + 1
        if headings:
            return headings[0] + 1
        return 0

    # -------------------------------------------------------------------------
    # Checked state and selection routing
    # -------------------------------------------------------------------------

    def toggle_checked(self, session) -> OperationResult:
        """Check every selected todo, or uncheck them all when none is unchecked."""
        logger.info("Edit: toggle_checked selected=%d", len(session.selection.selected))
        todos = [session.items[i] for i in self._valid_selected(session) if isinstance(session.items[i], Todo)]
        if not todos:
            return self._noop("toggle_checked", "No tasks selected.", reason="empty_selection")
        checked = any(not t.is_checked for t in todos)
        session.history.save(session)
        for todo in todos:
            todo.is_checked = checked
        self._finish(session)
        logger.info("Edit OK: toggle_checked checked=%s count=%d", checked, len(todos))
        return OperationResult(True, "Checked." if checked else "Unchecked.", {"checked": checked, "count": len(todos)})

    def select_all(self, session) -> OperationResult:
        """Select every task in the section of the active item."""
        items = session.items
        selection = session.selection
        reference = selection.active_index
        if not 0 <= reference < len(items) or isinstance(items[reference], Heading):
            reference = next((i for i, item in enumerate(items) if not isinstance(item, Heading)), -1)
            if reference == -1:
                return OperationResult(False, "No tasks to select.")
        start, end = section_bounds(items, reference)
        selection.selected = {i for i in range(start, end + 1) if not isinstance(items[i], Heading)}
        selection.active_index = reference
        selection.anchor_index = reference
        session.archive_selection.clear()
        return OperationResult(True, "Selected section.", {"count": len(selection.selected)})

    def select(self, session, index: int, toggle: bool = False, extend: bool = False,
               via_keyboard: bool = False) -> OperationResult:
        """Route a click or key selection on the active list."""
        items = session.items
        selection = session.selection
        session.archive_selection.clear()
        if not 0 <= index < len(items):
            selection.clear()
            return OperationResult(False, "Index out of range.", {"index": index})
        if toggle:
            selection.toggle(items, index)
        elif extend:
            selection.extend(items, index, via_keyboard=via_keyboard)
        else:
            selection.set_single(index)
        return OperationResult(True, "Selected.", {"selected": selection.sorted_indices()})

    def select_archived(self, session, index: int, toggle: bool = False, extend: bool = False,
                        via_keyboard: bool = False) -> OperationResult:
        """Route a selection on the archive list; the main selection is dropped."""
        archived = session.archived_items
        selection = session.archive_selection
        session.selection.clear()
        if not 0 <= index < len(archived):
            selection.clear()
            return OperationResult(False, "Index out of range.", {"index": index})
        if toggle:
            selection.toggle(archived, index)
        elif extend:
            selection.extend(archived, index, via_keyboard=via_keyboard)
        else:
            selection.set_single(index)
        return OperationResult(True, "Selected.", {"selected": selection.sorted_indices()})

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _valid_selected(session) -> List[int]:
        size = len(session.items)
        return [i for i in session.selection.sorted_indices() if 0 <= i < size]

    @staticmethod
    def _finish(session, notice: Optional[Notice] = None) -> None:
        session.selection.validate(session.items)
        session.outline_changed()
        if notice is not None:
            session.notify(notice)

    @staticmethod
    def _noop(op: str, message: str, **details: Any) -> OperationResult:
        logger.info("Edit noop: %s %s", op, " ".join(f"{k}={v}" for k, v in details.items()))
        return OperationResult(False, message, details or None)
