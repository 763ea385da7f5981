from __future__ import annotations

"""Title editing state machine (idle, editing-existing, editing-new).

Only one item can be in editing state at a time. A new item is inserted with
an empty title and a history snapshot already taken; abandoning it (empty
commit or cancel) deletes it again and discards that snapshot with
``UndoService.pop_last`` so the round trip leaves no undo trace.
"""

import logging
from typing import Literal, Optional

from archytask.core.models import Heading, Item, make_heading, make_todo
from archytask.core.outline_store import (
    INDENT_CHILD,
    INDENT_PARENT,
    adjust_orphaned_indent,
    clamp_indent,
    find_archive_index,
    index_of_id,
    is_child,
    is_parent,
)
from archytask.core.services.structure_editing_service import OperationResult, StructureEditingService

__all__ = ["EditSessionService"]

logger = logging.getLogger(__name__)


class EditSessionService:
    """Begin, commit and cancel title edits on a session.

    Parameters
    ----------
    structure_service
        Used to delete items whose title was left empty. A default
        :class:`StructureEditingService` is created when omitted.
    """

    def __init__(self, structure_service: Optional[StructureEditingService] = None) -> None:
        self._structure = structure_service or StructureEditingService()

    def begin(self, session, item_id: str, is_new: bool = False) -> OperationResult:
        """Start editing *item_id*, resolving any other edit in progress first."""
        logger.info("Edit: begin_edit id=%s new=%s", item_id, is_new)
        state = session.edit
        if state.is_editing and state.item_id == item_id:
            # Re-focusing the item being edited keeps its new/existing state
            return OperationResult(True, "Editing.", {"item_id": item_id, "is_new": state.is_new})
        if state.is_editing:
            current = index_of_id(session.items, state.item_id)
            self.commit(session, session.items[current].title if current != -1 else "")

        if index_of_id(session.items, item_id) == -1:
            logger.info("Edit noop: begin_edit unknown id=%s", item_id)
            return OperationResult(False, "Item not found.", {"item_id": item_id})
        state.item_id = item_id
        state.is_new = is_new
        return OperationResult(True, "Editing.", {"item_id": item_id, "is_new": is_new})

    def commit(self, session, new_title: Optional[str]) -> OperationResult:
        """Finish the current edit with *new_title* and return to idle."""
        state = session.edit
        if not state.is_editing:
            return OperationResult(False, "No edit in progress.")
        item_id, is_new = state.item_id, state.is_new
        state.reset()
        logger.info("Edit: commit_edit id=%s new=%s", item_id, is_new)

        index = index_of_id(session.items, item_id)
        if index == -1:
            logger.info("Edit noop: commit_edit item gone id=%s", item_id)
            return OperationResult(False, "Item not found.", {"item_id": item_id})

        title = (new_title or "").strip()
        item = session.items[index]
        if not title:
            if is_new:
                return self._discard_new(session, index)
            return self._structure.delete_item(session, index, notify=True)

        if title == item.title:
            logger.info("Edit noop: commit_edit unchanged id=%s", item_id)
            return OperationResult(False, "Title unchanged.", {"item_id": item_id})

        # A new item was snapshotted when it was created
        if not is_new:
            session.history.save(session)
        item.title = title
        session.outline_changed()
        logger.info("Edit OK: commit_edit id=%s", item_id)
        return OperationResult(True, "Title updated.", {"item_id": item_id, "title": title})

    def cancel(self, session) -> OperationResult:
        state = session.edit
        if not state.is_editing:
            return OperationResult(False, "No edit in progress.")
        item_id, is_new = state.item_id, state.is_new
        state.reset()
        logger.info("Edit: cancel_edit id=%s new=%s", item_id, is_new)
        index = index_of_id(session.items, item_id)
        if is_new and index != -1:
            return self._discard_new(session, index)
        return OperationResult(True, "Edit cancelled.", {"item_id": item_id})

    def add_item(
        self,
        session,
        kind: Literal["todo", "heading"] = "todo",
        insert_index: Optional[int] = None,
        indent: Optional[int] = None,
    ) -> OperationResult:
        """Insert an empty item and start editing it as a new item.

        Todos go after the active item. Headings go before it, or before the
        parent of an active child. Without an active item both go to the end.
        """
        logger.info("Edit: add_item kind=%s at=%s", kind, insert_index)
        if session.edit.is_editing:
            self.commit(session, self._editing_title(session))

        items = session.items
        active = session.selection.active_index
        has_active = 0 <= active < len(items)
        if insert_index is None:
            insert_index = self._default_position(items, active, kind) if has_active else len(items)
        insert_index = max(0, min(insert_index, len(items)))

        archive_index = find_archive_index(items)
        if archive_index != -1 and insert_index > archive_index:
            if kind == "heading":
                logger.info("Edit noop: add_item heading after archive at=%d", insert_index)
                return OperationResult(False, "Cannot add a heading inside the archive.", {"position": insert_index})
            insert_index = archive_index

        new_item: Item
        if kind == "heading":
            new_item = make_heading()
        else:
            if indent is None:
                indent = self._smart_indent(items, active) if has_active else INDENT_PARENT
            new_item = make_todo(indent=clamp_indent(indent))
            adjust_orphaned_indent([new_item], items, insert_index)

        session.history.save(session)
        items.insert(insert_index, new_item)
        session.selection.set_single(insert_index)
        session.edit.item_id = new_item.id
        session.edit.is_new = True
        session.outline_changed()
        logger.info("Edit OK: add_item kind=%s at=%d id=%s", kind, insert_index, new_item.id)
        return OperationResult(True, "Item added.", {"item_id": new_item.id, "position": insert_index})

    def edit_note(self, session, index: int, note: Optional[str]) -> OperationResult:
        """Replace the note of the item at *index*; whitespace-only clears it."""
        logger.info("Edit: edit_note index=%d", index)
        items = session.items
        if not 0 <= index < len(items):
            logger.info("Edit noop: edit_note out_of_range index=%d", index)
            return OperationResult(False, "Item not found.", {"index": index})
        value = note or ""
        if not value.strip():
            value = ""
        item = items[index]
        if value == item.note:
            return OperationResult(False, "Note unchanged.", {"item_id": item.id})
        session.history.save(session)
        item.note = value
        session.outline_changed()
        logger.info("Edit OK: edit_note id=%s", item.id)
        return OperationResult(True, "Note updated.", {"item_id": item.id})

    # ------------------------------------------------------------------ helpers

    def _discard_new(self, session, index: int) -> OperationResult:
        self._structure.delete_item(session, index, notify=False, record_history=False)
        session.history.pop_last()
        logger.info("Edit OK: discard_new_item index=%d", index)
        return OperationResult(True, "New item discarded.", {"discarded": True})

    @staticmethod
    def _editing_title(session) -> str:
        index = index_of_id(session.items, session.edit.item_id)
        return session.items[index].title if index != -1 else ""

    @staticmethod
    def _default_position(items, active: int, kind: str) -> int:
        if kind != "heading":
            return active + 1
        if not is_child(items[active]):
            return active
        for i in range(active - 1, -1, -1):
            if isinstance(items[i], Heading) or items[i].indent == INDENT_PARENT:
                return i
        return 0

    @staticmethod
    def _smart_indent(items, active: int) -> int:
        current = items[active]
        if is_parent(current):
            if active + 1 < len(items) and is_child(items[active + 1]):
                return INDENT_CHILD
            return INDENT_PARENT
        if is_child(current):
            return INDENT_CHILD
        return INDENT_PARENT
