from __future__ import annotations

"""Undo/redo snapshot management for an outline session.

This service is UI-agnostic and performs pure in-memory history tracking of
the active and archive lists of an :class:`~archytask.core.session.OutlineSession`.
Snapshots are deep copies of both lists taken *before* a mutation.

Design principles
-----------------
- No UI imports and no I/O (filesystem/console).
- Snapshots are immutable once stored.
- The redo stack is cleared on every new save.
- Memory usage controlled by a max_history policy (trim oldest).
- An ``applying`` guard makes :meth:`UndoService.save` a no-op while an undo
  or redo is swapping lists, so nested snapshots cannot corrupt the stacks.

Notes
-----
The service only requires the context to expose ``items``,
``archived_items``, ``selection`` and ``archive_selection``; tests may pass any
object with that shape.
"""

from typing import List

from archytask.core.models import OutlineSnapshot

__all__ = ["UndoService", "DEFAULT_MAX_HISTORY"]

DEFAULT_MAX_HISTORY = 50


class UndoService:
    """Manage undo/redo stacks for an outline session.

    Parameters
    ----------
    max_history : int, default=50
        Maximum number of undo snapshots to keep. Oldest entries are discarded
        when the capacity is exceeded. Values lower than 1 are coerced to 1.

    Examples
    --------
    >>> svc = UndoService()
    >>> svc.save(session)      # before mutating session.items
    >>> session.items.pop()
    >>> svc.undo(session)      # restores the saved lists
    True
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY) -> None:
        self._max_history: int = max(1, int(max_history))
        self._past: List[OutlineSnapshot] = []
        self._future: List[OutlineSnapshot] = []
        self._applying: bool = False

    # --------------------------------------------------------------------- API

    @property
    def max_history(self) -> int:
        return self._max_history

    @property
    def is_applying(self) -> bool:
        return self._applying

    def save(self, context) -> None:
        """Capture the current lists onto the undo stack.

        No-op while an undo/redo is being applied. Clears the redo stack and
        drops the oldest snapshot once ``max_history`` is exceeded.
        """
        if self._applying:
            return
        self._past.append(self._create_snapshot(context))
        self._trim(self._past)
        self._future.clear()

    def pop_last(self) -> None:
        """Discard the newest undo entry without restoring it.

        Used to cancel a just-created item so that it leaves no undo trace.
        """
        if self._past:
            self._past.pop()

    def undo(self, context) -> bool:
        """Restore the previous state into *context*.

        The current state is pushed onto the redo stack first. Returns False
        when there is nothing to undo or an undo/redo is already running.
        """
        if self._applying or not self._past:
            return False
        self._applying = True
        try:
            self._future.append(self._create_snapshot(context))
            self._restore_snapshot_into_context(context, self._past.pop())
            return True
        finally:
            self._applying = False

    def redo(self, context) -> bool:
        """Re-apply a state that was previously undone."""
        if self._applying or not self._future:
            return False
        self._applying = True
        try:
            self._past.append(self._create_snapshot(context))
            self._trim(self._past)
            self._restore_snapshot_into_context(context, self._future.pop())
            return True
        finally:
            self._applying = False

    def can_undo(self) -> bool:
        return bool(self._past)

    def can_redo(self) -> bool:
        return bool(self._future)

    def clear(self) -> None:
        """Clear both undo and redo histories."""
        self._past.clear()
        self._future.clear()

    def __len__(self) -> int:
        return len(self._past)

    def redo_len(self) -> int:
        return len(self._future)

    # --------------------------------------------------------------- Internals

    def _trim(self, stack: List[OutlineSnapshot]) -> None:
        overflow = len(stack) - self._max_history
        if overflow > 0:
            del stack[0:overflow]

    @staticmethod
    def _create_snapshot(context) -> OutlineSnapshot:
        return OutlineSnapshot.capture(context.items, context.archived_items)

    @staticmethod
    def _restore_snapshot_into_context(context, snap: OutlineSnapshot) -> None:
        """Swap both lists into *context* and revalidate both selections.

        Lists are rebuilt from the snapshot before being assigned, so the
        context never observes a half-restored state.
        """
        items, archived_items = snap.materialize()
        context.items = items
        context.archived_items = archived_items
        context.selection.revalidate_after_history(items)
        context.archive_selection.drop_out_of_range(archived_items)
