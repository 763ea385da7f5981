from __future__ import annotations

"""Selection state for one outline list.

A session keeps two independent instances: one for the active list and one
for the archive list. Indices are never held across an operation boundary;
structural edits capture the selection as item ids first and re-derive the
indices afterwards with :meth:`SelectionState.restore`.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Set

from archytask.core.models import Heading, Item

__all__ = ["SelectionState", "SelectionCapture"]


@dataclass(frozen=True)
class SelectionCapture:
    """Selection expressed as item ids, independent of list positions."""

    selected_ids: FrozenSet[str]
    active_id: Optional[str]


@dataclass
class SelectionState:
    """Active/anchor/selected indices for a single list.

    Attributes
    ----------
    active_index
        Focused item, -1 when nothing is focused.
    anchor_index
        Origin of range selection, -1 when unset.
    selected
        Selected indices. Storage is unordered; use :meth:`sorted_indices`.
    """

    active_index: int = -1
    anchor_index: int = -1
    selected: Set[int] = field(default_factory=set)

    # ------------------------------------------------------------------ queries

    @property
    def is_empty(self) -> bool:
        return not self.selected

    def sorted_indices(self) -> List[int]:
        return sorted(self.selected)

    def copy(self) -> "SelectionState":
        return SelectionState(self.active_index, self.anchor_index, set(self.selected))

    # -------------------------------------------------------------- transitions

    def clear(self) -> None:
        self.selected.clear()
        self.active_index = -1
        self.anchor_index = -1

    def set_single(self, index: int) -> None:
        self.selected.clear()
        if index >= 0:
            self.selected.add(index)
        self.active_index = index
        self.anchor_index = index

    def select_range(self, start: int, count: int) -> None:
        """Select ``count`` items from ``start``; ``start`` becomes active and anchor."""
        self.selected = set(range(start, start + count))
        self.active_index = start if count > 0 else -1
        self.anchor_index = self.active_index

    def extend(self, items: Sequence[Item], index: int, via_keyboard: bool = False) -> None:
        """Range-select from the anchor to *index*, never including headings.

        Keyboard extension replaces the selection with the range. Mouse
        extension adds to the existing selection and stops the range before
        the first heading met between the anchor and *index*.
        """
        if not 0 <= index < len(items):
            self.clear()
            return

        if via_keyboard:
            if self.anchor_index == -1:
                self.anchor_index = index
            start, end = sorted((self.anchor_index, index))
            self.selected = {i for i in range(start, end + 1) if not isinstance(items[i], Heading)}
            self.active_index = index
            return

        if self.anchor_index == -1:
            self.anchor_index = min(self.selected) if self.selected else index
        if 0 <= self.anchor_index < len(items) and isinstance(items[self.anchor_index], Heading):
            self.selected.discard(self.anchor_index)

        endpoint = self._endpoint_before_heading(items, index)
        start, end = sorted((self.anchor_index, endpoint))
        for i in range(start, end + 1):
            if not isinstance(items[i], Heading):
                self.selected.add(i)
        self.active_index = endpoint

    def _endpoint_before_heading(self, items: Sequence[Item], target: int) -> int:
        anchor = self.anchor_index
        if anchor < target:
            for i in range(anchor + 1, target + 1):
                if isinstance(items[i], Heading):
                    return i - 1
        elif anchor > target:
            for i in range(anchor - 1, target - 1, -1):
                if isinstance(items[i], Heading):
                    return i + 1
        return target

    def toggle(self, items: Sequence[Item], index: int) -> None:
        """Add or remove *index*; headings cannot join a multi-selection."""
        if not 0 <= index < len(items):
            self.clear()
            return
        if isinstance(items[index], Heading):
            self.set_single(index)
            return
        if index in self.selected:
            self.selected.discard(index)
            if self.active_index == index:
                self.active_index = -1
        else:
            self.selected = {
                i for i in self.selected if 0 <= i < len(items) and not isinstance(items[i], Heading)
            }
            self.selected.add(index)
            self.active_index = index
            self.anchor_index = index

    # ------------------------------------------------------ id-based re-resolve

    def capture(self, items: Sequence[Item]) -> SelectionCapture:
        ids = frozenset(items[i].id for i in self.selected if 0 <= i < len(items))
        active_id = items[self.active_index].id if 0 <= self.active_index < len(items) else None
        return SelectionCapture(selected_ids=ids, active_id=active_id)

    def restore(self, items: Sequence[Item], captured: SelectionCapture) -> None:
        """Re-derive indices from ids against a reordered or shortened list.

        Ids no longer present are dropped. When the active id is gone the
        active index is left as is; callers follow up with :meth:`validate`.
        """
        self.selected = {i for i, item in enumerate(items) if item.id in captured.selected_ids}
        if captured.active_id is not None:
            for i, item in enumerate(items):
                if item.id == captured.active_id:
                    self.active_index = i
                    break

    # --------------------------------------------------------------- validation

    def validate(self, items: Sequence[Item]) -> None:
        if self.active_index >= len(items):
            self.clear()

    def revalidate_after_history(self, items: Sequence[Item]) -> None:
        """Collapse to the (clamped) active item after the list was swapped."""
        if self.active_index >= len(items):
            self.active_index = len(items) - 1
        self.selected.clear()
        if self.active_index >= 0:
            self.selected.add(self.active_index)
            self.anchor_index = self.active_index
        else:
            self.anchor_index = -1

    def drop_out_of_range(self, items: Sequence[Item]) -> None:
        """Archive-list variant of history revalidation: keep in-range picks."""
        if self.active_index >= len(items):
            self.active_index = len(items) - 1
        self.selected = {i for i in self.selected if i < len(items)}
        if self.active_index >= 0:
            self.anchor_index = self.active_index
        elif self.selected:
            self.active_index = min(self.selected)
            self.anchor_index = self.active_index
        else:
            self.anchor_index = -1
