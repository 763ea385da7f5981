from __future__ import annotations

"""Outline session: the single owner of all mutable engine state.

One :class:`OutlineSession` holds both lists, both selection states, the
clipboard, the history engine, the in-progress edit and the event listeners.
Services receive the session explicitly, so several independent sessions can
coexist (one per open sidebar, or one per test).
"""

from dataclasses import dataclass
import logging
from typing import Any, Callable, Iterable, List, Optional

from archytask.core.models import (
    NOTICE_REDO,
    NOTICE_UNDO,
    Heading,
    Item,
    Notice,
    OutlineSnapshot,
    Todo,
)
from archytask.core.models.settings import SidebarSettings
from archytask.core.selection import SelectionState
from archytask.core.services.undo_service import UndoService

__all__ = ["OutlineSession", "EditState", "ChangedListener", "NotifyListener"]

logger = logging.getLogger(__name__)

ChangedListener = Callable[[List[Item], List[Item]], Any]
NotifyListener = Callable[[str, str], Any]


@dataclass
class EditState:
    """Which item (if any) is having its title edited."""

    item_id: Optional[str] = None
    is_new: bool = False

    @property
    def is_editing(self) -> bool:
        return self.item_id is not None

    def reset(self) -> None:
        self.item_id = None
        self.is_new = False


class OutlineSession:
    """Explicit container for one outline and its interaction state.

    Parameters
    ----------
    items, archived_items
        Initial lists; they are copied and normalized like
        :meth:`load_outline` does.
    settings
        Sidebar settings; defaults are used when omitted.
    history
        History engine; a new :class:`UndoService` sized from *settings* is
        created when omitted.
    clipboard
        Optional shared clipboard list, so several sessions may share one
        buffer. A private list is used when omitted.
    """

    def __init__(
        self,
        items: Optional[Iterable[Item]] = None,
        archived_items: Optional[Iterable[Item]] = None,
        settings: Optional[SidebarSettings] = None,
        history: Optional[UndoService] = None,
        clipboard: Optional[List[Item]] = None,
    ) -> None:
        self.settings: SidebarSettings = settings or SidebarSettings()
        self.history: UndoService = history or UndoService(max_history=self.settings.max_history)
        self.clipboard: List[Item] = clipboard if clipboard is not None else []
        self.items: List[Item] = []
        self.archived_items: List[Item] = []
        self.selection = SelectionState()
        self.archive_selection = SelectionState()
        self.edit = EditState()
        self._changed_listeners: List[ChangedListener] = []
        self._notify_listeners: List[NotifyListener] = []
        self._replace_lists(items or [], archived_items or [])

    @classmethod
    def from_config(cls, config_manager=None, **kwargs: Any) -> "OutlineSession":
        """Create a session whose settings come from :class:`ConfigManager`."""
        if config_manager is None:
            from archytask.config import ConfigManager
            config_manager = ConfigManager()
        settings = SidebarSettings.from_config(config_manager.get_settings())
        return cls(settings=settings, **kwargs)

    # ------------------------------------------------------------------ events

    def add_listener(self, on_changed: Optional[ChangedListener] = None,
                     on_notify: Optional[NotifyListener] = None) -> None:
        if on_changed is not None:
            self._changed_listeners.append(on_changed)
        if on_notify is not None:
            self._notify_listeners.append(on_notify)

    def remove_listener(self, listener: Callable[..., Any]) -> None:
        for bucket in (self._changed_listeners, self._notify_listeners):
            if listener in bucket:
                bucket.remove(listener)

    def outline_changed(self) -> None:
        """Tell listeners the lists changed and should be persisted."""
        for listener in list(self._changed_listeners):
            try:
                listener(self.items, self.archived_items)
            except Exception as exc:
                logger.error("outline_changed listener failed: %s", exc, exc_info=True)

    def notify(self, notice: Notice) -> None:
        for listener in list(self._notify_listeners):
            try:
                listener(notice.message, notice.icon)
            except Exception as exc:
                logger.error("notify listener failed: %s", exc, exc_info=True)

    # ------------------------------------------------------------ host inbound

    def load_outline(self, items: Iterable[Item], archived_items: Iterable[Item]) -> None:
        """Wholesale-replace both lists (initial load or external reload).

        Selection and any in-progress edit are dropped together with the old
        lists. The history stacks are kept.
        """
        self._replace_lists(items, archived_items)
        self.selection.clear()
        self.archive_selection.clear()
        self.edit.reset()
        logger.info("Outline loaded: items=%d archived=%d", len(self.items), len(self.archived_items))

    def apply_settings(self, settings: Optional[SidebarSettings] = None, **overrides: Any) -> SidebarSettings:
        """Store settings pushed by the host (modifier and new-item schemes)."""
        base = settings or self.settings
        self.settings = base.with_overrides(**overrides) if overrides else base
        return self.settings

    # ----------------------------------------------------------------- history

    def snapshot(self) -> OutlineSnapshot:
        return OutlineSnapshot.capture(self.items, self.archived_items)

    def undo(self) -> bool:
        if not self.history.undo(self):
            return False
        logger.info("Edit OK: undo")
        self.outline_changed()
        self.notify(NOTICE_UNDO)
        return True

    def redo(self) -> bool:
        if not self.history.redo(self):
            return False
        logger.info("Edit OK: redo")
        self.outline_changed()
        self.notify(NOTICE_REDO)
        return True

    # --------------------------------------------------------------- internals

    def _replace_lists(self, items: Iterable[Item], archived_items: Iterable[Item]) -> None:
        self.items = list(items)
        archived: List[Item] = []
        for item in archived_items:
            if isinstance(item, Heading):
                logger.warning("Dropping heading %r from archive list", item.title)
                continue
            if isinstance(item, Todo):
                item.is_checked = True
            archived.append(item)
        self.archived_items = archived
