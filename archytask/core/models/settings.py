"""Sidebar settings model.

Holds the values the host's input layer needs (modifier scheme, new-item
trigger) plus the engine and storage knobs read from ``settings.yml``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

__all__ = ["SidebarSettings", "MOVE_MODIFIERS", "NEW_ITEM_TRIGGERS"]

MOVE_MODIFIERS = ("ctrl", "alt")
NEW_ITEM_TRIGGERS = ("enter", "shift+enter")


@dataclass(frozen=True)
class SidebarSettings:
    """Validated sidebar configuration."""

    task_move_modifier: str = "ctrl"
    new_item_trigger: str = "shift+enter"
    max_history: int = 50
    file_path: str = "archytask.md"
    save_debounce_seconds: float = 1.0

    @classmethod
    def from_config(cls, data: Optional[Dict[str, Any]]) -> "SidebarSettings":
        """Build settings from the ``settings`` config section.

        Invalid values are replaced by defaults and logged; this never raises.
        """
        data = data or {}
        editor = data.get("editor") or {}
        history = data.get("history") or {}
        storage = data.get("storage") or {}
        defaults = cls()

        modifier = str(editor.get("task_move_modifier", defaults.task_move_modifier)).lower()
        # Older settings files spell the native modifier "cmd"
        if modifier == "cmd":
            modifier = "ctrl"
        if modifier not in MOVE_MODIFIERS:
            logger.warning("Invalid task_move_modifier %r, using %r", modifier, defaults.task_move_modifier)
            modifier = defaults.task_move_modifier

        trigger = str(editor.get("new_item_trigger", defaults.new_item_trigger)).lower()
        if trigger not in NEW_ITEM_TRIGGERS:
            logger.warning("Invalid new_item_trigger %r, using %r", trigger, defaults.new_item_trigger)
            trigger = defaults.new_item_trigger

        try:
            max_history = int(history.get("max_entries", defaults.max_history))
        except (TypeError, ValueError):
            max_history = defaults.max_history
        if max_history < 1:
            logger.warning("history.max_entries must be >= 1, got %r", max_history)
            max_history = defaults.max_history

        file_path = str(storage.get("file_path") or defaults.file_path)

        try:
            delay = float(storage.get("save_debounce_seconds", defaults.save_debounce_seconds))
        except (TypeError, ValueError):
            delay = defaults.save_debounce_seconds
        if delay < 0:
            delay = defaults.save_debounce_seconds

        return cls(
            task_move_modifier=modifier,
            new_item_trigger=trigger,
            max_history=max_history,
            file_path=file_path,
            save_debounce_seconds=delay,
        )

    def with_overrides(self, **overrides: Any) -> "SidebarSettings":
        """Return a copy with host-provided values applied and re-validated."""
        merged = {
            "editor": {
                "task_move_modifier": overrides.get("task_move_modifier", self.task_move_modifier),
                "new_item_trigger": overrides.get("new_item_trigger", self.new_item_trigger),
            },
            "history": {"max_entries": overrides.get("max_history", self.max_history)},
            "storage": {
                "file_path": overrides.get("file_path", self.file_path),
                "save_debounce_seconds": overrides.get("save_debounce_seconds", self.save_debounce_seconds),
            },
        }
        return SidebarSettings.from_config(merged)
