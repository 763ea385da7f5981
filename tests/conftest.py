"""Shared fixtures for the ArchyTask test-suite.

Outlines are written as compact line lists so expectations stay readable::

    ["## Heading", "parent", "  child", "[x] done parent", "  [x] done child"]

A line starting with ``## `` is a heading, two leading spaces make a child,
and ``[x] `` marks a checked todo. Titles double as item ids.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from archytask.config import ConfigManager
from archytask.core.models import Heading, Item, Todo
from archytask.core.session import OutlineSession

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def parse_line(line: str) -> Item:
    if line.startswith("## "):
        title = line[3:]
        return Heading(id=title, title=title)
    indent = 1 if line.startswith("  ") else 0
    body = line.strip()
    checked = body.startswith("[x] ")
    if checked:
        body = body[4:]
    return Todo(id=body, title=body, indent=indent, is_checked=checked)


def render_item(item: Item) -> str:
    if isinstance(item, Heading):
        return f"## {item.title}"
    prefix = "  " if item.indent else ""
    mark = "[x] " if item.is_checked else ""
    return f"{prefix}{mark}{item.title}"


class EventRecorder:
    """Collects ``outline_changed`` and ``notify`` events from a session."""

    def __init__(self) -> None:
        self.changed = 0
        self.notices: List[tuple] = []

    def on_changed(self, items, archived_items) -> None:
        self.changed += 1

    def on_notify(self, message: str, icon: str) -> None:
        self.notices.append((message, icon))


@pytest.fixture
def outline():
    def factory(lines: Iterable[str]) -> List[Item]:
        return [parse_line(line) for line in lines]
    return factory


@pytest.fixture
def shape():
    def view(items: Iterable[Item]) -> List[str]:
        return [render_item(i) for i in items]
    return view


@pytest.fixture
def make_session():
    """Build an :class:`OutlineSession`; ``active`` defaults to the first selected index."""
    def factory(lines: Iterable[str] = (), archived: Iterable[str] = (),
                selected: Iterable[int] = (), active: Optional[int] = None) -> OutlineSession:
        session = OutlineSession([parse_line(l) for l in lines], [parse_line(l) for l in archived])
        picked = list(selected)
        session.selection.selected = set(picked)
        if active is None:
            active = picked[0] if picked else -1
        session.selection.active_index = active
        session.selection.anchor_index = active
        return session
    return factory


@pytest.fixture
def recorder():
    def attach(session: OutlineSession) -> EventRecorder:
        rec = EventRecorder()
        session.add_listener(on_changed=rec.on_changed, on_notify=rec.on_notify)
        return rec
    return attach


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user config and log output at a temp dir and reset the config singleton."""
    monkeypatch.setenv("ARCHYTASK_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("ARCHYTASK_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("ARCHYTASK_DEBUG_MODULES", raising=False)
    monkeypatch.delenv("ARCHYTASK_DEBUG_EDITS", raising=False)
    ConfigManager.reset()
    yield tmp_path / "config"
    ConfigManager.reset()


@pytest.fixture
def restore_root_logging():
    """Undo the handler changes made by ``setup_logging`` during a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
