from __future__ import annotations

"""File persistence for outline documents.

Public API:
- resolve_document_path(root, file_path) -> Path
- ensure_document(path) -> Path (creates the file with DEFAULT_DOCUMENT)
- load_document(path) -> ParseResult
- save_document(path, items, archived_items) -> Path
- DebouncedSaver(path, delay): coalesces rapid saves on a background timer
- DebouncedSaver.from_settings(settings, root): saver for the configured document

The outline engine never waits on these calls. Reading and writing is the one
place where hard failures surface: I/O errors are logged and re-raised to the
caller, except inside the saver's timer thread where there is no caller left.
"""

from pathlib import Path
from typing import Iterable, Optional, Union
import logging
import threading

from archytask.core.generators.markdown_writer import stringify_items
from archytask.core.models import Item
from archytask.core.models.settings import SidebarSettings
from archytask.core.parser.markdown_parser import ParseResult, parse_markdown

__all__ = [
    "DEFAULT_DOCUMENT",
    "resolve_document_path",
    "ensure_document",
    "load_document",
    "save_document",
    "DebouncedSaver",
]

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_DOCUMENT = """## ToDo
- [ ] select a task and press "enter" to edit it.
- [ ] press "shift + enter" to create a new task.
- [ ] press "space" to toggle the checkbox.
- [ ] "tab" / "shift + tab" change the indent.
\t- [ ] this is a subtask.
\t- [ ] subtasks cannot have subtasks.
- [ ] "ctrl + up/down" moves a task.
## Doing
- [ ] "ctrl + left/right" moves a task to another heading.
- [ ] "delete" removes a task.
## Done
- [ ] "ctrl + shift + right" archives a task.
- [ ] tasks can carry a note.
    ```plane
    Notes belong to the item right above the fence.
    ```
"""


def resolve_document_path(root: PathLike, file_path: PathLike) -> Path:
    """Return *file_path* as is when absolute, else relative to *root*."""
    path = Path(file_path).expanduser()
    if path.is_absolute():
        return path
    return Path(root) / path


def ensure_document(path: PathLike) -> Path:
    """Create *path* (and its parent directories) with the default content if missing."""
    target = Path(path)
    if target.exists():
        return target
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(DEFAULT_DOCUMENT, encoding="utf-8")
    except OSError as exc:
        logger.error("Could not create %s: %s", target, exc)
        raise
    logger.info("Created outline document %s", target)
    return target


def load_document(path: PathLike) -> ParseResult:
    """Read and parse *path*, creating it first when it does not exist."""
    target = ensure_document(path)
    try:
        content = target.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Could not read %s: %s", target, exc)
        raise
    result = parse_markdown(content)
    logger.info("Loaded %s: items=%d archived=%d", target, len(result.items), len(result.archived_items))
    return result


def _write(target: Path, content: str) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")


def save_document(path: PathLike, items: Iterable[Item], archived_items: Iterable[Item] = ()) -> Path:
    """Serialize both lists to *path*."""
    target = Path(path)
    try:
        _write(target, stringify_items(items, archived_items))
    except OSError as exc:
        logger.error("Failed to save %s: %s", target, exc)
        raise
    logger.debug("Saved %s", target)
    return target


class DebouncedSaver:
    """Coalesce bursts of saves into one write after *delay* seconds of quiet.

    The text is rendered when :meth:`schedule` is called, so later in-place
    edits to the item lists do not leak into a pending write. Hook
    :meth:`schedule` to ``OutlineSession.add_listener(on_changed=...)``.
    """

    def __init__(self, path: PathLike, delay: float = 1.0) -> None:
        self._path = Path(path)
        self._delay = max(0.0, float(delay))
        self._lock = threading.Lock()
        # Held across take + write so writes land in the order they were taken
        self._write_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: SidebarSettings, root: PathLike = ".") -> "DebouncedSaver":
        """Saver for ``settings.file_path`` (relative to *root*) using the configured delay."""
        path = resolve_document_path(root, settings.file_path)
        return cls(path, delay=settings.save_debounce_seconds)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(self, items: Iterable[Item], archived_items: Iterable[Item] = ()) -> None:
        content = stringify_items(items, archived_items)
        with self._lock:
            self._pending = content
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._delay, self._on_timer)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> bool:
        """Write the pending content now. Returns False when nothing was pending."""
        with self._write_lock:
            content = self._take_pending()
            if content is None:
                return False
            try:
                _write(self._path, content)
            except OSError as exc:
                logger.error("Failed to save %s: %s", self._path, exc)
                raise
        logger.debug("Flushed %s", self._path)
        return True

    def cancel(self) -> None:
        self._take_pending()

    def _take_pending(self) -> Optional[str]:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            content, self._pending = self._pending, None
            return content

    def _on_timer(self) -> None:
        try:
            self.flush()
        except OSError:
            # Already logged by flush(); the timer thread has no caller to report to
            pass
