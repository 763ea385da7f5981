"""Top-level package for the ArchyTask outline engine.

Host sidebars (or the CLI) should only depend on the public API exposed here
rather than importing internal modules directly.
"""

from .core.models import Heading, Item, Todo  # re-export for convenience
from .core.session import OutlineSession

__all__: list[str] = [
    "Heading",
    "Item",
    "Todo",
    "OutlineSession",
]
