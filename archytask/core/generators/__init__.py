from __future__ import annotations

"""Modules responsible for writing outlines back to their text formats."""

from .markdown_writer import stringify_items  # noqa: F401

__all__: list[str] = [
    "stringify_items",
]
