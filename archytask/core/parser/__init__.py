from __future__ import annotations

"""Markdown reader for the outline file format."""

from .markdown_parser import ParseResult, parse_markdown  # noqa: F401

__all__: list[str] = [
    "ParseResult",
    "parse_markdown",
]
