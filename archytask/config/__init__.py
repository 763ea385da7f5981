"""Configuration files (YAML) and the :class:`ConfigManager` that reads them.

Packaged defaults live in this folder and are merged with user overrides.
"""

from .manager import ConfigManager

__all__ = [
    "ConfigManager",
]
