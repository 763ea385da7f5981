"""Application version detection utilities.

Provides a single public function, ``get_app_version()``, used by the CLI.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from typing import Optional

_CACHED_VERSION: Optional[str] = None


def get_app_version() -> str:
    """Return the application version string (e.g., ``v0.3.0``).

    Installed builds read the distribution metadata; a source checkout that
    was never installed reports "vdev".
    """
    global _CACHED_VERSION
    if _CACHED_VERSION:
        return _CACHED_VERSION
    try:
        text = version("archytask")
    except PackageNotFoundError:
        text = ""
    _CACHED_VERSION = f"v{text}" if text else "vdev"
    return _CACHED_VERSION
