from __future__ import annotations

"""Central logging configuration for ArchyTask.

Import and call :func:`setup_logging` at application start-up.
"""

import copy
import logging
import logging.config
import os
import sys
from typing import Any, Dict, List

from archytask.config import ConfigManager

__all__ = ["setup_logging"]

_TRUTHY = {'1', 'true', 'yes', 'on'}


def setup_logging() -> None:
    """Configure logging for the application using the YAML logging section."""
    log_dir = os.environ.get("ARCHYTASK_LOG_DIR", "logs")
    log_file = os.path.join(log_dir, "archytask.log")

    try:
        logging_config = copy.deepcopy(ConfigManager().get_logging_config())
        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            handlers: Dict[str, Any] = logging_config.get("handlers") or {}
            if "file" in handlers:
                os.makedirs(log_dir, exist_ok=True)
                handlers["file"]["filename"] = log_file
            logging.config.dictConfig(logging_config)
            logging.getLogger(__name__).info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (OSError, ValueError, TypeError, AttributeError, ImportError) as exc:
        print(f"Error loading logging config: {exc}", file=sys.stderr)
        _setup_minimal_logging()

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up console-only logging when the config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'WARNING',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }
    logging.config.dictConfig(minimal_config)
    logging.getLogger(__name__).warning("===== Logging initialised with minimal fallback =====")


def _debug_targets() -> List[str]:
    """Logger names to raise to DEBUG, read from the environment.

    - ARCHYTASK_DEBUG_EDITS=true -> the structure editing and edit session services
    - ARCHYTASK_DEBUG_MODULES=comma,separated,logger,names
    """
    targets: List[str] = []
    if os.environ.get('ARCHYTASK_DEBUG_EDITS', '').strip().lower() in _TRUTHY:
        targets.append('archytask.core.services.structure_editing_service')
        targets.append('archytask.core.services.edit_session_service')
    extra_modules = os.environ.get('ARCHYTASK_DEBUG_MODULES', '').strip()
    if extra_modules:
        targets.extend(m.strip() for m in extra_modules.split(',') if m.strip())
    return targets


def _apply_debug_overrides() -> None:
    for name in _debug_targets():
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        if not any(h.level <= logging.DEBUG for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(handler)
        logger.info("Debug override active for logger '%s'", name)
