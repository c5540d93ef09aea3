"""Logging configuration.

The terminal is in fullscreen mode while the editor runs, so log records go
to a rotating file in the user's log directory rather than to the console.
"""

from __future__ import annotations

import logging
import logging.handlers

from .constants import EditorConstants
from .settings import Settings


def setup_logging(settings: Settings) -> logging.Handler:
    """Attach a file handler for the rut logger hierarchy.

    Falls back to a NullHandler when the log directory cannot be created
    or the log file cannot be opened.

    Returns:
        The handler that was attached
    """
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    root = logging.getLogger("rut")
    root.handlers = []
    root.setLevel(level)
    root.propagate = False

    handler: logging.Handler
    try:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            settings.log_file,
            maxBytes=EditorConstants.LOG_MAX_BYTES,
            backupCount=EditorConstants.LOG_BACKUP_COUNT,
            encoding='utf-8',
        )
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
        ))
        handler.setLevel(level)
    except OSError:
        handler = logging.NullHandler()

    root.addHandler(handler)
    root.debug("Logging to %s at level %s", settings.log_file, logging.getLevelName(level))
    return handler
