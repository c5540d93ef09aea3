"""User settings for the rut editor.

Settings are read from a JSON file in the user's config directory. A
missing or unreadable file, or a value of the wrong type, falls back to
the defaults below.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    "log_level": EditorConstants.DEFAULT_LOG_LEVEL,
    "atomic_save": False,
}


class Settings:
    """Editor settings loaded from settings.json.

    Attributes:
        log_level: Name of the logging level for the log file
        atomic_save: Write to a temp file and rename instead of truncating
            the document in place
    """

    def __init__(self, config_dir: Optional[Path] = None, log_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir or platformdirs.user_config_dir(EditorConstants.APP_NAME))
        self.log_dir = Path(log_dir or platformdirs.user_log_dir(EditorConstants.APP_NAME))
        self._settings_file = self._config_dir / EditorConstants.SETTINGS_FILENAME
        self._values: Dict[str, Any] = dict(DEFAULTS)

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    @property
    def log_file(self) -> Path:
        return self.log_dir / EditorConstants.LOG_FILENAME

    @property
    def log_level(self) -> str:
        return self._values["log_level"]

    @property
    def atomic_save(self) -> bool:
        return self._values["atomic_save"]

    def load(self) -> "Settings":
        """Read settings.json, keeping defaults for anything missing or invalid.

        Returns:
            self, for chaining
        """
        if not self._settings_file.exists():
            return self

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return self

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return self

        for key, value in data.items():
            if key not in DEFAULTS:
                continue
            if self.validate_setting(key, value):
                self._values[key] = value
            else:
                logger.warning(f"Invalid value {value!r} for setting {key}, using default")
        return self

    @staticmethod
    def validate_setting(key: str, value: Any) -> bool:
        """Check that a setting value has the right type and range."""
        if key == "log_level":
            return isinstance(value, str) and isinstance(logging.getLevelName(value.upper()), int)
        assert key == "atomic_save", f"unknown setting {key}"
        return isinstance(value, bool)
