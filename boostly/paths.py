"""Where Boostly keeps its files.

Everything lives under ``~/.boostly`` unless ``BOOSTLY_HOME`` points
somewhere else.
"""

from __future__ import annotations

import os
from pathlib import Path


def app_dir() -> Path:
    override = os.environ.get("BOOSTLY_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".boostly"


APP_DIR = app_dir()
DB_PATH = APP_DIR / "boostly.db"
SETTINGS_PATH = APP_DIR / "settings.json"
SOUNDS_DIR = APP_DIR / "sounds"
