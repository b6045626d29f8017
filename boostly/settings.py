"""Application settings with JSON persistence.

Settings are stored at:
    ~/.boostly/settings.json   (or $BOOSTLY_HOME/settings.json)

Usage::

    settings = load_settings()
    settings.sound_volume = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields

from . import paths
from .session.templates import get_template
from .session.types import SessionConfig

logger = logging.getLogger(__name__)

APP_DIR = paths.APP_DIR
SETTINGS_PATH = paths.SETTINGS_PATH


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    template_id: str = "custom"            # or a preset id, see session.templates
    focus_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    sessions_until_long_break: int = 4
    pausable: bool = True
    tick_interval_ms: int = 1000

    # ── rewards ───────────────────────────────────────────────────────
    points_strategy: str = "flat"          # flat | streak

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"

    def session_config(self) -> SessionConfig:
        """Timer config for these settings.

        A known non-custom template wins over the individual minute fields.
        Raises :class:`InvalidConfigError` for bad custom values.
        """
        template = get_template(self.template_id)
        if template is not None and template.id != "custom":
            return template.to_config()
        return SessionConfig(
            focus_minutes=self.focus_minutes,
            short_break_minutes=self.short_break_minutes,
            long_break_minutes=self.long_break_minutes,
            sessions_until_long_break=self.sessions_until_long_break,
        ).validate()


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
