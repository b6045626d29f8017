"""Logging configuration: rotating JSON-lines file plus a terse console."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict

LOG_DIR_NAME = "logs"
LOG_FILE_BASENAME = "boostly.log"


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    ``extra`` keys prefixed with ``_json_`` are copied into the payload
    without the prefix.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k.startswith("_json_"):
                payload[k[6:]] = v
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(base_dir: Path, level: int | str = logging.INFO) -> Path:
    """Install the file and console handlers on the root logger.

    Returns the log file path.  Safe to call again; old handlers are
    replaced rather than duplicated.  An unknown *level* name falls back
    to INFO with a warning.
    """
    log_dir = base_dir / LOG_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / LOG_FILE_BASENAME

    resolved = _resolve_level(level)
    root = logging.getLogger()
    root.setLevel(logging.INFO if resolved is None else resolved)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    file_handler = RotatingFileHandler(
        logfile, maxBytes=512_000, backupCount=5, encoding="utf-8"
    )
    file_handler.setFormatter(JsonFormatter())
    root.addHandler(file_handler)

    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(console)

    log = logging.getLogger(__name__)
    log.info("logging initialised", extra={"_json_phase": "startup"})
    if resolved is None:
        log.warning("unknown log level %r; using INFO", level)
    return logfile


def _resolve_level(level: int | str) -> int | None:
    if isinstance(level, bool):
        return None
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        if isinstance(value, int):
            return value
    return None
