"""Key-value store backed by the ``kv_store`` table."""

from __future__ import annotations

from .db import get_session
from .models import KeyValue


class SqlKeyValueStore:
    """``get`` / ``set`` / ``remove`` on string values.

    SQLAlchemy errors propagate; :class:`SessionPersistence` decides what
    a failed read or write means for the timer.
    """

    def get(self, key: str) -> str | None:
        with get_session() as db:
            row = db.get(KeyValue, key)
            return None if row is None else row.value

    def set(self, key: str, value: str) -> None:
        with get_session() as db:
            row = db.get(KeyValue, key)
            if row is None:
                db.add(KeyValue(key=key, value=value))
            else:
                row.value = value

    def remove(self, key: str) -> None:
        with get_session() as db:
            row = db.get(KeyValue, key)
            if row is not None:
                db.delete(row)
