"""Durable storage and crash/suspend recovery for the session state.

The whole :class:`SessionState` is written as one JSON record under
:data:`STORAGE_KEY` after every committed transition.  On load a running
record is reconciled against the clock:

* deadline still ahead → restored as running, ``time_left`` recomputed;
* deadline passed      → exactly one completion is synthesized, however
                         long the process was away (no back-filling);
* corrupt record       → dropped, fresh initial state.

A store that raises (of any kind) is logged and otherwise ignored; the
in-memory state stays authoritative.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from . import transitions
from .transitions import CompletedInterval
from .types import SessionConfig, SessionState

logger = logging.getLogger(__name__)

STORAGE_KEY = "boostly_session_core"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


@dataclass(frozen=True)
class Restored:
    """Result of :meth:`SessionPersistence.load`."""

    state: SessionState
    caught_up: CompletedInterval | None = None
    discarded_corrupt: bool = False


class SessionPersistence:
    """Reads and writes the session record in a :class:`KeyValueStore`."""

    def __init__(self, store: KeyValueStore, *, key: str = STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    # ── write ─────────────────────────────────────────────────────────

    def save(self, state: SessionState) -> bool:
        """Persist *state*.  Returns False (and logs) if the store failed."""
        blob = json.dumps(state.to_dict(), separators=(",", ":"))
        try:
            self._store.set(self._key, blob)
        except Exception:
            logger.exception("failed to save session state")
            return False
        return True

    def clear(self) -> None:
        try:
            self._store.remove(self._key)
        except Exception:
            logger.exception("failed to remove session state")

    # ── read + reconcile ──────────────────────────────────────────────

    def load(
        self, now: int, default_config: SessionConfig | None = None
    ) -> Restored:
        """Rebuild the session state as it should look at *now*."""
        fresh = SessionState.initial(default_config)

        try:
            blob = self._store.get(self._key)
        except Exception:
            logger.exception("failed to read session state; starting fresh")
            return Restored(fresh)
        if blob is None:
            return Restored(fresh)

        try:
            state = SessionState.from_dict(json.loads(blob))
        except (TypeError, ValueError) as exc:
            # JSONDecodeError and CorruptStateError are both ValueErrors
            logger.warning("discarding corrupt session record: %s", exc)
            self.clear()
            return Restored(fresh, discarded_corrupt=True)

        if not state.is_running:
            return Restored(state)

        if transitions.is_due(state, now):
            caught_up_state, event = transitions.complete(state)
            logger.info(
                "%s ended while away (deadline %d, now %d); completed on load",
                state.session_type.value, state.end_timestamp, now,
            )
            self.save(caught_up_state)
            return Restored(caught_up_state, caught_up=event)

        return Restored(transitions.recompute(state, now))
