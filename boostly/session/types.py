"""Session state model for Boostly.

Session types
-------------
FOCUS         A focus (work) interval.
SHORT_BREAK   Break after most focus intervals.
LONG_BREAK    Break after every ``sessions_until_long_break``-th focus.

Statuses
--------
IDLE          Waiting to start (fresh, reset or skipped).
RUNNING       Counting down towards ``end_timestamp``.
PAUSED        Frozen with ``time_left_seconds`` remembered.
COMPLETED     The previous interval just finished; next one is queued.

Timestamps are epoch milliseconds.  ``end_timestamp`` is the only
authoritative "when does this end"; ``time_left_seconds`` is a cache.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, fields, replace
from enum import Enum


# ── errors ────────────────────────────────────────────────────────────────


class BoostlyError(Exception):
    """Base class for errors raised by the session engine."""


class InvalidConfigError(BoostlyError, ValueError):
    """A timer configuration failed validation and was not applied."""


class CorruptStateError(BoostlyError, ValueError):
    """A persisted session record could not be turned back into a state."""


# ── enums ─────────────────────────────────────────────────────────────────


class SessionType(Enum):
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


class SessionStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


SESSION_LABELS: dict[SessionType, str] = {
    SessionType.FOCUS: "Focus Session",
    SessionType.SHORT_BREAK: "Short Break",
    SessionType.LONG_BREAK: "Long Break",
}

MIN_SESSIONS_UNTIL_LONG_BREAK = 2


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


# ── config ────────────────────────────────────────────────────────────────

# attribute name → camelCase key used by the stored JSON record
_CONFIG_KEYS: dict[str, str] = {
    "focus_minutes": "focusDuration",
    "short_break_minutes": "shortBreakDuration",
    "long_break_minutes": "longBreakDuration",
    "sessions_until_long_break": "sessionsUntilLongBreak",
}


@dataclass(frozen=True)
class SessionConfig:
    """Interval lengths (minutes) and the long-break cadence."""

    focus_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    sessions_until_long_break: int = 4

    def validate(self) -> SessionConfig:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfigError(f"{f.name} must be an integer, got {value!r}")
        for name in ("focus_minutes", "short_break_minutes", "long_break_minutes"):
            if getattr(self, name) <= 0:
                raise InvalidConfigError(f"{name} must be positive")
        if self.sessions_until_long_break < MIN_SESSIONS_UNTIL_LONG_BREAK:
            raise InvalidConfigError(
                "sessions_until_long_break must be at least "
                f"{MIN_SESSIONS_UNTIL_LONG_BREAK}"
            )
        return self

    def merged(self, **changes: int) -> SessionConfig:
        """Return a validated copy with *changes* applied.

        Raises :class:`InvalidConfigError` for unknown keys or bad values;
        ``self`` is never modified.
        """
        unknown = set(changes) - set(_CONFIG_KEYS)
        if unknown:
            raise InvalidConfigError(f"unknown config keys: {sorted(unknown)}")
        return replace(self, **changes).validate()

    def minutes_for(self, session_type: SessionType) -> int:
        if session_type is SessionType.FOCUS:
            return self.focus_minutes
        if session_type is SessionType.SHORT_BREAK:
            return self.short_break_minutes
        return self.long_break_minutes

    def duration_seconds(self, session_type: SessionType) -> int:
        return self.minutes_for(session_type) * 60

    def to_dict(self) -> dict[str, int]:
        return {key: getattr(self, attr) for attr, key in _CONFIG_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> SessionConfig:
        """Build from a stored record; missing keys fall back to defaults."""
        if not isinstance(data, dict):
            raise InvalidConfigError("config record must be an object")
        values = {
            attr: data[key] for attr, key in _CONFIG_KEYS.items() if key in data
        }
        return cls(**values).validate()


DEFAULT_CONFIG = SessionConfig()


# ── state ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the timer.  Transitions build new instances."""

    session_type: SessionType = SessionType.FOCUS
    status: SessionStatus = SessionStatus.IDLE
    session_number: int = 1
    completed_sessions: int = 0
    start_timestamp: int | None = None
    end_timestamp: int | None = None
    time_left_seconds: int = DEFAULT_CONFIG.focus_minutes * 60
    config: SessionConfig = field(default_factory=SessionConfig)

    @classmethod
    def initial(cls, config: SessionConfig | None = None) -> SessionState:
        config = config or DEFAULT_CONFIG
        return cls(
            time_left_seconds=config.duration_seconds(SessionType.FOCUS),
            config=config,
        )

    @property
    def is_running(self) -> bool:
        return self.status is SessionStatus.RUNNING

    @property
    def is_break(self) -> bool:
        return self.session_type is not SessionType.FOCUS

    @property
    def label(self) -> str:
        return SESSION_LABELS[self.session_type]

    def check(self) -> SessionState:
        """Raise :class:`CorruptStateError` if an invariant is violated."""
        if self.session_number < 1:
            raise CorruptStateError("session_number must be >= 1")
        if self.completed_sessions < 0:
            raise CorruptStateError("completed_sessions must be >= 0")
        if self.time_left_seconds < 0:
            raise CorruptStateError("time_left_seconds must be >= 0")
        if self.status is SessionStatus.RUNNING:
            if self.start_timestamp is None or self.end_timestamp is None:
                raise CorruptStateError("running state without timestamps")
            if self.end_timestamp <= self.start_timestamp:
                raise CorruptStateError("end_timestamp must follow start_timestamp")
        elif self.start_timestamp is not None or self.end_timestamp is not None:
            raise CorruptStateError(f"{self.status.value} state carries timestamps")
        return self

    # ── wire format ───────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "sessionType": self.session_type.value,
            "sessionStatus": self.status.value,
            "sessionNumber": self.session_number,
            "completedSessions": self.completed_sessions,
            "sessionStartTime": self.start_timestamp,
            "sessionEndTime": self.end_timestamp,
            "timeLeft": self.time_left_seconds,
            "config": self.config.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> SessionState:
        """Parse a stored record, raising :class:`CorruptStateError`."""
        if not isinstance(data, dict):
            raise CorruptStateError("session record must be an object")
        try:
            state = cls(
                session_type=SessionType(data["sessionType"]),
                status=SessionStatus(data["sessionStatus"]),
                session_number=_as_int(data["sessionNumber"]),
                completed_sessions=_as_int(data["completedSessions"]),
                start_timestamp=_as_optional_int(data.get("sessionStartTime")),
                end_timestamp=_as_optional_int(data.get("sessionEndTime")),
                time_left_seconds=_as_int(data["timeLeft"]),
                config=SessionConfig.from_dict(data.get("config", {})),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CorruptStateError(str(exc)) from exc
        return state.check()


def _as_int(value: object) -> int:
    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected a whole number, got {value!r}")
        return int(value)
    if not isinstance(value, int):
        raise TypeError(f"expected a number, got {value!r}")
    return value


def _as_optional_int(value: object) -> int | None:
    return None if value is None else _as_int(value)
