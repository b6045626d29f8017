"""Pure state transitions.

Every function takes a :class:`SessionState` and returns the next one
(or the same object when the call is outside its precondition).  Nothing
here touches storage, clocks or observers; :class:`SessionCore` does that.

Transitions
-----------
IDLE | COMPLETED → RUNNING          (start)
RUNNING → COMPLETED                 (complete / deadline reached)
RUNNING → PAUSED → RUNNING          (pause / resume)
IDLE | COMPLETED → IDLE, next type  (skip)
Any → IDLE, initial                 (reset)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from .types import SessionConfig, SessionState, SessionStatus, SessionType

STARTABLE = frozenset({SessionStatus.IDLE, SessionStatus.COMPLETED})
SKIPPABLE = STARTABLE


@dataclass(frozen=True)
class CompletedInterval:
    """An interval that just finished, handed to completion effects."""

    session_type: SessionType
    session_number: int        # cadence cursor of the finished interval
    duration_minutes: int
    started_at: int            # epoch ms
    ended_at: int              # epoch ms, never after the deadline
    completed_sessions: int    # focus total after this completion
    next_type: SessionType

    @property
    def is_focus(self) -> bool:
        return self.session_type is SessionType.FOCUS


def next_in_cycle(state: SessionState) -> tuple[SessionType, int]:
    """Return ``(next_type, next_session_number)`` after *state*'s interval."""
    if state.session_type is SessionType.FOCUS:
        cadence = state.config.sessions_until_long_break
        if state.session_number % cadence == 0:
            return SessionType.LONG_BREAK, state.session_number + 1
        return SessionType.SHORT_BREAK, state.session_number + 1
    return SessionType.FOCUS, state.session_number


def seconds_until(end_timestamp: int, now: int) -> int:
    return max(0, math.ceil((end_timestamp - now) / 1000))


# ── transitions ───────────────────────────────────────────────────────────


def start(state: SessionState, now: int) -> SessionState:
    if state.status not in STARTABLE:
        return state
    duration = state.config.duration_seconds(state.session_type)
    return replace(
        state,
        status=SessionStatus.RUNNING,
        start_timestamp=now,
        end_timestamp=now + duration * 1000,
        time_left_seconds=duration,
    )


def complete(
    state: SessionState, now: int | None = None
) -> tuple[SessionState, CompletedInterval | None]:
    """Finish the running interval.  Returns ``(state, None)`` when idle.

    ``ended_at`` is ``min(now, end_timestamp)``.  Without *now* (catch-up
    on load) it is the deadline itself.
    """
    if state.status is not SessionStatus.RUNNING:
        return state, None

    next_type, next_number = next_in_cycle(state)
    completed = state.completed_sessions
    if state.session_type is SessionType.FOCUS:
        completed += 1

    event = CompletedInterval(
        session_type=state.session_type,
        session_number=state.session_number,
        duration_minutes=round((state.end_timestamp - state.start_timestamp) / 60_000),
        started_at=state.start_timestamp,
        ended_at=state.end_timestamp if now is None else min(now, state.end_timestamp),
        completed_sessions=completed,
        next_type=next_type,
    )
    new_state = replace(
        state,
        session_type=next_type,
        status=SessionStatus.COMPLETED,
        session_number=next_number,
        completed_sessions=completed,
        start_timestamp=None,
        end_timestamp=None,
        time_left_seconds=state.config.duration_seconds(next_type),
    )
    return new_state, event


def skip(state: SessionState) -> SessionState:
    if state.status not in SKIPPABLE:
        return state
    next_type, next_number = next_in_cycle(state)
    return replace(
        state,
        session_type=next_type,
        status=SessionStatus.IDLE,
        session_number=next_number,
        start_timestamp=None,
        end_timestamp=None,
        time_left_seconds=state.config.duration_seconds(next_type),
    )


def reset(state: SessionState) -> SessionState:
    return SessionState.initial(state.config)


def reconfigure(state: SessionState, config: SessionConfig) -> SessionState:
    """Swap in an already validated *config*.

    Only an idle timer picks up the new duration immediately; a running
    deadline is never moved.
    """
    if state.status is SessionStatus.IDLE:
        return replace(
            state,
            config=config,
            time_left_seconds=config.duration_seconds(state.session_type),
        )
    return replace(state, config=config)


def recompute(state: SessionState, now: int) -> SessionState:
    """Refresh the cached seconds left from the deadline (running only)."""
    if state.status is not SessionStatus.RUNNING:
        return state
    left = seconds_until(state.end_timestamp, now)
    if left == state.time_left_seconds:
        return state
    return replace(state, time_left_seconds=left)


def is_due(state: SessionState, now: int) -> bool:
    return state.is_running and state.end_timestamp <= now


def pause(state: SessionState, now: int) -> SessionState:
    if state.status is not SessionStatus.RUNNING:
        return state
    left = seconds_until(state.end_timestamp, now)
    if left == 0:
        return state  # already due; SessionCore completes it instead
    return replace(
        state,
        status=SessionStatus.PAUSED,
        start_timestamp=None,
        end_timestamp=None,
        time_left_seconds=left,
    )


def resume(state: SessionState, now: int) -> SessionState:
    """Run again from the frozen ``time_left_seconds``.

    ``start_timestamp`` is back-dated by the time already spent so that
    ``end - start`` still spans the whole interval.
    """
    if state.status is not SessionStatus.PAUSED:
        return state
    left = max(1, state.time_left_seconds)
    end = now + left * 1000
    full = state.config.duration_seconds(state.session_type) * 1000
    return replace(
        state,
        status=SessionStatus.RUNNING,
        start_timestamp=min(now, end - full),
        end_timestamp=end,
        time_left_seconds=left,
    )
