"""The session state machine that callers talk to.

:class:`SessionCore` owns the current :class:`SessionState` and is the only
thing that replaces it.  Each public operation

1. computes the next state with a pure function from :mod:`.transitions`,
2. writes it through :class:`SessionPersistence`,
3. notifies subscribers,
4. for completions, fires the :class:`CompletionEffects`.

Calling an operation outside its precondition (``start()`` while running,
``skip()`` while running, ``complete()`` while idle ...) is a silent no-op.
The only error a caller can see is :class:`InvalidConfigError`.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

from . import transitions
from .effects import AwardedInterval, CompletionEffects
from .hub import SubscriptionHub
from .persistence import SessionPersistence
from .transitions import CompletedInterval
from .types import SessionConfig, SessionState, SessionStatus, now_ms

logger = logging.getLogger(__name__)

Clock = Callable[[], int]
CompletionListener = Callable[[CompletedInterval, Optional[AwardedInterval]], None]


class SessionCore:
    """Focus / short break / long break cycle with deadline-based timing.

    Parameters
    ----------
    persistence
        Where the state is kept between runs.  It is loaded (and, if a
        deadline passed while the app was closed, caught up) right here.
    effects
        Reward, notification and sync collaborators for completions.
    clock
        Zero-argument callable returning epoch milliseconds.
    pausable
        ``False`` gives the plain start/complete flavor with no PAUSED state.
    default_config
        Config for a brand-new (or unreadable) record.
    """

    def __init__(
        self,
        persistence: SessionPersistence,
        *,
        effects: CompletionEffects | None = None,
        clock: Clock | None = None,
        pausable: bool = True,
        default_config: SessionConfig | None = None,
    ) -> None:
        self._persistence = persistence
        self._effects = effects or CompletionEffects()
        self._clock: Clock = clock or now_ms
        self._pausable = pausable
        self._hub = SubscriptionHub()
        self._completion_listeners: list[CompletionListener] = []

        restored = persistence.load(self._clock(), default_config)
        self._state = restored.state
        if not pausable and self._state.status is SessionStatus.PAUSED:
            self._state = transitions.resume(self._state, self._clock())
            self._persistence.save(self._state)
        if restored.caught_up is not None:
            self._effects.dispatch(restored.caught_up)

    # ══════════════════════════════════════════════════════════════════
    #  READ-ONLY VIEW
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> SessionState:
        """The current snapshot.  Frozen; replaced on every transition."""
        return self._state

    @property
    def config(self) -> SessionConfig:
        return self._state.config

    @property
    def pausable(self) -> bool:
        return self._pausable

    def now(self) -> int:
        return self._clock()

    def progress_percent(self) -> float:
        """0 → 100 through the current interval."""
        state = self._state
        if state.is_running:
            total = (state.end_timestamp - state.start_timestamp) / 1000
        else:
            total = state.config.duration_seconds(state.session_type)
        if total <= 0:
            return 0.0
        percent = (total - state.time_left_seconds) / total * 100
        return max(0.0, min(100.0, percent))

    def can_start(self) -> bool:
        return self._state.status in transitions.STARTABLE

    def can_skip(self) -> bool:
        return self._state.status in transitions.SKIPPABLE

    def can_pause(self) -> bool:
        return self._pausable and self._state.is_running

    def session_label(self) -> str:
        return self._state.label

    def is_break_session(self) -> bool:
        return self._state.is_break

    # ══════════════════════════════════════════════════════════════════
    #  SUBSCRIPTIONS
    # ══════════════════════════════════════════════════════════════════

    def subscribe(self, observer: Callable[[], None]) -> Callable[[], None]:
        """Call *observer* after every committed change.  Returns unsubscribe."""
        return self._hub.subscribe(observer)

    def on_completed(self, listener: CompletionListener) -> Callable[[], None]:
        """Call *listener(interval, awarded)* after each live completion."""
        self._completion_listeners.append(listener)

        def remove() -> None:
            if listener in self._completion_listeners:
                self._completion_listeners.remove(listener)

        return remove

    # ══════════════════════════════════════════════════════════════════
    #  TRANSITIONS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        self._commit(transitions.start(self._state, self._clock()))

    def complete(self) -> None:
        """Finish the running interval now, even before its deadline."""
        self._complete(self._clock())

    def skip(self) -> None:
        self._commit(transitions.skip(self._state))

    def reset(self) -> None:
        self._commit(transitions.reset(self._state))

    def reconfigure(
        self, partial: Mapping[str, int] | None = None, **changes: int
    ) -> SessionConfig:
        """Merge config changes.

        Raises :class:`InvalidConfigError` (leaving the old config in place)
        if any value is invalid.  A running interval keeps its deadline;
        the new durations apply from the next interval.
        """
        merged = dict(partial or {}, **changes)
        config = self._state.config.merged(**merged)
        self._commit(transitions.reconfigure(self._state, config))
        return config

    def recompute_time_left(self, now: int | None = None) -> None:
        """Refresh ``time_left_seconds`` from the deadline.

        Completes the interval instead when the deadline has passed.
        """
        if now is None:
            now = self._clock()
        if transitions.is_due(self._state, now):
            self._complete(now)
            return
        self._commit(transitions.recompute(self._state, now))

    def pause(self) -> None:
        if not self._pausable:
            return
        now = self._clock()
        if transitions.is_due(self._state, now):
            self._complete(now)
            return
        self._commit(transitions.pause(self._state, now))

    def resume(self) -> None:
        self._commit(transitions.resume(self._state, self._clock()))

    def toggle(self) -> None:
        """Start, pause or resume, whichever applies."""
        status = self._state.status
        if status is SessionStatus.RUNNING:
            self.pause()
        elif status is SessionStatus.PAUSED:
            self.resume()
        else:
            self.start()

    # ── internal ──────────────────────────────────────────────────────

    def _complete(self, now: int) -> None:
        new_state, event = transitions.complete(self._state, now)
        if event is None:
            return
        self._commit(new_state)
        awarded = self._effects.dispatch(event)
        for listener in list(self._completion_listeners):
            try:
                listener(event, awarded)
            except Exception:
                logger.exception("completion listener %r failed", listener)

    def _commit(self, new_state: SessionState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        self._persistence.save(new_state)
        self._hub.notify()

    def close(self) -> None:
        """Drop every subscriber; the state itself stays persisted."""
        self._hub.clear()
        self._completion_listeners.clear()
