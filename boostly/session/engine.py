"""Qt tick loop that keeps ``time_left_seconds`` in step with the clock.

The loop never counts seconds down itself.  Every tick (and every time
the app comes back to the foreground) it asks :class:`SessionCore` to
recompute the remaining time from the stored deadline, so a throttled,
late or suspended timer can only delay the update, never skew it.

Signals
-------
tick(remaining_seconds: int)
    Emitted after each timer-driven recompute while running.
state_changed(state: SessionState)
    Emitted after every committed change in the core.
session_completed(interval: CompletedInterval)
    Emitted after a live completion (tick, visibility or explicit call).
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QGuiApplication

from .core import SessionCore
from .effects import AwardedInterval
from .transitions import CompletedInterval

TICK_INTERVAL_MS = 1000


class SessionEngine(QObject):
    """Drives a :class:`SessionCore` from a repeating ``QTimer``."""

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    session_completed = pyqtSignal(object)

    def __init__(
        self,
        core: SessionCore,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._core = core
        self._visible = True

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_tick)

        self._unsubscribe = core.subscribe(self._on_state_committed)
        self._remove_completion = core.on_completed(self._on_completed)
        self._sync_timer()

    # ── properties ────────────────────────────────────────────────────

    @property
    def core(self) -> SessionCore:
        return self._core

    @property
    def is_ticking(self) -> bool:
        return self._qt_timer.isActive()

    @property
    def visible(self) -> bool:
        return self._visible

    # ── visibility hook ───────────────────────────────────────────────

    def set_visible(self, visible: bool) -> None:
        """Tell the loop whether the host surface is in the foreground.

        Hidden: ticking stops.  Visible again: one immediate recompute,
        which completes the interval if its deadline passed meanwhile.
        """
        was_visible = self._visible
        self._visible = visible
        if visible and not was_visible:
            self._core.recompute_time_left()
        self._sync_timer()

    def on_application_state_changed(self, state: Qt.ApplicationState) -> None:
        self.set_visible(state == Qt.ApplicationState.ApplicationActive)

    def attach(self, app: QGuiApplication) -> None:
        """Follow *app*'s active/inactive state."""
        app.applicationStateChanged.connect(self.on_application_state_changed)

    def shutdown(self) -> None:
        """Stop ticking and detach from the core for good."""
        self._qt_timer.stop()
        self._unsubscribe()
        self._remove_completion()

    # ── internal ──────────────────────────────────────────────────────

    def _sync_timer(self) -> None:
        should_tick = self._visible and self._core.state.is_running
        if should_tick and not self._qt_timer.isActive():
            self._qt_timer.start()
        elif not should_tick and self._qt_timer.isActive():
            self._qt_timer.stop()

    def _on_tick(self) -> None:
        self._core.recompute_time_left()
        state = self._core.state
        if state.is_running:
            self.tick.emit(state.time_left_seconds)

    def _on_state_committed(self) -> None:
        self._sync_timer()
        self.state_changed.emit(self._core.state)

    def _on_completed(
        self, interval: CompletedInterval, awarded: AwardedInterval | None
    ) -> None:
        self.session_completed.emit(interval)
