"""Tests for the Qt tick loop and the visibility hook."""

from PyQt6.QtCore import Qt

from boostly.session.engine import TICK_INTERVAL_MS, SessionEngine
from boostly.session.types import SessionStatus, SessionType

from helpers import SignalCollector


class TestTicking:
    def test_idle_does_not_tick(self, engine):
        assert not engine.is_ticking

    def test_running_ticks(self, engine, core):
        core.start()
        assert engine.is_ticking
        assert engine._qt_timer.interval() == TICK_INTERVAL_MS

    def test_stops_when_not_running(self, engine, core, clock):
        core.start()
        clock.advance(10)
        core.pause()
        assert not engine.is_ticking
        core.resume()
        assert engine.is_ticking
        core.reset()
        assert not engine.is_ticking

    def test_tick_reports_remaining_from_deadline(self, engine, core, clock):
        ticks = SignalCollector()
        engine.tick.connect(ticks.slot)
        core.start()
        clock.advance(42.3)
        engine._on_tick()
        assert ticks.last == 1458
        assert core.state.time_left_seconds == 1458

    def test_late_tick_does_not_drift(self, engine, core, clock):
        """A tick that fires minutes late still reports the true remainder."""
        core.start()
        for _ in range(3):
            clock.advance(1)
            engine._on_tick()
        clock.advance(300)   # throttled
        engine._on_tick()
        assert core.state.time_left_seconds == 1500 - 303

    def test_tick_past_deadline_completes(self, engine, core, clock):
        ticks = SignalCollector()
        done = SignalCollector()
        engine.tick.connect(ticks.slot)
        engine.session_completed.connect(done.slot)
        core.start()
        clock.advance(1500)
        engine._on_tick()
        assert core.state.status is SessionStatus.COMPLETED
        assert len(done) == 1
        assert done.last.session_type is SessionType.FOCUS
        assert len(ticks) == 0
        assert not engine.is_ticking

    def test_state_changed_signal(self, engine, core):
        states = SignalCollector()
        engine.state_changed.connect(states.slot)
        core.start()
        core.complete()
        assert [s.status for s in states.items] == [
            SessionStatus.RUNNING, SessionStatus.COMPLETED,
        ]

    def test_custom_interval(self, qapp, core):
        eng = SessionEngine(core, interval_ms=250)
        assert eng._qt_timer.interval() == 250
        eng.shutdown()

    def test_engine_on_running_core_starts_ticking(self, qapp, core):
        core.start()
        eng = SessionEngine(core)
        assert eng.is_ticking
        eng.shutdown()


class TestVisibility:
    def test_hidden_stops_ticking(self, engine, core):
        core.start()
        engine.set_visible(False)
        assert not engine.visible
        assert not engine.is_ticking

    def test_start_while_hidden_does_not_tick(self, engine, core):
        engine.set_visible(False)
        core.start()
        assert not engine.is_ticking
        engine.set_visible(True)
        assert engine.is_ticking

    def test_visible_again_recomputes(self, engine, core, clock):
        core.start()
        engine.set_visible(False)
        clock.advance(600)
        engine.set_visible(True)
        assert core.state.time_left_seconds == 900
        assert engine.is_ticking

    def test_deadline_passed_while_hidden_completes_once(self, engine, core, clock, effect_log):
        done = SignalCollector()
        engine.session_completed.connect(done.slot)
        core.start()
        engine.set_visible(False)
        clock.advance(3 * 3600)
        engine.set_visible(True)
        engine._on_tick()
        assert core.state.status is SessionStatus.COMPLETED
        assert core.state.completed_sessions == 1
        assert len(done) == 1
        assert len(effect_log.rewards) == 1
        assert not engine.is_ticking

    def test_application_state_hook(self, engine, core):
        core.start()
        engine.on_application_state_changed(Qt.ApplicationState.ApplicationInactive)
        assert not engine.is_ticking
        engine.on_application_state_changed(Qt.ApplicationState.ApplicationActive)
        assert engine.visible
        assert engine.is_ticking

    def test_attach(self, engine, qapp):
        engine.attach(qapp)


class TestShutdown:
    def test_shutdown_detaches(self, qapp, core):
        eng = SessionEngine(core)
        core.start()
        eng.shutdown()
        assert not eng.is_ticking
        states = SignalCollector()
        eng.state_changed.connect(states.slot)
        core.reset()
        core.start()
        assert len(states) == 0
        assert not eng.is_ticking
