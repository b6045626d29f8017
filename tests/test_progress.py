"""Tests for point strategies and the local progress history."""

from datetime import datetime

import pytest

from boostly.database.db import get_session
from boostly.database.models import FocusSession, UserProgress
from boostly.gamification.points import (
    POINTS_PER_MINUTE,
    StreakPointsCalculator,
    current_streak_days,
    flat_rate_points,
    make_reward_calculator,
)
from boostly.gamification.progress import ProgressRecorder, tree_type_for
from boostly.session.core import SessionCore
from boostly.session.effects import AwardedInterval, CompletionEffects
from boostly.session.persistence import SessionPersistence
from boostly.session.transitions import CompletedInterval
from boostly.session.types import SessionType

from helpers import FakeClock, MemoryStore, run_interval


def ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


def awarded(end_ms, minutes=25, points=50, number=1):
    return AwardedInterval(
        CompletedInterval(
            session_type=SessionType.FOCUS,
            session_number=number,
            duration_minutes=minutes,
            started_at=end_ms - minutes * 60_000,
            ended_at=end_ms,
            completed_sessions=number,
            next_type=SessionType.SHORT_BREAK,
        ),
        points,
    )


# ═══════════════════════════════════════════════════════════════════════════
#  POINTS
# ═══════════════════════════════════════════════════════════════════════════


class TestFlatRate:
    @pytest.mark.parametrize("session_type, minutes, expected", [
        (SessionType.FOCUS, 25, 50),
        (SessionType.FOCUS, 50, 100),
        (SessionType.SHORT_BREAK, 5, 5),
        (SessionType.LONG_BREAK, 15, 22),
        (SessionType.FOCUS, 0, 0),
    ])
    def test_rates(self, session_type, minutes, expected):
        assert flat_rate_points(session_type, minutes) == expected

    def test_rates_cover_every_type(self):
        assert set(POINTS_PER_MINUTE) == set(SessionType)


class TestStreakCalculator:
    def test_bonus_grows_and_caps(self):
        calc = StreakPointsCalculator(lambda: 0)
        assert calc.streak_bonus(0) == 0
        assert calc.streak_bonus(3) == 15
        assert calc.streak_bonus(30) == StreakPointsCalculator.POINTS_STREAK_CAP

    def test_bonus_only_on_focus(self):
        calc = StreakPointsCalculator(lambda: 4)
        assert calc(SessionType.FOCUS, 25) == 70
        assert calc(SessionType.SHORT_BREAK, 5) == 5

    def test_default_provider_reads_database(self):
        with get_session() as db:
            db.query(UserProgress).first().current_streak_days = 2
        assert current_streak_days() == 2
        assert StreakPointsCalculator()(SessionType.FOCUS, 25) == 60

    def test_lookup(self):
        assert make_reward_calculator("flat") is flat_rate_points
        assert isinstance(make_reward_calculator("streak"), StreakPointsCalculator)
        with pytest.raises(ValueError):
            make_reward_calculator("lottery")


# ═══════════════════════════════════════════════════════════════════════════
#  HISTORY
# ═══════════════════════════════════════════════════════════════════════════


class TestTreeTypes:
    @pytest.mark.parametrize("minutes, tree", [
        (15, "sapling"),
        (19, "sapling"),
        (20, "tree"),
        (25, "tree"),
        (50, "large_tree"),
        (89, "large_tree"),
        (90, "ancient_tree"),
        (120, "ancient_tree"),
    ])
    def test_thresholds(self, minutes, tree):
        assert tree_type_for(minutes) == tree


class TestProgressRecorder:
    def test_record_inserts_session_row(self):
        recorder = ProgressRecorder()
        row_id = recorder.record(awarded(ms(2024, 3, 4, 10, 0), minutes=50, points=100))
        assert row_id is not None
        rows = recorder.recent_sessions()
        assert len(rows) == 1
        row = rows[0]
        assert row.duration_minutes == 50
        assert row.points_earned == 100
        assert row.tree_type == "large_tree"
        assert row.session_type == "focus"
        assert row.completed_at == datetime(2024, 3, 4, 10, 0)
        assert row.started_at == datetime(2024, 3, 4, 9, 10)

    def test_totals(self):
        recorder = ProgressRecorder()
        recorder.record(awarded(ms(2024, 3, 4, 10, 0)))
        recorder.record(awarded(ms(2024, 3, 4, 11, 0), number=2))
        progress = recorder.progress()
        assert progress.points == 100
        assert progress.focus_minutes == 50
        assert progress.sessions_completed == 2
        assert progress.focus_hours == pytest.approx(50 / 60)

    def test_streak_consecutive_days(self):
        recorder = ProgressRecorder()
        recorder.record(awarded(ms(2024, 3, 4, 10, 0)))
        recorder.record(awarded(ms(2024, 3, 4, 18, 0)))
        recorder.record(awarded(ms(2024, 3, 5, 9, 0)))
        recorder.record(awarded(ms(2024, 3, 6, 9, 0)))
        progress = recorder.progress()
        assert progress.current_streak_days == 3
        assert progress.longest_streak_days == 3

    def test_streak_broken(self):
        recorder = ProgressRecorder()
        recorder.record(awarded(ms(2024, 3, 4, 10, 0)))
        recorder.record(awarded(ms(2024, 3, 5, 10, 0)))
        recorder.record(awarded(ms(2024, 3, 9, 10, 0)))
        progress = recorder.progress()
        assert progress.current_streak_days == 1
        assert progress.longest_streak_days == 2

    def test_weekly_points_reset_on_new_week(self):
        recorder = ProgressRecorder()
        recorder.record(awarded(ms(2024, 3, 6, 10, 0), points=40))   # Wednesday
        recorder.record(awarded(ms(2024, 3, 8, 10, 0), points=30))   # Friday
        assert recorder.progress().weekly_points == 70
        recorder.record(awarded(ms(2024, 3, 11, 10, 0), points=20))  # next Monday
        progress = recorder.progress()
        assert progress.weekly_points == 20
        assert progress.points == 90

    def test_creates_progress_row_if_missing(self):
        with get_session() as db:
            db.query(UserProgress).delete()
        ProgressRecorder().record(awarded(ms(2024, 3, 4, 10, 0)))
        assert ProgressRecorder().progress().points == 50

    def test_recent_sessions_newest_first(self):
        recorder = ProgressRecorder()
        for day in (4, 6, 5):
            recorder.record(awarded(ms(2024, 3, day, 10, 0)))
        days = [row.completed_at.day for row in recorder.recent_sessions(limit=2)]
        assert days == [6, 5]

    def test_early_completion_not_recorded_in_future(self):
        clock = FakeClock(ms(2024, 3, 4, 23, 50))
        effects = CompletionEffects(remote_sync=ProgressRecorder().record)
        core = SessionCore(SessionPersistence(MemoryStore()), effects=effects, clock=clock)
        core.start()              # deadline is 00:15 the next day
        clock.advance(5 * 60)
        core.complete()
        row = ProgressRecorder().recent_sessions()[0]
        assert row.completed_at == datetime(2024, 3, 4, 23, 55)
        assert ProgressRecorder().progress().last_session_date.day == 4

    def test_wired_into_engine(self):
        clock = FakeClock()
        effects = CompletionEffects(
            reward_calculator=flat_rate_points,
            remote_sync=ProgressRecorder().record,
        )
        core = SessionCore(SessionPersistence(MemoryStore()), effects=effects, clock=clock)
        run_interval(core, clock)     # focus
        run_interval(core, clock)     # break
        with get_session() as db:
            rows = db.query(FocusSession).all()
            assert len(rows) == 1
            assert rows[0].points_earned == 50
            assert db.query(UserProgress).first().points == 50
