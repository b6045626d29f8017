"""Long-term history of finished focus intervals.

``ProgressRecorder.record`` is the sync hook the session engine calls once
per focus completion.  It

* appends a :class:`FocusSession` row (with its tree type for the forest
  view), and
* rolls the interval into the single :class:`UserProgress` row: points,
  weekly points, focus minutes, session count and the daily streak.

Tree types
----------
    < 20 min   sapling
    < 45 min   tree
    < 90 min   large_tree
    otherwise  ancient_tree
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from ..database.db import get_session
from ..database.models import FocusSession, UserProgress
from ..session.effects import AwardedInterval

logger = logging.getLogger(__name__)

# Ordered ascending; the first threshold above the duration wins.
TREE_TYPES: list[tuple[int, str]] = [
    (20, "sapling"),
    (45, "tree"),
    (90, "large_tree"),
]


def tree_type_for(duration_minutes: int) -> str:
    for limit, name in TREE_TYPES:
        if duration_minutes < limit:
            return name
    return "ancient_tree"


def _from_ms(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000)


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


class ProgressRecorder:
    """Writes completed focus intervals to the database."""

    def record(self, awarded: AwardedInterval) -> int:
        """Persist *awarded*; returns the new ``focus_sessions`` row id."""
        interval = awarded.interval
        completed_at = _from_ms(interval.ended_at)

        with get_session() as db:
            row = FocusSession(
                session_type=interval.session_type.value,
                session_number=interval.session_number,
                duration_minutes=interval.duration_minutes,
                points_earned=awarded.points,
                tree_type=tree_type_for(interval.duration_minutes),
                started_at=_from_ms(interval.started_at),
                completed_at=completed_at,
            )
            db.add(row)

            progress = db.query(UserProgress).first()
            if progress is None:
                progress = UserProgress(
                    points=0, weekly_points=0, focus_minutes=0,
                    sessions_completed=0, current_streak_days=0,
                    longest_streak_days=0,
                )
                db.add(progress)
            self._apply(progress, awarded, completed_at.date())
            db.flush()
            row_id = row.id

        logger.info(
            "recorded focus session #%d (%d min, %d points)",
            interval.session_number, interval.duration_minutes, awarded.points,
        )
        return row_id

    def _apply(self, progress: UserProgress, awarded: AwardedInterval, day: date) -> None:
        week = _week_start(day)
        if progress.week_start is None or week > progress.week_start:
            progress.week_start = week
            progress.weekly_points = 0

        progress.points += awarded.points
        if week == progress.week_start:
            progress.weekly_points += awarded.points
        progress.focus_minutes += awarded.interval.duration_minutes
        progress.sessions_completed += 1
        self._update_streak(progress, day)

    @staticmethod
    def _update_streak(progress: UserProgress, day: date) -> None:
        last = progress.last_session_date
        if last is None:
            progress.current_streak_days = 1
        elif (day - last).days == 1:
            progress.current_streak_days += 1
        elif (day - last).days <= 0:
            pass  # same calendar day, or an older catch-up
        else:
            progress.current_streak_days = 1  # streak broken

        if last is None or day > last:
            progress.last_session_date = day
        if progress.current_streak_days > progress.longest_streak_days:
            progress.longest_streak_days = progress.current_streak_days

    def progress(self) -> UserProgress | None:
        with get_session() as db:
            return db.query(UserProgress).first()

    def recent_sessions(self, limit: int = 20) -> list[FocusSession]:
        with get_session() as db:
            return (
                db.query(FocusSession)
                .order_by(FocusSession.completed_at.desc(), FocusSession.id.desc())
                .limit(limit)
                .all()
            )
