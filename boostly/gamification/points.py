"""Point strategies for completed intervals.

The session engine never prices an interval itself; the application
installs one of these as the ``reward_calculator``.

Flat rate (``flat_rate_points``)
--------------------------------
- Focus:        2 points per minute   (25 min → 50)
- Short break:  1 point per minute
- Long break:   1.5 points per minute, rounded

Streak scaled (``StreakPointsCalculator``)
------------------------------------------
Flat rate plus ``streak_days x 5`` bonus points on focus intervals,
capped at 50.  The streak comes from a provider callable so the
strategy stays testable without a database.
"""

from __future__ import annotations

from typing import Callable

from ..database.db import get_session
from ..database.models import UserProgress
from ..session.types import SessionType

# ── rates (easy to adjust) ───────────────────────────────────────────────

POINTS_PER_MINUTE: dict[SessionType, float] = {
    SessionType.FOCUS: 2.0,
    SessionType.SHORT_BREAK: 1.0,
    SessionType.LONG_BREAK: 1.5,
}

STRATEGIES = ("flat", "streak")


def flat_rate_points(session_type: SessionType, duration_minutes: int) -> int:
    return round(POINTS_PER_MINUTE[session_type] * max(0, duration_minutes))


def current_streak_days() -> int:
    """Streak stored on the progress row (0 if there is none yet)."""
    with get_session() as db:
        progress = db.query(UserProgress).first()
        return 0 if progress is None else progress.current_streak_days


class StreakPointsCalculator:
    """Flat rate with a bonus that grows with the daily streak."""

    POINTS_STREAK_PER_DAY = 5
    POINTS_STREAK_CAP = 50

    def __init__(self, streak_provider: Callable[[], int] = current_streak_days) -> None:
        self._streak_provider = streak_provider

    def streak_bonus(self, streak_days: int) -> int:
        return min(max(0, streak_days) * self.POINTS_STREAK_PER_DAY, self.POINTS_STREAK_CAP)

    def __call__(self, session_type: SessionType, duration_minutes: int) -> int:
        points = flat_rate_points(session_type, duration_minutes)
        if session_type is SessionType.FOCUS:
            points += self.streak_bonus(self._streak_provider())
        return points


def make_reward_calculator(name: str) -> Callable[[SessionType, int], int]:
    """Look up a strategy by its settings name (``"flat"`` / ``"streak"``)."""
    if name == "flat":
        return flat_rate_points
    if name == "streak":
        return StreakPointsCalculator()
    raise ValueError(f"unknown points strategy {name!r}; expected one of {STRATEGIES}")
