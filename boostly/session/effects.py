"""Side effects fired once per completed interval.

The engine only decides *when* an interval completed.  What that is worth
in points, how the user is told, and where history is kept are decided
by the collaborators plugged in here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .transitions import CompletedInterval
from .types import SessionType

logger = logging.getLogger(__name__)

RewardCalculator = Callable[[SessionType, int], int]
Notifier = Callable[[CompletedInterval], None]


@dataclass(frozen=True)
class AwardedInterval:
    """A finished focus interval plus the points it earned."""

    interval: CompletedInterval
    points: int


RemoteSync = Callable[[AwardedInterval], None]


@dataclass
class CompletionEffects:
    """Bundle of optional collaborators.

    ``reward_calculator``  focus completions only, exactly once each.
    ``notifier``           every completion (focus or break).
    ``remote_sync``        focus completions only, fire-and-forget.
    """

    reward_calculator: Optional[RewardCalculator] = None
    notifier: Optional[Notifier] = None
    remote_sync: Optional[RemoteSync] = None

    def dispatch(self, event: CompletedInterval) -> AwardedInterval | None:
        """Run the collaborators for *event*.

        Failures are logged; the state transition that produced *event*
        has already been committed and is never undone.
        """
        awarded: AwardedInterval | None = None

        if event.is_focus:
            awarded = AwardedInterval(event, self._points_for(event))

        if self.notifier is not None:
            try:
                self.notifier(event)
            except Exception:
                logger.exception("completion notifier failed")

        if awarded is not None and self.remote_sync is not None:
            try:
                self.remote_sync(awarded)
            except Exception:
                logger.exception(
                    "syncing focus session #%d failed", event.session_number
                )
        return awarded

    def _points_for(self, event: CompletedInterval) -> int:
        if self.reward_calculator is None:
            return 0
        try:
            return int(self.reward_calculator(event.session_type, event.duration_minutes))
        except Exception:
            logger.exception("reward calculator failed; awarding 0 points")
            return 0
