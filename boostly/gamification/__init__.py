"""Gamification package."""

from .points import (
    flat_rate_points,
    make_reward_calculator,
    StreakPointsCalculator,
    POINTS_PER_MINUTE,
    STRATEGIES,
)
from .progress import ProgressRecorder, tree_type_for, TREE_TYPES

__all__ = [
    "flat_rate_points",
    "make_reward_calculator",
    "StreakPointsCalculator",
    "POINTS_PER_MINUTE",
    "STRATEGIES",
    "ProgressRecorder",
    "tree_type_for",
    "TREE_TYPES",
]
