"""Session timer package."""

from .types import (
    SessionType,
    SessionStatus,
    SessionConfig,
    SessionState,
    BoostlyError,
    InvalidConfigError,
    CorruptStateError,
    DEFAULT_CONFIG,
    SESSION_LABELS,
)
from .transitions import CompletedInterval
from .effects import AwardedInterval, CompletionEffects
from .hub import SubscriptionHub
from .persistence import SessionPersistence, Restored, STORAGE_KEY
from .core import SessionCore
from .engine import SessionEngine, TICK_INTERVAL_MS
from .context import SessionContext, SessionRegistry

__all__ = [
    "SessionType",
    "SessionStatus",
    "SessionConfig",
    "SessionState",
    "BoostlyError",
    "InvalidConfigError",
    "CorruptStateError",
    "DEFAULT_CONFIG",
    "SESSION_LABELS",
    "CompletedInterval",
    "AwardedInterval",
    "CompletionEffects",
    "SubscriptionHub",
    "SessionPersistence",
    "Restored",
    "STORAGE_KEY",
    "SessionCore",
    "SessionEngine",
    "TICK_INTERVAL_MS",
    "SessionContext",
    "SessionRegistry",
]
