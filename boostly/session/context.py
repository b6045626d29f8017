"""Ownership of the timer for one signed-in user.

There is no module-level timer.  The application opens a
:class:`SessionContext` when a user signs in, hands it (or its ``core``)
to whatever needs the timer, and closes it on sign-out.
:class:`SessionRegistry` keeps the open contexts by user id.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject

from .core import Clock, SessionCore
from .effects import CompletionEffects
from .engine import SessionEngine
from .persistence import STORAGE_KEY, KeyValueStore, SessionPersistence
from .types import DEFAULT_CONFIG, InvalidConfigError, SessionConfig

logger = logging.getLogger(__name__)


def storage_key_for(user_id: str | None) -> str:
    return STORAGE_KEY if user_id is None else f"{STORAGE_KEY}:{user_id}"


class SessionContext:
    """One user's :class:`SessionCore` plus the tick loop driving it."""

    def __init__(self, user_id: str | None, core: SessionCore, engine: SessionEngine) -> None:
        self.user_id = user_id
        self.core = core
        self.engine = engine
        self._closed = False

    @classmethod
    def open(
        cls,
        user_id: str | None = None,
        *,
        settings=None,
        store: KeyValueStore | None = None,
        effects: CompletionEffects | None = None,
        clock: Clock | None = None,
        parent: QObject | None = None,
    ) -> SessionContext:
        """Build the timer from *settings* (loaded from disk if omitted).

        Without explicit *effects* the defaults are installed: the
        configured points strategy, the completion chimes and the local
        history recorder.
        """
        from ..settings import load_settings

        settings = settings or load_settings()
        if store is None:
            from ..database.store import SqlKeyValueStore

            store = SqlKeyValueStore()
        if effects is None:
            effects = default_effects(settings, parent)

        core = SessionCore(
            SessionPersistence(store, key=storage_key_for(user_id)),
            effects=effects,
            clock=clock,
            pausable=settings.pausable,
            default_config=_config_from(settings),
        )
        engine = SessionEngine(core, parent, interval_ms=settings.tick_interval_ms)
        logger.info("session context opened for %s", user_id or "local user")
        return cls(user_id, core, engine)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop ticking and drop subscribers.  The state stays persisted."""
        if self._closed:
            return
        self.engine.shutdown()
        self.core.close()
        self._closed = True
        logger.info("session context closed for %s", self.user_id or "local user")


def _config_from(settings) -> SessionConfig:
    """The settings' timer config, or the defaults if it does not validate."""
    try:
        return settings.session_config()
    except InvalidConfigError as exc:
        logger.warning("ignoring invalid timer settings (%s); using defaults", exc)
        return DEFAULT_CONFIG


def default_effects(settings, parent: QObject | None = None) -> CompletionEffects:
    from ..audio.sounds import SoundManager
    from ..gamification.points import flat_rate_points, make_reward_calculator
    from ..gamification.progress import ProgressRecorder

    try:
        reward_calculator = make_reward_calculator(settings.points_strategy)
    except ValueError as exc:
        logger.warning("%s; using flat rate points", exc)
        reward_calculator = flat_rate_points

    sounds = SoundManager(parent)
    sounds.set_volume(settings.sound_volume)
    sounds.set_enabled(settings.sound_enabled)
    return CompletionEffects(
        reward_calculator=reward_calculator,
        notifier=sounds.notify,
        remote_sync=ProgressRecorder().record,
    )


class SessionRegistry:
    """Open contexts by user id."""

    def __init__(self) -> None:
        self._contexts: dict[str | None, SessionContext] = {}

    def __contains__(self, user_id: str | None) -> bool:
        return user_id in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)

    def open(self, user_id: str | None = None, **kwargs) -> SessionContext:
        """Return the user's open context, creating it on first use."""
        context = self._contexts.get(user_id)
        if context is None or context.closed:
            context = SessionContext.open(user_id, **kwargs)
            self._contexts[user_id] = context
        return context

    def get(self, user_id: str | None = None) -> SessionContext | None:
        return self._contexts.get(user_id)

    def sign_out(self, user_id: str | None = None) -> None:
        context = self._contexts.pop(user_id, None)
        if context is not None:
            context.close()

    def close_all(self) -> None:
        for user_id in list(self._contexts):
            self.sign_out(user_id)
