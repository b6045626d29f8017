"""Observer fan-out for committed session changes."""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

Observer = Callable[[], None]


class SubscriptionHub:
    """Calls every subscribed zero-argument callback once per ``notify()``.

    The observer list is snapshotted before each pass, so subscribing or
    unsubscribing from inside a callback only affects the next pass.
    """

    def __init__(self) -> None:
        self._observers: list[Observer] = []

    def __len__(self) -> int:
        return len(self._observers)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer*; returns a function that removes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            try:
                self._observers.remove(observer)
            except ValueError:
                pass  # already removed

        return unsubscribe

    def notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer()
            except Exception:
                logger.exception("session observer %r failed", observer)

    def clear(self) -> None:
        self._observers.clear()
