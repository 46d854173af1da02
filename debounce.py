"""Coalesce rapid input changes into a single delayed call."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Generic, Optional, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DELAY_S = 0.75


class DebounceScheduler(Generic[T]):
    """Restartable single-shot timer on the asyncio event loop.

    Every ``on_input_change`` records the value and restarts the quiet period.
    When the period elapses uninterrupted, ``on_fire`` runs once with the most
    recently recorded value. ``close`` drops a pending timer without firing it.
    """

    def __init__(
        self,
        on_fire: Callable[[T], None],
        delay_s: float = DEFAULT_DELAY_S,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._on_fire = on_fire
        self._delay_s = delay_s
        self._loop = loop
        self._timer: asyncio.TimerHandle | None = None
        self._latest: Optional[T] = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def on_input_change(self, value: T) -> None:
        if self._closed:
            return
        self._latest = value
        self._cancel_timer()
        loop = self._loop or asyncio.get_running_loop()
        self._timer = loop.call_later(self._delay_s, self._fire)

    def cancel(self) -> None:
        """Drop a pending call without firing it."""
        self._cancel_timer()

    def close(self) -> None:
        self._closed = True
        self._cancel_timer()

    def _fire(self) -> None:
        self._timer = None
        LOGGER.debug("Quiet period elapsed, firing")
        self._on_fire(self._latest)  # type: ignore[arg-type]

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
