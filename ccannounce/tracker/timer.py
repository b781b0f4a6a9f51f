"""Periodic timer on top of the asyncio event loop."""

from __future__ import annotations

import asyncio
from typing import Callable


class PeriodicTimer:
    """Call ``callback(timer)`` every ``period`` seconds until cancelled.

    The first tick happens one full period after construction. Ticks are
    driven by ``loop.call_later`` and the callback runs synchronously inside
    the event loop, so it should only schedule work.
    """

    def __init__(
        self,
        period: float,
        callback: Callable[[PeriodicTimer], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        """Arm the timer.

        Args:
            period: Seconds between ticks
            callback: Called with this timer on every tick
            loop: Event loop to schedule on (defaults to the running loop)

        """
        if period <= 0:
            msg = f"Timer period must be positive, got {period}"
            raise ValueError(msg)
        self.period = period
        self.tick = 0
        self._callback = callback
        self._loop = loop or asyncio.get_running_loop()
        self._handle: asyncio.TimerHandle | None = self._loop.call_later(
            period, self._fire
        )

    def _fire(self) -> None:
        self.tick += 1
        # Re-arm before the callback so that a cancel() from inside it sticks
        self._handle = self._loop.call_later(self.period, self._fire)
        self._callback(self)

    @property
    def is_active(self) -> bool:
        """Whether the timer will fire again."""
        return self._handle is not None

    def cancel(self) -> None:
        """Stop the timer. Safe to call more than once."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def __repr__(self) -> str:
        """Return a debug representation."""
        state = "active" if self.is_active else "cancelled"
        return f"<PeriodicTimer period={self.period} tick={self.tick} {state}>"
