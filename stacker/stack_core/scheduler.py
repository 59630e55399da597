"""
Tick Scheduler
==============

Single-slot frame scheduler. At most one tick callback is pending at any
time; scheduling a new one cancels the previous one first, so a session can
never run two oscillation loops at once.
"""

from __future__ import annotations

from typing import Callable, Optional

TickCallback = Callable[[Optional[float]], None]


class TickScheduler:
    """
    Holds the next pending tick callback.

    The tick source calls `fire(dt)` once per frame. The callback is removed
    before it runs; a looping callback reschedules itself.
    """

    def __init__(self):
        self._pending: Optional[TickCallback] = None
        self._handle: int = 0
        self._fired: int = 0

    @property
    def pending(self) -> bool:
        """True if a tick is scheduled."""
        return self._pending is not None

    @property
    def handle(self) -> int:
        """Identifier of the most recent scheduling."""
        return self._handle

    @property
    def ticks_fired(self) -> int:
        return self._fired

    def schedule(self, callback: TickCallback) -> int:
        """
        Schedule `callback` for the next tick, replacing any pending one.

        Returns:
            Handle of the new scheduling.
        """
        self.cancel()
        self._pending = callback
        self._handle += 1
        return self._handle

    def cancel(self, handle: Optional[int] = None) -> None:
        """
        Cancel the pending tick. Safe to call repeatedly.

        Args:
            handle: If given, only cancel when it is still the current one.
        """
        if handle is not None and handle != self._handle:
            return
        self._pending = None

    def fire(self, dt: Optional[float] = None) -> bool:
        """
        Run the pending callback, if any.

        Args:
            dt: Seconds since the previous frame, or None for one nominal tick.

        Returns:
            True if a callback ran.
        """
        callback = self._pending
        if callback is None:
            return False
        self._pending = None
        self._fired += 1
        callback(dt)
        return True
