"""Frame and timer sources for the task scheduler.

A frame clock hands out two kinds of deferred callbacks: display frames and
plain timers. The scheduler never talks to the event loop directly, so tests
can substitute a manual clock and the web module can substitute the browser's
own animation frames.
"""

import asyncio
import math
from collections.abc import Callable
from typing import Any, Protocol

from ..config import get_settings

# Requests arriving this close to a frame boundary are pushed to the next frame.
_FRAME_EPSILON_MS = 1.0


class FrameClock(Protocol):
    """Source of frame callbacks, timers and timestamps.

    A clock that can fail to deliver a requested frame reports the failure
    to ``on_error`` instead of running ``callback``.
    """

    def request_frame(
        self,
        callback: Callable[[], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Any: ...

    def cancel_timer(self, handle: Any) -> None: ...

    def now_ms(self) -> float: ...


class LoopFrameClock:
    """Frame clock backed by the running asyncio event loop.

    Frames are laid on a fixed grid of ``frame_interval_ms``. Every frame
    request made between two grid points fires on the next one, so callbacks
    requested during the same frame run together, the way a browser flushes
    its animation frame queue once per refresh.
    """

    def __init__(
        self,
        frame_interval_ms: float | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """
        Initialize the frame clock.

        Args:
            frame_interval_ms: Frame cadence (defaults to the configured value).
            loop: Event loop to schedule on (defaults to the running loop).
        """
        if frame_interval_ms is None:
            frame_interval_ms = get_settings().frame_interval_ms
        if frame_interval_ms <= 0:
            raise ValueError(f"frame_interval_ms must be positive, got {frame_interval_ms}")
        self.frame_interval_ms = frame_interval_ms
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now_ms(self) -> float:
        return self._get_loop().time() * 1000

    def next_frame_at(self, now_ms: float) -> float:
        """Timestamp of the first frame boundary strictly after ``now_ms``."""
        frame = math.floor((now_ms + _FRAME_EPSILON_MS) / self.frame_interval_ms) + 1
        return frame * self.frame_interval_ms

    def request_frame(
        self,
        callback: Callable[[], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> asyncio.TimerHandle:
        # Loop timers cannot fail, so on_error is never called
        loop = self._get_loop()
        frame_at = self.next_frame_at(loop.time() * 1000)
        return loop.call_at(frame_at / 1000, callback)

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._get_loop().call_later(max(delay_ms, 0) / 1000, callback)

    def cancel_timer(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()
