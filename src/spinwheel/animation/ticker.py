"""Frame scheduling for the spin animation.

The engine never sleeps or reads the clock. It asks a ticker for "the next
frame" and the ticker decides when that is: the pygame loop drives a
FrameTicker once per display refresh, headless runs use AsyncioTicker, and
tests step a FrameTicker by hand.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional
import asyncio
import logging

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class Ticker(ABC):
    """Schedules one-shot callbacks for the next animation frame."""

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> int:
        """Run ``callback`` on the next frame. Returns a cancellation handle."""

    @abstractmethod
    def cancel_frame(self, handle: int) -> None:
        """Cancel a pending callback. Unknown handles are ignored."""

    @property
    @abstractmethod
    def pending(self) -> int:
        """Number of callbacks waiting for a frame."""


class FrameTicker(Ticker):
    """Ticker advanced explicitly, one frame per ``tick()`` call."""

    def __init__(self) -> None:
        self._next_handle = 0
        self._callbacks: Dict[int, FrameCallback] = {}
        self._frame = 0

    @property
    def frame(self) -> int:
        """Number of frames ticked so far."""
        return self._frame

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def request_frame(self, callback: FrameCallback) -> int:
        self._next_handle += 1
        self._callbacks[self._next_handle] = callback
        return self._next_handle

    def cancel_frame(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    def tick(self) -> int:
        """Run every callback requested before this frame.

        Callbacks requested while ticking wait for the next frame.

        Returns:
            Number of callbacks run
        """
        self._frame += 1
        due, self._callbacks = self._callbacks, {}
        for callback in due.values():
            callback()
        return len(due)

    def run_until_idle(self, max_frames: int = 100_000) -> int:
        """Tick until nothing is pending.

        Returns:
            Number of frames ticked

        Raises:
            RuntimeError: If callbacks are still pending after max_frames
        """
        frames = 0
        while self._callbacks:
            if frames >= max_frames:
                raise RuntimeError(f"Ticker still busy after {max_frames} frames")
            self.tick()
            frames += 1
        return frames


class AsyncioTicker(Ticker):
    """Ticker backed by the running asyncio loop at a fixed frame rate."""

    def __init__(
        self,
        fps: int = 60,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self._interval = 1.0 / fps
        self._loop = loop
        self._next_handle = 0
        self._timers: Dict[int, asyncio.TimerHandle] = {}

    @property
    def pending(self) -> int:
        return len(self._timers)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> int:
        self._next_handle += 1
        handle = self._next_handle

        def fire() -> None:
            self._timers.pop(handle, None)
            callback()

        self._timers[handle] = self._get_loop().call_later(self._interval, fire)
        return handle

    def cancel_frame(self, handle: int) -> None:
        timer = self._timers.pop(handle, None)
        if timer is not None:
            timer.cancel()

    def cancel_all(self) -> None:
        """Cancel every pending callback."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
