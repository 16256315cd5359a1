"""Animation module for the spin wheel."""

from spinwheel.animation.ticker import Ticker, FrameTicker, AsyncioTicker
from spinwheel.animation.spin import (
    SpinEngine,
    SpinState,
    SpinStopped,
    advance,
    start_spin,
    request_stop,
    dismiss,
)

__all__ = [
    # Ticker
    "Ticker",
    "FrameTicker",
    "AsyncioTicker",
    # Engine
    "SpinEngine",
    "SpinState",
    "SpinStopped",
    "advance",
    "start_spin",
    "request_stop",
    "dismiss",
]
