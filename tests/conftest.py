"""
Pytest fixtures for tests.

Everything runs against a FrameTicker stepped by hand and a seeded RNG,
so spins are deterministic and need no display or event loop.
"""

import random

import pytest

from spinwheel.animation.ticker import FrameTicker
from spinwheel.session import WheelSession
from spinwheel.storage.json_store import MemoryConfigStore
from spinwheel.wheel.config import WheelConfig
from spinwheel.wheel.layout import compute_slices
from spinwheel.wheel.models import DEFAULT_ITEMS
from spinwheel.wheel.order import default_slice_order


TEST_SEED = 1234
"""Seed shared by every test RNG."""


@pytest.fixture
def rng():
    """Seeded random generator."""
    return random.Random(TEST_SEED)


@pytest.fixture
def ticker():
    """Frame ticker advanced explicitly by the test."""
    return FrameTicker()


@pytest.fixture
def default_items():
    """Pizza x3, Sushi x2, Tacos x1."""
    return list(DEFAULT_ITEMS)


@pytest.fixture
def default_slices(default_items):
    """Slices for the default items in grouped order [P, P, P, S, S, T]."""
    return compute_slices(default_items, default_slice_order(default_items))


@pytest.fixture
def store():
    """Empty in-memory store (loads the defaults)."""
    return MemoryConfigStore()


@pytest.fixture
def config(store, rng):
    """Default configuration saving to the in-memory store."""
    return WheelConfig.from_store(store, rng=rng)


@pytest.fixture
def session(ticker, store, rng):
    """Wheel session over the default items."""
    wheel_session = WheelSession(ticker=ticker, store=store, rng=rng)
    yield wheel_session
    wheel_session.close()


@pytest.fixture
def spin_to_stop(ticker):
    """Press spin, let it run some frames, press stop, run until at rest."""

    def run(wheel_session, frames=10):
        assert wheel_session.press()
        for _ in range(frames):
            ticker.tick()
        assert wheel_session.press()
        ticker.run_until_idle()
        return wheel_session.winner

    return run
