"""
Tests for spin phases and transitions.
"""

import pytest

from spinwheel.core.state import SpinPhase, button_label, can_transition


class TestTransitions:
    """Tests for the phase transition table."""

    @pytest.mark.parametrize(
        "old,new",
        [
            (SpinPhase.IDLE, SpinPhase.SPINNING),
            (SpinPhase.SPINNING, SpinPhase.DECELERATING),
            (SpinPhase.DECELERATING, SpinPhase.STOPPED),
            (SpinPhase.STOPPED, SpinPhase.SPINNING),
            (SpinPhase.STOPPED, SpinPhase.IDLE),
        ],
    )
    def test_allowed(self, old, new):
        assert can_transition(old, new)

    @pytest.mark.parametrize(
        "old,new",
        [
            (SpinPhase.IDLE, SpinPhase.STOPPED),
            (SpinPhase.IDLE, SpinPhase.DECELERATING),
            (SpinPhase.SPINNING, SpinPhase.STOPPED),
            (SpinPhase.SPINNING, SpinPhase.IDLE),
            (SpinPhase.DECELERATING, SpinPhase.SPINNING),
            (SpinPhase.DECELERATING, SpinPhase.IDLE),
        ],
    )
    def test_rejected(self, old, new):
        assert not can_transition(old, new)

    def test_is_moving(self):
        assert SpinPhase.SPINNING.is_moving
        assert SpinPhase.DECELERATING.is_moving
        assert not SpinPhase.IDLE.is_moving
        assert not SpinPhase.STOPPED.is_moving


class TestButtonLabel:
    """Tests for the spin button label."""

    def test_labels(self):
        assert button_label(SpinPhase.IDLE) == "Spin!"
        assert button_label(SpinPhase.SPINNING) == "Stop!"
        assert button_label(SpinPhase.DECELERATING) == "Stopping..."
        assert button_label(SpinPhase.STOPPED) == "Spin Again!"

    def test_empty_wheel(self):
        assert button_label(SpinPhase.IDLE, has_slices=False) == "Add items first"
