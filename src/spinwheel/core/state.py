"""
Spin lifecycle phases.

States:
    IDLE: Wheel at rest, rotation frozen, configuration editable
    SPINNING: Constant angular velocity, waiting for a stop request
    DECELERATING: Braking at a constant rate until velocity reaches zero
    STOPPED: Wheel at rest with a resolved winner on display
"""

from enum import Enum
import logging

logger = logging.getLogger(__name__)


class SpinPhase(Enum):
    """Spin lifecycle phases."""
    IDLE = "idle"
    SPINNING = "spinning"
    DECELERATING = "decelerating"
    STOPPED = "stopped"

    @property
    def is_moving(self) -> bool:
        """True while the animation loop is running."""
        return self in (SpinPhase.SPINNING, SpinPhase.DECELERATING)


# Valid phase transitions
VALID_TRANSITIONS: frozenset[tuple[SpinPhase, SpinPhase]] = frozenset({
    # Start
    (SpinPhase.IDLE, SpinPhase.SPINNING),

    # Stop request
    (SpinPhase.SPINNING, SpinPhase.DECELERATING),

    # Natural stop
    (SpinPhase.DECELERATING, SpinPhase.STOPPED),

    # From STOPPED
    (SpinPhase.STOPPED, SpinPhase.SPINNING),  # Spin again
    (SpinPhase.STOPPED, SpinPhase.IDLE),      # Dismiss
})


def can_transition(from_phase: SpinPhase, to_phase: SpinPhase) -> bool:
    """Check if a phase transition is valid."""
    return (from_phase, to_phase) in VALID_TRANSITIONS


# Label shown on the single spin/stop button for each phase
BUTTON_LABELS: dict[SpinPhase, str] = {
    SpinPhase.IDLE: "Spin!",
    SpinPhase.SPINNING: "Stop!",
    SpinPhase.DECELERATING: "Stopping...",
    SpinPhase.STOPPED: "Spin Again!",
}


def button_label(phase: SpinPhase, has_slices: bool = True) -> str:
    """Get the spin button label for a phase."""
    if phase == SpinPhase.IDLE and not has_slices:
        return "Add items first"
    return BUTTON_LABELS[phase]
