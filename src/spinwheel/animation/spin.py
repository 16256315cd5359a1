"""Spin engine: lifecycle state machine and per-frame wheel physics.

Each frame the wheel advances by its angular velocity. Once a stop is
requested the velocity drops by a constant amount per frame (uniform
deceleration, not friction), and when it reaches zero the wheel freezes and
the slice under the pointer wins.

The physics and phase rules are pure functions over an immutable SpinState;
SpinEngine owns the current state, the frame loop and the callbacks.
"""

from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple
import logging
import random

from spinwheel.animation.ticker import Ticker
from spinwheel.core.events import Event, EventBus, EventType
from spinwheel.core.state import SpinPhase, can_transition
from spinwheel.wheel.layout import determine_winner
from spinwheel.wheel.models import WheelSlice

logger = logging.getLogger(__name__)

# Radians per frame
DEFAULT_VELOCITY_RANGE: Tuple[float, float] = (0.15, 0.25)
# Radians per frame, per frame
DEFAULT_BRAKE_RANGE: Tuple[float, float] = (0.001, 0.004)


@dataclass(frozen=True)
class SpinState:
    """Snapshot of the wheel's motion and lifecycle phase.

    Attributes:
        phase: Current lifecycle phase
        rotation_angle: Accumulated rotation in radians (unbounded)
        angular_velocity: Radians per frame, never negative
        deceleration: Velocity lost per frame once braking
        winner: Resolved slice, only ever set in STOPPED
    """

    phase: SpinPhase = SpinPhase.IDLE
    rotation_angle: float = 0.0
    angular_velocity: float = 0.0
    deceleration: float = 0.0
    winner: Optional[WheelSlice] = None


@dataclass(frozen=True)
class SpinStopped:
    """Emitted by the frame on which the wheel comes to rest."""

    winner: Optional[WheelSlice]
    rotation_angle: float


def start_spin(state: SpinState, velocity: float) -> SpinState:
    """IDLE/STOPPED -> SPINNING. Clears the winner in the same step."""
    if not can_transition(state.phase, SpinPhase.SPINNING):
        return state
    return SpinState(
        phase=SpinPhase.SPINNING,
        rotation_angle=state.rotation_angle,
        angular_velocity=velocity,
        deceleration=0.0,
        winner=None,
    )


def request_stop(state: SpinState, deceleration: float) -> SpinState:
    """SPINNING -> DECELERATING with the given braking rate."""
    if not can_transition(state.phase, SpinPhase.DECELERATING):
        return state
    return replace(state, phase=SpinPhase.DECELERATING, deceleration=deceleration)


def dismiss(state: SpinState) -> SpinState:
    """STOPPED -> IDLE, keeping the final rotation."""
    if not can_transition(state.phase, SpinPhase.IDLE):
        return state
    return SpinState(phase=SpinPhase.IDLE, rotation_angle=state.rotation_angle)


def advance(
    state: SpinState,
    slices: Sequence[WheelSlice],
) -> Tuple[SpinState, Optional[SpinStopped]]:
    """Advance the wheel by one frame.

    Returns the next state, plus a SpinStopped event on the frame where the
    velocity runs out. The stopped state's rotation is exactly the angle the
    winner was resolved against.
    """
    if not state.phase.is_moving:
        return state, None

    angle = state.rotation_angle + state.angular_velocity

    if state.phase == SpinPhase.DECELERATING:
        velocity = state.angular_velocity - state.deceleration
        if velocity <= 0:
            winner = determine_winner(slices, angle)
            stopped = SpinState(
                phase=SpinPhase.STOPPED,
                rotation_angle=angle,
                angular_velocity=0.0,
                deceleration=state.deceleration,
                winner=winner,
            )
            return stopped, SpinStopped(winner=winner, rotation_angle=angle)
        return replace(state, rotation_angle=angle, angular_velocity=velocity), None

    return replace(state, rotation_angle=angle), None


PhaseListener = Callable[[SpinPhase, SpinPhase, SpinState], None]
FrameListener = Callable[[float], None]
WinCallback = Callable[[str], None]


class SpinEngine:
    """Drives a single wheel through idle -> spinning -> decelerating -> stopped.

    Actions that don't apply to the current phase are ignored and return
    False. Only one frame loop is ever alive: starting a spin cancels any
    outstanding frame and bumps a generation counter so stale callbacks
    are dropped.

    The slice layout is read once when a spin starts and used for the whole
    spin, so the winner is always resolved against what was on screen.
    """

    def __init__(
        self,
        ticker: Ticker,
        slices: Callable[[], Sequence[WheelSlice]],
        on_win: Optional[WinCallback] = None,
        event_bus: Optional[EventBus] = None,
        speed_multiplier: float = 1.0,
        stop_speed_multiplier: float = 1.0,
        velocity_range: Tuple[float, float] = DEFAULT_VELOCITY_RANGE,
        brake_range: Tuple[float, float] = DEFAULT_BRAKE_RANGE,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._ticker = ticker
        self._slices_provider = slices
        self._on_win = on_win
        self._event_bus = event_bus
        self._velocity_range = velocity_range
        self._brake_range = brake_range
        self._rng = rng or random.Random()

        self._speed_multiplier = 1.0
        self._stop_speed_multiplier = 1.0
        self.speed_multiplier = speed_multiplier
        self.stop_speed_multiplier = stop_speed_multiplier

        self._state = SpinState()
        self._spin_slices: Tuple[WheelSlice, ...] = ()
        self._frame_handle: Optional[int] = None
        self._generation = 0
        self._closed = False

        self._phase_listeners: List[PhaseListener] = []
        self._frame_listeners: List[FrameListener] = []

    # Read-only state
    @property
    def state(self) -> SpinState:
        return self._state

    @property
    def phase(self) -> SpinPhase:
        return self._state.phase

    @property
    def rotation_angle(self) -> float:
        """Current wheel rotation, read continuously by renderers."""
        return self._state.rotation_angle

    @property
    def angular_velocity(self) -> float:
        return self._state.angular_velocity

    @property
    def winner(self) -> Optional[WheelSlice]:
        return self._state.winner

    @property
    def spin_slices(self) -> Tuple[WheelSlice, ...]:
        """Slice layout captured for the current (or last) spin."""
        return self._spin_slices

    @property
    def is_running(self) -> bool:
        """True while a frame callback is scheduled."""
        return self._frame_handle is not None

    # Multipliers
    @property
    def speed_multiplier(self) -> float:
        return self._speed_multiplier

    @speed_multiplier.setter
    def speed_multiplier(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"speed_multiplier must be positive, got {value}")
        self._speed_multiplier = float(value)

    @property
    def stop_speed_multiplier(self) -> float:
        return self._stop_speed_multiplier

    @stop_speed_multiplier.setter
    def stop_speed_multiplier(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"stop_speed_multiplier must be positive, got {value}")
        self._stop_speed_multiplier = float(value)

    # Listeners
    def add_phase_listener(self, callback: PhaseListener) -> Callable[[], None]:
        """Call ``callback(old, new, state)`` after every phase change."""
        self._phase_listeners.append(callback)
        return lambda: self._remove(self._phase_listeners, callback)

    def add_frame_listener(self, callback: FrameListener) -> Callable[[], None]:
        """Call ``callback(rotation_angle)`` on every animation frame."""
        self._frame_listeners.append(callback)
        return lambda: self._remove(self._frame_listeners, callback)

    @staticmethod
    def _remove(listeners: list, callback) -> None:
        if callback in listeners:
            listeners.remove(callback)

    def set_on_win(self, callback: Optional[WinCallback]) -> None:
        """Set the callback invoked with the winning item id."""
        self._on_win = callback

    # Actions
    def press(self) -> bool:
        """Single-button control: start, stop, or spin again depending on phase."""
        if self.phase in (SpinPhase.IDLE, SpinPhase.STOPPED):
            return self.start_or_resume()
        if self.phase == SpinPhase.SPINNING:
            return self.request_stop()
        return False

    def start_or_resume(self) -> bool:
        """Start a spin from IDLE, or spin again from STOPPED.

        Returns:
            True if a new spin started
        """
        if self._closed or not can_transition(self.phase, SpinPhase.SPINNING):
            logger.debug(f"Start ignored in phase {self.phase.value}")
            return False

        slices = tuple(self._slices_provider())
        if not slices:
            logger.info("Start ignored: wheel has no slices")
            return False

        self._cancel_frame()
        self._generation += 1
        self._spin_slices = slices

        velocity = self._rng.uniform(*self._velocity_range) * self._speed_multiplier
        self._set_state(start_spin(self._state, velocity))
        logger.info(f"Spin started: velocity={velocity:.4f} rad/frame, {len(slices)} slices")
        self._emit(EventType.SPIN_STARTED, {"velocity": velocity})

        self._schedule_frame()
        return True

    def request_stop(self) -> bool:
        """Begin braking. Only valid while SPINNING."""
        if self._closed or self.phase != SpinPhase.SPINNING:
            logger.debug(f"Stop request ignored in phase {self.phase.value}")
            return False

        deceleration = self._rng.uniform(*self._brake_range) * self._stop_speed_multiplier
        self._set_state(request_stop(self._state, deceleration))
        logger.info(f"Stop requested: deceleration={deceleration:.5f} rad/frame^2")
        self._emit(EventType.STOP_REQUESTED, {"deceleration": deceleration})
        return True

    def dismiss_winner(self) -> bool:
        """Clear the winner and return to IDLE. Only valid while STOPPED."""
        if self._closed or self.phase != SpinPhase.STOPPED:
            logger.debug(f"Dismiss ignored in phase {self.phase.value}")
            return False

        self._set_state(dismiss(self._state))
        self._emit(EventType.WINNER_DISMISSED)
        return True

    def close(self) -> None:
        """Stop the frame loop for good (owner torn down)."""
        self._cancel_frame()
        self._generation += 1
        self._closed = True
        logger.debug("SpinEngine closed")

    # Frame loop
    def _schedule_frame(self) -> None:
        generation = self._generation
        self._frame_handle = self._ticker.request_frame(
            lambda: self._on_frame(generation)
        )

    def _cancel_frame(self) -> None:
        if self._frame_handle is not None:
            self._ticker.cancel_frame(self._frame_handle)
            self._frame_handle = None

    def _on_frame(self, generation: int) -> None:
        if self._closed or generation != self._generation:
            return
        self._frame_handle = None

        next_state, stopped = advance(self._state, self._spin_slices)
        self._set_state(next_state)
        self._notify_frame(next_state.rotation_angle)

        if stopped is None:
            if next_state.phase.is_moving:
                self._schedule_frame()
            return

        self._finish(stopped)

    def _finish(self, stopped: SpinStopped) -> None:
        winner = stopped.winner
        if winner is None:
            logger.info("Spin stopped with no winner")
        else:
            logger.info(f"Spin stopped: winner={winner.name!r} ({winner.item_id})")

        self._emit(EventType.SPIN_STOPPED, {
            "winner": winner,
            "item_id": winner.item_id if winner else None,
            "rotation_angle": stopped.rotation_angle,
        })

        if winner is not None and self._on_win is not None:
            try:
                self._on_win(winner.item_id)
            except Exception as e:
                logger.error(f"Error in win callback: {e}")

    # Notification
    def _set_state(self, new_state: SpinState) -> None:
        old_phase = self._state.phase
        self._state = new_state
        if old_phase == new_state.phase:
            return

        logger.debug(f"Spin phase: {old_phase.value} -> {new_state.phase.value}")
        for listener in list(self._phase_listeners):
            try:
                listener(old_phase, new_state.phase, new_state)
            except Exception as e:
                logger.error(f"Error in phase listener: {e}")
        self._emit(EventType.PHASE_CHANGED, {
            "old": old_phase,
            "new": new_state.phase,
        })

    def _notify_frame(self, angle: float) -> None:
        for listener in list(self._frame_listeners):
            try:
                listener(angle)
            except Exception as e:
                logger.error(f"Error in frame listener: {e}")
        self._emit(EventType.ROTATION_CHANGED, {"rotation_angle": angle})

    def _emit(self, event_type: EventType, data: Optional[dict] = None) -> None:
        if self._event_bus is not None:
            self._event_bus.emit(Event(event_type, data=data or {}, source="spin_engine"))
