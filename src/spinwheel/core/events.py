"""
Event bus for the wheel.

Provides pub/sub messaging between the input layer, the session, the spin
engine and renderers. Input events are queued by the window and drained
once per frame; engine events are emitted immediately.
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
import logging
import time
from collections import defaultdict, deque

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Input events
    BUTTON_PRESS = auto()     # Spin / stop / spin again
    DISMISS = auto()          # Close the winner display
    REMOVE_WINNER = auto()    # Delete the winning item
    RANDOMIZE = auto()        # Shuffle slice order
    SPEED_CHANGE = auto()     # data: {"spin": float, "stop": float}

    # Spin events
    SPIN_STARTED = auto()
    STOP_REQUESTED = auto()
    ROTATION_CHANGED = auto()  # Every animation tick
    SPIN_STOPPED = auto()      # Natural stop, data carries the winner
    WINNER_DISMISSED = auto()
    PHASE_CHANGED = auto()

    # Configuration events
    CONFIG_CHANGED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type (EventType enum or custom string)
        data: Event payload
        source: Component that emitted the event
        timestamp: When event was created
    """
    type: EventType | str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for component communication.

    Events can be emitted immediately or queued for processing on the
    next frame.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType | str, list[Handler]] = defaultdict(list)
        self._queue: deque[Event] = deque()
        self._event_history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        event_type: EventType | str,
        handler: Handler
    ) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to listen for
            handler: Callback function

        Returns:
            Unsubscribe function
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Emit an event immediately."""
        self._add_to_history(event)
        self._dispatch(event)

    def queue_event(self, event: Event) -> None:
        """Queue an event for the next process_queue() call."""
        self._queue.append(event)

    def process_queue(self) -> int:
        """Dispatch all queued events in order.

        Events queued by handlers while draining wait for the next call.

        Returns:
            Number of events processed
        """
        count = len(self._queue)
        for _ in range(count):
            self.emit(self._queue.popleft())
        return count

    def _dispatch(self, event: Event) -> None:
        for handler in list(self._handlers.get(event.type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type}: {e}")

    def _add_to_history(self, event: Event) -> None:
        """Add event to history, maintaining limit."""
        # Per-frame rotation updates would flush everything else out
        if event.type == EventType.ROTATION_CHANGED:
            return
        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

    def get_history(
        self,
        event_type: EventType | str | None = None,
        limit: int = 10
    ) -> list[Event]:
        """Get recent events from history."""
        history = self._event_history
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]


# Convenience functions for creating common events
def button_press_event(source: str = "button") -> Event:
    """Create a spin button press event."""
    return Event(EventType.BUTTON_PRESS, source=source)


def dismiss_event(source: str = "keyboard") -> Event:
    """Create a winner dismiss event."""
    return Event(EventType.DISMISS, source=source)


def speed_change_event(spin: float, stop: float, source: str = "keyboard") -> Event:
    """Create a speed multiplier change event."""
    return Event(EventType.SPEED_CHANGE, data={"spin": spin, "stop": stop}, source=source)
