"""Core framework components for the spin wheel."""

from .state import SpinPhase, can_transition
from .events import EventBus, Event, EventType

__all__ = ["SpinPhase", "can_transition", "EventBus", "Event", "EventType"]
