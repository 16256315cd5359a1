"""Wheel session: one wheel, its configuration, spin engine and win tally.

The session is the seam between input (keyboard, buttons, event bus) and
the core. It locks the configuration until the winner is dismissed, applies
the remove-winning-slice preference, and counts wins per item.
"""

from contextlib import contextmanager
from typing import Iterator, Optional
import logging
import random

from spinwheel.animation.spin import SpinEngine
from spinwheel.animation.ticker import Ticker
from spinwheel.core.events import Event, EventBus, EventType
from spinwheel.core.state import SpinPhase, button_label
from spinwheel.settings import SpinSettings
from spinwheel.storage.json_store import ConfigStore, MemoryConfigStore, Preferences
from spinwheel.wheel.config import WheelConfig, parse_item_lines
from spinwheel.wheel.models import WheelItem, WheelSlice

logger = logging.getLogger(__name__)


class WheelSession:
    """Wires a WheelConfig to a SpinEngine for a single wheel."""

    def __init__(
        self,
        ticker: Ticker,
        store: Optional[ConfigStore] = None,
        config: Optional[WheelConfig] = None,
        event_bus: Optional[EventBus] = None,
        spin_settings: Optional[SpinSettings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store: ConfigStore = store or MemoryConfigStore()
        self.event_bus = event_bus or EventBus()
        self.config = config or WheelConfig.from_store(self.store, rng=rng)
        self.preferences: Preferences = self.store.load_preferences()
        self.wins: dict[str, int] = {}

        spin = spin_settings or SpinSettings()
        self.engine = SpinEngine(
            ticker=ticker,
            slices=lambda: self.config.slices,
            on_win=self._record_win,
            event_bus=self.event_bus,
            speed_multiplier=spin.speed_multiplier,
            stop_speed_multiplier=spin.stop_speed_multiplier,
            velocity_range=spin.velocity_range,
            brake_range=spin.brake_range,
            rng=rng,
        )
        self.engine.add_phase_listener(self._on_phase_change)
        self.config.add_listener(self._on_config_change)

        self._unsubscribers = [
            self.event_bus.subscribe(EventType.BUTTON_PRESS, lambda e: self.press()),
            self.event_bus.subscribe(EventType.DISMISS, lambda e: self.dismiss_winner()),
            self.event_bus.subscribe(EventType.REMOVE_WINNER, lambda e: self.remove_winner()),
            self.event_bus.subscribe(EventType.RANDOMIZE, lambda e: self.randomize()),
            self.event_bus.subscribe(EventType.SPEED_CHANGE, self._on_speed_change),
        ]

        logger.info(
            f"WheelSession ready: {len(self.config.items)} items, "
            f"remove_winning_slice={self.remove_winning_slice}"
        )

    # State
    @property
    def phase(self) -> SpinPhase:
        return self.engine.phase

    @property
    def winner(self) -> Optional[WheelSlice]:
        return self.engine.winner

    @property
    def slices(self) -> list[WheelSlice]:
        """Layout to draw: the captured one while moving, the live one otherwise."""
        if self.phase == SpinPhase.IDLE:
            return self.config.slices
        return list(self.engine.spin_slices)

    @property
    def can_edit(self) -> bool:
        """Configuration edits are offered only while idle."""
        return self.phase == SpinPhase.IDLE

    @property
    def button_label(self) -> str:
        return button_label(self.phase, has_slices=bool(self.config.slices))

    @property
    def title(self) -> str:
        return self.preferences.title

    @title.setter
    def title(self, value: str) -> None:
        self.preferences = Preferences(title=value, remove_winning_slice=self.remove_winning_slice)
        self.store.save_preferences(self.preferences)

    @property
    def remove_winning_slice(self) -> bool:
        return self.preferences.remove_winning_slice

    @remove_winning_slice.setter
    def remove_winning_slice(self, value: bool) -> None:
        self.preferences = Preferences(title=self.title, remove_winning_slice=value)
        self.store.save_preferences(self.preferences)
        logger.info(f"Remove winning slice: {'on' if value else 'off'}")

    def win_count(self, item_id: str) -> int:
        return self.wins.get(item_id, 0)

    def recent_winners(self, limit: int = 5) -> list[str]:
        """Names of the latest winners, oldest first."""
        stops = self.event_bus.get_history(EventType.SPIN_STOPPED, limit)
        return [e.data["winner"].name for e in stops if e.data.get("winner") is not None]

    # Actions
    def press(self) -> bool:
        """Spin button: start, stop, or spin again depending on phase."""
        if self.phase == SpinPhase.STOPPED:
            return self.spin_again()
        return self.engine.press()

    def spin_again(self) -> bool:
        """Start a new spin straight from STOPPED."""
        if self.phase != SpinPhase.STOPPED:
            return False
        self._consume_winner()
        if self.engine.start_or_resume():
            return True
        # The last slice was consumed; nothing left to spin
        self.engine.dismiss_winner()
        return False

    def dismiss_winner(self) -> bool:
        """Close the winner display and go back to IDLE."""
        if self.phase != SpinPhase.STOPPED:
            return False
        self._consume_winner()
        return self.engine.dismiss_winner()

    def remove_winner(self) -> bool:
        """Delete the winning item entirely, then dismiss."""
        winner = self.winner
        if self.phase != SpinPhase.STOPPED or winner is None:
            return False
        with self._unlocked():
            self.config.remove_item(winner.item_id)
        return self.engine.dismiss_winner()

    def add_items_from_text(self, text: str) -> list[WheelItem]:
        """Add one item per non-blank line of text (idle only)."""
        if not self.can_edit:
            return []
        return self.config.add_many_items(parse_item_lines(text))

    def randomize(self) -> bool:
        if not self.can_edit:
            return False
        return self.config.randomize_order()

    def set_speed(self, spin: Optional[float] = None, stop: Optional[float] = None) -> bool:
        """Change speed multipliers (idle only)."""
        if not self.can_edit:
            return False
        if spin is not None:
            self.engine.speed_multiplier = spin
        if stop is not None:
            self.engine.stop_speed_multiplier = stop
        return True

    def close(self) -> None:
        """Tear down: stop the frame loop and drop event subscriptions."""
        self.engine.close()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # Internal
    def _consume_winner(self) -> None:
        """Apply remove-winning-slice before the winner is cleared."""
        winner = self.winner
        if winner is not None and self.remove_winning_slice:
            with self._unlocked():
                self.config.remove_one_slice(winner.item_id)

    @contextmanager
    def _unlocked(self) -> Iterator[None]:
        """Let the session edit the config while the winner is still shown."""
        self.config.locked = False
        try:
            yield
        finally:
            self.config.locked = self.phase != SpinPhase.IDLE

    def _record_win(self, item_id: str) -> None:
        self.wins[item_id] = self.wins.get(item_id, 0) + 1

    def _on_phase_change(self, old: SpinPhase, new: SpinPhase, state) -> None:
        self.config.locked = new != SpinPhase.IDLE

    def _on_config_change(self, config: WheelConfig) -> None:
        self.event_bus.emit(Event(
            EventType.CONFIG_CHANGED,
            data={"items": len(config.items), "slices": config.total_weight},
            source="config",
        ))

    def _on_speed_change(self, event: Event) -> None:
        self.set_speed(spin=event.data.get("spin"), stop=event.data.get("stop"))
