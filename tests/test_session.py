"""
Tests for the wheel session (config + engine + preferences).
"""

import random

from spinwheel.core.events import Event, EventType, button_press_event, speed_change_event
from spinwheel.core.state import SpinPhase
from spinwheel.session import WheelSession
from spinwheel.storage.json_store import MemoryConfigStore, Preferences
from spinwheel.wheel.models import WheelItem


class TestSpinCycle:
    """Tests for a full spin through the session."""

    def test_spin_and_win(self, session, spin_to_stop):
        assert session.button_label == "Spin!"
        winner = spin_to_stop(session)

        assert session.phase == SpinPhase.STOPPED
        assert winner is not None
        assert session.win_count(winner.item_id) == 1
        assert session.button_label == "Spin Again!"

    def test_wins_accumulate(self, session, ticker, spin_to_stop):
        spin_to_stop(session)
        session.dismiss_winner()
        spin_to_stop(session)
        assert sum(session.wins.values()) == 2

    def test_dismiss_returns_to_idle(self, session, spin_to_stop):
        spin_to_stop(session)
        assert session.dismiss_winner()
        assert session.phase == SpinPhase.IDLE
        assert session.winner is None
        assert not session.dismiss_winner()

    def test_spin_again_from_stopped(self, session, spin_to_stop):
        spin_to_stop(session)
        assert session.press()
        assert session.phase == SpinPhase.SPINNING
        assert session.winner is None

    def test_empty_wheel_cannot_spin(self, session, ticker):
        session.config.clear_items()
        assert session.button_label == "Add items first"
        assert not session.press()
        assert session.phase == SpinPhase.IDLE
        assert ticker.pending == 0


class TestLocking:
    """Tests for the edit lock outside idle."""

    def test_config_locked_until_dismissed(self, session, ticker):
        session.press()
        assert session.config.locked
        assert not session.can_edit
        assert session.config.add_item("Curry") is None
        assert not session.randomize()
        assert not session.set_speed(spin=2.5)

        session.press()
        assert session.config.locked
        ticker.run_until_idle()
        assert session.phase == SpinPhase.STOPPED
        assert session.config.locked
        assert session.config.add_item("Curry") is None

        session.dismiss_winner()
        assert not session.config.locked
        assert session.config.add_item("Curry") is not None

    def test_idle_edits_allowed(self, session):
        assert session.can_edit
        assert session.randomize()
        assert session.set_speed(spin=2.5, stop=0.4)
        assert session.engine.speed_multiplier == 2.5
        assert session.engine.stop_speed_multiplier == 0.4

    def test_slices_frozen_during_spin(self, session):
        before = list(session.slices)
        session.press()
        session.config.locked = False
        session.config.add_item("Curry")
        assert session.slices == before


class TestRemoveWinningSlice:
    """Tests for the remove-winning-slice preference."""

    def test_off_keeps_wheel(self, session, spin_to_stop):
        spin_to_stop(session)
        session.dismiss_winner()
        assert session.config.total_weight == 6

    def test_dismiss_removes_one_slice(self, session, spin_to_stop):
        session.remove_winning_slice = True
        winner = spin_to_stop(session)
        weight = session.config.get_item(winner.item_id).weight

        session.dismiss_winner()
        assert session.config.total_weight == 5
        item = session.config.get_item(winner.item_id)
        if weight == 1:
            assert item is None
        else:
            assert item.weight == weight - 1

    def test_spin_again_removes_one_slice(self, session, spin_to_stop):
        session.remove_winning_slice = True
        spin_to_stop(session)
        assert session.press()
        assert session.phase == SpinPhase.SPINNING
        assert len(session.engine.spin_slices) == 5

    def test_last_slice_consumed(self, ticker, spin_to_stop):
        store = MemoryConfigStore(
            items=[WheelItem(id="a", name="Only")],
            preferences=Preferences(remove_winning_slice=True),
        )
        session = WheelSession(ticker=ticker, store=store, rng=random.Random(3))
        spin_to_stop(session)

        assert not session.press()
        assert session.phase == SpinPhase.IDLE
        assert session.config.items == ()
        assert session.button_label == "Add items first"
        session.close()

    def test_preference_saved(self, session, store):
        session.remove_winning_slice = True
        assert store.load_preferences().remove_winning_slice is True


class TestRemoveWinner:
    """Tests for deleting the winning item."""

    def test_removes_whole_item(self, session, spin_to_stop):
        winner = spin_to_stop(session)
        assert session.remove_winner()
        assert session.phase == SpinPhase.IDLE
        assert session.config.get_item(winner.item_id) is None
        assert winner.item_id not in session.config.slice_order

    def test_only_when_stopped(self, session):
        assert not session.remove_winner()


class TestEventBusInput:
    """Tests for driving the session through the event bus."""

    def test_button_press_event(self, session, ticker):
        session.event_bus.emit(button_press_event())
        assert session.phase == SpinPhase.SPINNING
        session.event_bus.emit(button_press_event())
        assert session.phase == SpinPhase.DECELERATING
        ticker.run_until_idle()

        session.event_bus.emit(Event(EventType.DISMISS))
        assert session.phase == SpinPhase.IDLE

    def test_speed_change_event(self, session):
        session.event_bus.emit(speed_change_event(spin=0.4, stop=2.5))
        assert session.engine.speed_multiplier == 0.4
        assert session.engine.stop_speed_multiplier == 2.5

    def test_config_changed_event(self, session):
        session.config.add_item("Curry")
        events = session.event_bus.get_history(EventType.CONFIG_CHANGED)
        assert len(events) == 1
        assert events[0].data == {"items": 4, "slices": 7}

    def test_queued_input_applied_on_process(self, session, ticker):
        bus = session.event_bus
        bus.queue_event(button_press_event())
        assert session.phase == SpinPhase.IDLE

        bus.process_queue()
        assert session.phase == SpinPhase.SPINNING

        bus.queue_event(button_press_event())
        bus.process_queue()
        ticker.run_until_idle()
        assert session.phase == SpinPhase.STOPPED

    def test_close_unsubscribes(self, session, ticker):
        session.close()
        session.event_bus.emit(button_press_event())
        assert session.phase == SpinPhase.IDLE
        assert ticker.pending == 0


class TestTitle:
    """Tests for the wheel title preference."""

    def test_default_title(self, session):
        assert session.title == "Random Wheel Picker"

    def test_title_saved(self, session, store):
        session.title = "Lunch"
        assert session.title == "Lunch"
        assert store.load_preferences().title == "Lunch"
        assert session.remove_winning_slice is False


class TestPastedItems:
    """Tests for adding items from multi-line text."""

    def test_one_item_per_line(self, session):
        added = session.add_items_from_text("Apple\n\n  Banana  \n")
        assert [item.name for item in added] == ["Apple", "Banana"]
        assert len(session.config.items) == 5

    def test_blank_text_adds_nothing(self, session):
        assert session.add_items_from_text(" \n\n") == []
        assert len(session.config.items) == 3

    def test_ignored_until_dismissed(self, session, ticker):
        session.press()
        assert session.add_items_from_text("Apple") == []
        session.press()
        ticker.run_until_idle()
        assert session.add_items_from_text("Apple") == []
        assert len(session.config.items) == 3


class TestRecentWinners:
    """Tests for the latest winner names."""

    def test_empty_before_any_spin(self, session):
        assert session.recent_winners() == []

    def test_latest_last(self, session, spin_to_stop):
        names = []
        for frames in (5, 12, 20):
            names.append(spin_to_stop(session, frames=frames).name)
            session.dismiss_winner()
        assert session.recent_winners() == names
        assert session.recent_winners(limit=2) == names[1:]
