"""
Tests for configuration and preference persistence.
"""

import json

from spinwheel.storage.json_store import (
    DEFAULT_TITLE,
    JsonConfigStore,
    MemoryConfigStore,
    Preferences,
    config_from_json,
    config_to_json,
    default_config,
)
from spinwheel.wheel.models import DEFAULT_ITEMS, WheelItem

P, S, T = "default-1", "default-2", "default-3"


class TestConfigFormat:
    """Tests for the stored config format."""

    def test_to_json_layout(self):
        data = config_to_json(DEFAULT_ITEMS, [P, S, P, T, S, P])
        assert data["version"] == 1
        assert data["sliceOrder"] == [P, S, P, T, S, P]
        assert data["items"][0] == {"id": P, "name": "Pizza", "count": 3}

    def test_color_written_when_set(self):
        item = WheelItem(id="a", name="A", color="#abcdef")
        data = config_to_json([item], ["a"])
        assert data["items"][0]["color"] == "#abcdef"

    def test_from_json_keeps_order(self):
        data = config_to_json(DEFAULT_ITEMS, [T, P, S, P, S, P])
        items, order = config_from_json(data)
        assert items == list(DEFAULT_ITEMS)
        assert order == [T, P, S, P, S, P]

    def test_wrong_version_gives_defaults(self):
        data = config_to_json([WheelItem(id="a", name="A")], ["a"])
        data["version"] = 2
        assert config_from_json(data) == default_config()

    def test_garbage_gives_defaults(self):
        assert config_from_json("not a config") == default_config()
        assert config_from_json({"items": []}) == default_config()

    def test_no_valid_items_gives_defaults(self):
        data = {"version": 1, "items": [{"id": "a", "name": "", "count": 1}]}
        assert config_from_json(data) == default_config()

    def test_invalid_items_dropped(self):
        data = {
            "version": 1,
            "items": [
                {"id": "ok", "name": "Fine", "count": 2},
                {"id": "blank", "name": "   ", "count": 1},
                {"id": "long", "name": "x" * 41, "count": 1},
                {"id": "zero", "name": "Zero", "count": 0},
                {"id": "big", "name": "Big", "count": 101},
                {"id": "color", "name": "Color", "count": 1, "color": "red"},
                {"name": "No id", "count": 1},
                "not an item",
                {"id": "ok", "name": "Duplicate", "count": 1},
            ],
            "sliceOrder": ["ok", "blank", "ok"],
        }
        items, order = config_from_json(data)
        assert [item.id for item in items] == ["ok"]
        assert order == ["ok", "ok"]

    def test_missing_order_is_grouped(self):
        data = {"version": 1, "items": [{"id": "a", "name": "A", "count": 2}]}
        assert config_from_json(data) == ([WheelItem(id="a", name="A", weight=2)], ["a", "a"])


class TestPreferences:
    """Tests for the preferences model."""

    def test_defaults(self):
        prefs = Preferences()
        assert prefs.title == DEFAULT_TITLE
        assert prefs.remove_winning_slice is False

    def test_aliases(self):
        prefs = Preferences.model_validate({"title": "Lunch", "removeWinningSlice": True})
        assert prefs.remove_winning_slice is True
        assert prefs.model_dump(by_alias=True) == {
            "title": "Lunch",
            "removeWinningSlice": True,
        }

    def test_title_cleanup(self):
        assert Preferences(title="   ").title == DEFAULT_TITLE
        assert Preferences(title="  Dinner  ").title == "Dinner"
        assert len(Preferences(title="t" * 80).title) == 48


class TestMemoryConfigStore:
    """Tests for the in-memory store."""

    def test_empty_gives_defaults(self):
        assert MemoryConfigStore().load_config() == default_config()

    def test_save_and_load(self):
        store = MemoryConfigStore()
        items = [WheelItem(id="a", name="A", weight=2)]
        store.save_config(items, ["a", "a"])
        assert store.load_config() == (items, ["a", "a"])
        assert store.save_count == 1

    def test_preferences_are_copied(self):
        store = MemoryConfigStore()
        store.save_preferences(Preferences(title="Lunch"))
        assert store.load_preferences().title == "Lunch"


class TestJsonConfigStore:
    """Tests for the file-backed store."""

    def test_missing_files_give_defaults(self, tmp_path):
        store = JsonConfigStore(tmp_path / "data")
        assert store.load_config() == default_config()
        assert store.load_preferences() == Preferences()

    def test_save_and_reload(self, tmp_path):
        store = JsonConfigStore(tmp_path / "data")
        items = [WheelItem(id="a", name="Apple", weight=2), WheelItem(id="b", name="Banana")]
        store.save_config(items, ["a", "b", "a"])

        reloaded = JsonConfigStore(tmp_path / "data")
        assert reloaded.load_config() == (items, ["a", "b", "a"])

        raw = json.loads(store.config_path.read_text(encoding="utf-8"))
        assert raw["sliceOrder"] == ["a", "b", "a"]
        assert raw["items"][0]["count"] == 2
        assert not store.config_path.with_suffix(".json.tmp").exists()

    def test_preferences_round_trip(self, tmp_path):
        store = JsonConfigStore(tmp_path)
        store.save_preferences(Preferences(title="Lunch", remove_winning_slice=True))

        raw = json.loads(store.preferences_path.read_text(encoding="utf-8"))
        assert raw == {"title": "Lunch", "removeWinningSlice": True}
        assert JsonConfigStore(tmp_path).load_preferences().remove_winning_slice is True

    def test_corrupt_file_gives_defaults(self, tmp_path):
        store = JsonConfigStore(tmp_path)
        store.config_path.write_text("{not json", encoding="utf-8")
        store.preferences_path.write_text("[1, 2]", encoding="utf-8")
        assert store.load_config() == default_config()
        assert store.load_preferences() == Preferences()

    def test_unicode_names(self, tmp_path):
        store = JsonConfigStore(tmp_path)
        items = [WheelItem(id="u", name="Über 🎡")]
        store.save_config(items, ["u"])
        assert store.load_config()[0] == items

    def test_unwritable_dir_does_not_raise(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        store = JsonConfigStore(blocker / "data")
        store.save_config(DEFAULT_ITEMS, [P])
        assert store.load_config() == default_config()
