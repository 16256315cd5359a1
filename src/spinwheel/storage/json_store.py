"""Persistence of the wheel configuration and preferences.

Stored files (under the data directory):

    config.json       {"version": 1, "items": [...], "sliceOrder": [...]}
    preferences.json  {"title": "...", "removeWinningSlice": false}

Loading never fails: missing, corrupt or wrong-version files give the
defaults, invalid items are dropped one by one, and the stored slice order
is reconciled against the items that survived.
"""

from pathlib import Path
from typing import Any, Optional, Protocol, Sequence
import json
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from spinwheel.wheel.models import (
    DEFAULT_ITEMS,
    HEX_COLOR_RE,
    MAX_NAME_LENGTH,
    MAX_WEIGHT,
    MIN_WEIGHT,
    WheelItem,
)
from spinwheel.wheel.order import default_slice_order, reconcile_slice_order

logger = logging.getLogger(__name__)

CURRENT_VERSION = 1
DEFAULT_TITLE = "Random Wheel Picker"
MAX_TITLE_LENGTH = 48

CONFIG_FILENAME = "config.json"
PREFERENCES_FILENAME = "preferences.json"


class PersistedItem(BaseModel):
    """One stored item. The weight is stored as "count"."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = Field(max_length=MAX_NAME_LENGTH)
    count: int = Field(ge=MIN_WEIGHT, le=MAX_WEIGHT)
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name is blank")
        return value

    @field_validator("color")
    @classmethod
    def color_is_hex(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not HEX_COLOR_RE.match(value):
            raise ValueError("color must be #RRGGBB")
        return value

    def to_item(self) -> WheelItem:
        return WheelItem(id=self.id, name=self.name, weight=self.count, color=self.color)

    @classmethod
    def from_item(cls, item: WheelItem) -> "PersistedItem":
        return cls(id=item.id, name=item.name, count=item.weight, color=item.color)


class PersistedConfig(BaseModel):
    """Stored configuration envelope. Items are validated individually."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: int
    items: list[Any]
    slice_order: list[Any] = Field(default_factory=list, alias="sliceOrder")


class Preferences(BaseModel):
    """User preferences stored next to the configuration."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str = DEFAULT_TITLE
    remove_winning_slice: bool = Field(default=False, alias="removeWinningSlice")

    @field_validator("title")
    @classmethod
    def title_fallback(cls, value: str) -> str:
        value = value.strip()[:MAX_TITLE_LENGTH]
        return value or DEFAULT_TITLE


def default_config() -> tuple[list[WheelItem], list[str]]:
    """Pizza x3, Sushi x2, Tacos x1 in grouped order."""
    items = list(DEFAULT_ITEMS)
    return items, default_slice_order(items)


def parse_items(raw_items: Sequence[Any]) -> list[WheelItem]:
    """Validate stored items, dropping invalid entries and duplicate ids."""
    items: list[WheelItem] = []
    seen_ids: set[str] = set()
    for index, raw in enumerate(raw_items):
        try:
            item = PersistedItem.model_validate(raw).to_item()
        except (ValidationError, ValueError) as e:
            logger.warning(f"Dropping invalid stored item #{index}: {e}")
            continue
        if item.id in seen_ids:
            logger.warning(f"Dropping duplicate stored item id {item.id!r}")
            continue
        seen_ids.add(item.id)
        items.append(item)
    return items


def config_from_json(raw: Any) -> tuple[list[WheelItem], list[str]]:
    """Turn decoded config JSON into (items, slice order), or the defaults."""
    try:
        envelope = PersistedConfig.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Stored config unreadable, using defaults: {e}")
        return default_config()

    if envelope.version != CURRENT_VERSION:
        logger.warning(f"Stored config version {envelope.version} unsupported, using defaults")
        return default_config()

    items = parse_items(envelope.items)
    if not items:
        return default_config()

    stored_order = [item_id for item_id in envelope.slice_order if isinstance(item_id, str)]
    return items, reconcile_slice_order(items, stored_order)


def config_to_json(items: Sequence[WheelItem], slice_order: Sequence[str]) -> dict[str, Any]:
    """Serialize a configuration in the stored format."""
    return {
        "version": CURRENT_VERSION,
        "items": [
            PersistedItem.from_item(item).model_dump(exclude_none=True) for item in items
        ],
        "sliceOrder": list(slice_order),
    }


class ConfigStore(Protocol):
    """Load/save capability owned by the application."""

    def load_config(self) -> tuple[list[WheelItem], list[str]]: ...

    def save_config(self, items: Sequence[WheelItem], slice_order: Sequence[str]) -> None: ...

    def load_preferences(self) -> Preferences: ...

    def save_preferences(self, preferences: Preferences) -> None: ...


class MemoryConfigStore:
    """In-memory store, used for headless runs and tests."""

    def __init__(
        self,
        items: Optional[Sequence[WheelItem]] = None,
        slice_order: Optional[Sequence[str]] = None,
        preferences: Optional[Preferences] = None,
    ) -> None:
        self._data: Optional[dict[str, Any]] = None
        if items is not None:
            order = slice_order if slice_order is not None else default_slice_order(items)
            self._data = config_to_json(items, order)
        self._preferences = preferences or Preferences()
        self.save_count = 0

    def load_config(self) -> tuple[list[WheelItem], list[str]]:
        if self._data is None:
            return default_config()
        return config_from_json(self._data)

    def save_config(self, items: Sequence[WheelItem], slice_order: Sequence[str]) -> None:
        self._data = config_to_json(items, slice_order)
        self.save_count += 1

    def load_preferences(self) -> Preferences:
        return self._preferences.model_copy()

    def save_preferences(self, preferences: Preferences) -> None:
        self._preferences = preferences.model_copy()


class JsonConfigStore:
    """Stores configuration and preferences as JSON files in a directory."""

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir).expanduser()

    @property
    def config_path(self) -> Path:
        return self.data_dir / CONFIG_FILENAME

    @property
    def preferences_path(self) -> Path:
        return self.data_dir / PREFERENCES_FILENAME

    def _read_json(self, path: Path) -> Any:
        """Read a JSON file. Returns None if missing or unreadable."""
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

    def _write_json(self, path: Path, payload: Any) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            logger.warning(f"Could not save {path}: {e}")

    def load_config(self) -> tuple[list[WheelItem], list[str]]:
        raw = self._read_json(self.config_path)
        if raw is None:
            return default_config()
        items, order = config_from_json(raw)
        logger.info(f"Loaded {len(items)} items ({len(order)} slices) from {self.config_path}")
        return items, order

    def save_config(self, items: Sequence[WheelItem], slice_order: Sequence[str]) -> None:
        self._write_json(self.config_path, config_to_json(items, slice_order))

    def load_preferences(self) -> Preferences:
        raw = self._read_json(self.preferences_path)
        if raw is None:
            return Preferences()
        try:
            return Preferences.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Stored preferences unreadable, using defaults: {e}")
            return Preferences()

    def save_preferences(self, preferences: Preferences) -> None:
        self._write_json(self.preferences_path, preferences.model_dump(by_alias=True))
