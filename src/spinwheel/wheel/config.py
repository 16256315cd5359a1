"""Editable wheel configuration: items plus their slice order."""

from dataclasses import replace
from typing import Any, Callable, List, Optional, Sequence
import logging
import random
import string
import time

from spinwheel.storage.json_store import ConfigStore, default_config
from spinwheel.wheel.layout import compute_slices
from spinwheel.wheel.models import (
    DEFAULT_ITEM_NAME,
    WheelItem,
    WheelSlice,
    clamp_weight,
    clean_name,
)
from spinwheel.wheel.order import (
    reconcile_slice_order,
    remove_one_slice,
    shuffle_slice_order,
)

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
_UNSET: Any = object()

ConfigListener = Callable[["WheelConfig"], None]


def generate_item_id(rng: Optional[random.Random] = None) -> str:
    """Create an id like ``item-1718000000000-k3x9q``."""
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_BASE36) for _ in range(5))
    return f"item-{int(time.time() * 1000)}-{suffix}"


def parse_item_lines(text: str) -> list[str]:
    """Split multi-line input into item names, one per non-blank line."""
    return [line.strip() for line in text.splitlines() if line.strip()]


class WheelConfig:
    """Items and slice order, kept consistent across edits.

    Every edit produces new immutable items and a reconciled order, saves
    them through the store (if any) and notifies listeners. While
    ``locked`` is set, edits are ignored and return a falsy value.
    """

    def __init__(
        self,
        items: Optional[Sequence[WheelItem]] = None,
        slice_order: Optional[Sequence[str]] = None,
        store: Optional[ConfigStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = store
        self._rng = rng or random.Random()
        self._locked = False
        self._listeners: List[ConfigListener] = []

        if items is None:
            items, loaded_order = store.load_config() if store else default_config()
            slice_order = loaded_order if slice_order is None else slice_order

        self._items: tuple[WheelItem, ...] = tuple(items)
        self._slice_order: tuple[str, ...] = tuple(
            reconcile_slice_order(self._items, slice_order or [])
        )
        self._slices: Optional[list[WheelSlice]] = None

    @classmethod
    def from_store(cls, store: ConfigStore, rng: Optional[random.Random] = None) -> "WheelConfig":
        """Load a configuration from a store, saving back to it on edits."""
        return cls(store=store, rng=rng)

    # Read access
    @property
    def items(self) -> tuple[WheelItem, ...]:
        return self._items

    @property
    def slice_order(self) -> tuple[str, ...]:
        return self._slice_order

    @property
    def slices(self) -> list[WheelSlice]:
        """Current slice layout (recomputed after each edit)."""
        if self._slices is None:
            self._slices = compute_slices(self._items, self._slice_order)
        return self._slices

    @property
    def total_weight(self) -> int:
        return len(self._slice_order)

    def get_item(self, item_id: str) -> Optional[WheelItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    # Locking
    @property
    def locked(self) -> bool:
        return self._locked

    @locked.setter
    def locked(self, value: bool) -> None:
        self._locked = bool(value)

    def _check_unlocked(self, action: str) -> bool:
        if self._locked:
            logger.warning(f"Config locked, ignoring {action}")
            return False
        return True

    # Listeners
    def add_listener(self, callback: ConfigListener) -> Callable[[], None]:
        """Call ``callback(config)`` after every change. Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    # Edits
    def add_item(
        self,
        name: str = DEFAULT_ITEM_NAME,
        weight: int = 1,
        color: Optional[str] = None,
    ) -> Optional[WheelItem]:
        """Append a new item; its slices go at the end of the order."""
        if not self._check_unlocked("add_item"):
            return None
        item = WheelItem(
            id=self._new_id(), name=clean_name(name), weight=clamp_weight(weight), color=color,
        )
        items = self._items + (item,)
        self._commit(items, reconcile_slice_order(items, self._slice_order), f"added {item.name!r}")
        return item

    def add_many_items(self, names: Sequence[str]) -> list[WheelItem]:
        """Append one weight-1 item per non-blank name."""
        if not self._check_unlocked("add_many_items"):
            return []
        new_items: list[WheelItem] = []
        taken: set[str] = set()
        for name in names:
            if not name.strip():
                continue
            item = WheelItem(id=self._new_id(taken), name=clean_name(name))
            taken.add(item.id)
            new_items.append(item)
        if not new_items:
            return []
        items = self._items + tuple(new_items)
        self._commit(
            items,
            self._slice_order + tuple(item.id for item in new_items),
            f"added {len(new_items)} items",
        )
        return new_items

    def update_item(
        self,
        item_id: str,
        name: Optional[str] = None,
        weight: Optional[int] = None,
        color: Optional[str] = _UNSET,
    ) -> bool:
        """Change an item's name, weight and/or color override.

        Pass ``color=None`` to clear an override. The slice order is only
        reconciled when the weight actually changes.
        """
        if not self._check_unlocked("update_item"):
            return False
        current = self.get_item(item_id)
        if current is None:
            logger.warning(f"update_item: unknown item {item_id!r}")
            return False

        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = clean_name(name)
        if weight is not None:
            changes["weight"] = clamp_weight(weight)
        if color is not _UNSET:
            changes["color"] = color

        updated = replace(current, **changes)
        if updated == current:
            return False

        items = tuple(updated if item.id == item_id else item for item in self._items)
        order = self._slice_order
        if updated.weight != current.weight:
            order = tuple(reconcile_slice_order(items, order))
        self._commit(items, order, f"updated {updated.name!r}")
        return True

    def remove_item(self, item_id: str) -> bool:
        """Remove an item and all of its slices."""
        if not self._check_unlocked("remove_item"):
            return False
        if self.get_item(item_id) is None:
            logger.warning(f"remove_item: unknown item {item_id!r}")
            return False
        items = tuple(item for item in self._items if item.id != item_id)
        order = tuple(oid for oid in self._slice_order if oid != item_id)
        self._commit(items, order, f"removed {item_id!r}")
        return True

    def remove_one_slice(self, item_id: str) -> bool:
        """Remove the last slice of an item, dropping the item at weight zero."""
        if not self._check_unlocked("remove_one_slice"):
            return False
        if item_id not in self._slice_order:
            logger.debug(f"remove_one_slice: no slice for {item_id!r}")
            return False
        items, order = remove_one_slice(self._items, self._slice_order, item_id)
        self._commit(items, order, f"removed one slice of {item_id!r}")
        return True

    def clear_items(self) -> bool:
        """Remove every item."""
        if not self._check_unlocked("clear_items"):
            return False
        self._commit((), (), "cleared")
        return True

    def randomize_order(self) -> bool:
        """Shuffle the slice order to scatter grouped slices."""
        if not self._check_unlocked("randomize_order"):
            return False
        if len(self._slice_order) < 2:
            return False
        self._commit(
            self._items,
            shuffle_slice_order(self._slice_order, self._rng),
            "randomized order",
        )
        return True

    # Internal
    def _new_id(self, taken: Optional[set[str]] = None) -> str:
        existing = {item.id for item in self._items} | (taken or set())
        while True:
            item_id = generate_item_id(self._rng)
            if item_id not in existing:
                return item_id

    def _commit(
        self,
        items: Sequence[WheelItem],
        order: Sequence[str],
        reason: str,
    ) -> None:
        self._items = tuple(items)
        self._slice_order = tuple(order)
        self._slices = None
        logger.info(f"Config changed ({reason}): {len(self._items)} items, {len(self._slice_order)} slices")

        if self._store is not None:
            self._store.save_config(self._items, self._slice_order)

        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Error in config listener: {e}")
