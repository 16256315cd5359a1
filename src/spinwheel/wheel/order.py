"""Slice order maintenance.

The slice order is a list of item ids in which every item appears exactly
``weight`` times. Reconciliation patches an existing order after edits
instead of rebuilding it, so the wheel keeps its arrangement: surviving
occurrences stay in place and new ones are appended at the end.
"""

from dataclasses import replace
from typing import Iterable, Optional, Sequence
import logging
import random

from spinwheel.wheel.models import WheelItem

logger = logging.getLogger(__name__)


def default_slice_order(items: Iterable[WheelItem]) -> list[str]:
    """Grouped order: each item's occurrences together, in item order."""
    order: list[str] = []
    for item in items:
        order.extend([item.id] * item.weight)
    return order


def reconcile_slice_order(
    items: Sequence[WheelItem],
    prior_order: Sequence[str],
) -> list[str]:
    """Bring an order back in line with the current item weights.

    - Drops ids of deleted items
    - Drops the trailing excess occurrences of items whose weight shrank
      (left to right, the first ``weight`` occurrences survive)
    - Appends missing occurrences for grown or new items, in item order

    Reconciling an already consistent order returns it unchanged.
    """
    needed: dict[str, int] = {}
    for item in items:
        needed[item.id] = item.weight

    seen: dict[str, int] = {}
    result: list[str] = []

    for item_id in prior_order:
        quota = needed.get(item_id)
        if quota is None:
            continue
        have = seen.get(item_id, 0)
        if have < quota:
            result.append(item_id)
            seen[item_id] = have + 1

    for item_id, quota in needed.items():
        missing = quota - seen.get(item_id, 0)
        if missing > 0:
            result.extend([item_id] * missing)

    return result


def shuffle_slice_order(
    order: Sequence[str],
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Uniformly shuffle a slice order (Fisher-Yates, from the end)."""
    rng = rng or random.Random()
    result = list(order)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def remove_one_slice(
    items: Sequence[WheelItem],
    order: Sequence[str],
    item_id: str,
) -> tuple[list[WheelItem], list[str]]:
    """Remove a single occurrence of an item.

    The last occurrence is taken out of the order and the item's weight
    drops by one; an item whose weight reaches zero is removed. Unknown ids
    leave both inputs unchanged.

    Returns:
        (new items, new order)
    """
    last_index: Optional[int] = None
    for index in range(len(order) - 1, -1, -1):
        if order[index] == item_id:
            last_index = index
            break

    if last_index is None:
        logger.debug(f"remove_one_slice: {item_id!r} not in slice order")
        return list(items), list(order)

    new_order = list(order[:last_index]) + list(order[last_index + 1:])
    new_items: list[WheelItem] = []
    for item in items:
        if item.id != item_id:
            new_items.append(item)
        elif item.weight > 1:
            new_items.append(replace(item, weight=item.weight - 1))

    return new_items, new_order
