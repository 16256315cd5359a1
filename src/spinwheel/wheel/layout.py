"""Slice layout and pointer-to-winner resolution.

The wheel is a sequence of equal wedges, one per entry in the slice order.
Angles are in radians, measured in screen coordinates (clockwise, y down),
starting at 3 o'clock. The pointer sits at 12 o'clock (-pi/2).
"""

from typing import Iterable, Mapping, Optional, Sequence, Union
import logging
import math

from spinwheel.wheel.colors import name_to_color
from spinwheel.wheel.models import WheelItem, WheelSlice

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi
POINTER_ANGLE = -math.pi / 2


def normalize_angle(angle: float) -> float:
    """Map any real angle into [0, 2*pi)."""
    normalized = ((angle % TWO_PI) + TWO_PI) % TWO_PI
    # float modulo can round up to exactly 2*pi for tiny negative inputs
    return 0.0 if normalized >= TWO_PI else normalized


def _index_items(
    items: Union[Iterable[WheelItem], Mapping[str, WheelItem]]
) -> Mapping[str, WheelItem]:
    if isinstance(items, Mapping):
        return items
    return {item.id: item for item in items}


def compute_slices(
    items: Union[Iterable[WheelItem], Mapping[str, WheelItem]],
    slice_order: Sequence[str],
) -> list[WheelSlice]:
    """Build the ordered slice list from a slice order.

    Every position gets the same sweep, computed from the full order length.
    Positions referencing an unknown item are skipped without renumbering,
    so they show up as an empty arc until the order is reconciled.

    Args:
        items: Items as an iterable or a mapping keyed by id
        slice_order: Ordered item ids (duplicates allowed)

    Returns:
        Slices in slice-order sequence (empty if the order is empty)
    """
    if not slice_order:
        return []

    item_map = _index_items(items)
    sweep = TWO_PI / len(slice_order)
    slices: list[WheelSlice] = []

    for index, item_id in enumerate(slice_order):
        item = item_map.get(item_id)
        if item is None:
            logger.debug(f"Skipping stale slice id {item_id!r} at position {index}")
            continue
        start = index * sweep
        slices.append(WheelSlice(
            item_id=item_id,
            name=item.name,
            color=item.color or name_to_color(item.name),
            start_angle=start,
            end_angle=start + sweep,
            sweep_angle=sweep,
        ))

    return slices


def pointer_local_angle(rotation_angle: float) -> float:
    """Wheel-local angle currently under the pointer."""
    return normalize_angle(POINTER_ANGLE - rotation_angle)


def determine_winner(
    slices: Sequence[WheelSlice],
    rotation_angle: float,
) -> Optional[WheelSlice]:
    """Find the slice under the pointer for a given wheel rotation.

    Falls back to the first slice when no span matches (floating point
    edges, or a gap left by a stale id). Returns None only for no slices.
    """
    if not slices:
        return None

    local = pointer_local_angle(rotation_angle)
    for wheel_slice in slices:
        if wheel_slice.contains(local):
            return wheel_slice
    return slices[0]
