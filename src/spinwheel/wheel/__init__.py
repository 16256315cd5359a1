"""Wheel model: items, slice layout, slice order and winner resolution."""

from spinwheel.wheel.models import WheelItem, WheelSlice, DEFAULT_ITEMS
from spinwheel.wheel.colors import PALETTE, name_to_color
from spinwheel.wheel.layout import compute_slices, determine_winner, normalize_angle
from spinwheel.wheel.order import (
    default_slice_order,
    reconcile_slice_order,
    remove_one_slice,
    shuffle_slice_order,
)

__all__ = [
    "WheelItem",
    "WheelSlice",
    "DEFAULT_ITEMS",
    "PALETTE",
    "name_to_color",
    "compute_slices",
    "determine_winner",
    "normalize_angle",
    "default_slice_order",
    "reconcile_slice_order",
    "remove_one_slice",
    "shuffle_slice_order",
]
