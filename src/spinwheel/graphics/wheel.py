"""Wheel rasterizer.

Draws the wheel into a numpy RGB buffer: slices rotated by the current
angle, a hub, and the pointer at 12 o'clock. Labels are not rasterized
here; ``layout_labels`` returns where and how to draw them so a text-capable
backend (pygame) can render them.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import math

import numpy as np

from spinwheel.graphics.primitives import (
    Buffer,
    Color,
    clear,
    draw_circle,
    draw_triangle,
    pixel_grid,
)
from spinwheel.wheel.colors import hex_to_rgb
from spinwheel.wheel.layout import TWO_PI, normalize_angle
from spinwheel.wheel.models import WheelSlice

MAX_LABEL_LENGTH = 12
PLACEHOLDER_TEXT = "Add items to spin!"


@dataclass
class WheelStyle:
    """Colors and proportions of the drawn wheel."""

    background: Color = (20, 20, 30)
    placeholder: Color = (229, 231, 235)
    hub: Color = (255, 255, 255)
    hub_ring: Color = (209, 213, 219)
    pointer: Color = (239, 68, 68)
    pointer_outline: Color = (255, 255, 255)
    inset: float = 20.0          # Room above the wheel for the pointer
    hub_ratio: float = 0.08
    label_ratio: float = 0.58    # Labels sit at 58% of the radius


@dataclass
class WheelGeometry:
    """Where the wheel sits in the buffer."""

    cx: float
    cy: float
    radius: float


@dataclass
class LabelPlacement:
    """A slice label: text centered at (x, y), rotated by ``rotation`` radians."""

    text: str
    x: float
    y: float
    rotation: float


def wheel_geometry(buffer: Buffer, inset: float) -> WheelGeometry:
    h, w = buffer.shape[:2]
    size = min(w, h)
    return WheelGeometry(cx=w / 2, cy=h / 2, radius=max(1.0, size / 2 - inset))


def slice_label(name: str) -> str:
    """Shorten long names to fit inside a slice."""
    if len(name) > MAX_LABEL_LENGTH:
        return name[:MAX_LABEL_LENGTH - 1] + "…"
    return name


def render_wheel(
    buffer: Buffer,
    slices: Sequence[WheelSlice],
    rotation_angle: float,
    style: Optional[WheelStyle] = None,
) -> WheelGeometry:
    """Draw the wheel at ``rotation_angle`` into ``buffer``.

    With no slices a plain placeholder disc is drawn (the caller adds the
    "add items" text). Positions left empty by stale ids show as background.

    Returns:
        Geometry of the drawn wheel
    """
    style = style or WheelStyle()
    clear(buffer, style.background)
    geo = wheel_geometry(buffer, style.inset)

    if not slices:
        draw_circle(buffer, geo.cx, geo.cy, geo.radius, style.placeholder)
        return geo

    sweep = slices[0].sweep_angle
    positions = max(1, int(round(TWO_PI / sweep)))

    # One color per slice position; unfilled positions stay background
    colors = np.empty((positions, 3), dtype=np.uint8)
    colors[:] = style.background
    for wheel_slice in slices:
        index = min(positions - 1, int(round(wheel_slice.start_angle / sweep)))
        colors[index] = hex_to_rgb(wheel_slice.color)

    xs, ys = pixel_grid(buffer)
    dx = xs - geo.cx
    dy = ys - geo.cy
    inside = np.hypot(dx, dy) <= geo.radius

    # Screen angle -> wheel-local angle -> slice position
    local = np.mod(np.arctan2(dy, dx) - rotation_angle, TWO_PI)
    position = np.minimum((local // sweep).astype(np.intp), positions - 1)
    buffer[inside] = colors[position[inside]]

    hub_radius = geo.radius * style.hub_ratio
    draw_circle(buffer, geo.cx, geo.cy, hub_radius + 1.5, style.hub_ring)
    draw_circle(buffer, geo.cx, geo.cy, hub_radius, style.hub)

    draw_pointer(buffer, geo, style)
    return geo


def draw_pointer(buffer: Buffer, geo: WheelGeometry, style: WheelStyle) -> None:
    """Downward triangle above the wheel, tip just inside the rim."""
    half_width = max(7.0, geo.radius * 0.07)
    height = half_width * 1.8
    tip_y = geo.cy - geo.radius + 4
    base_y = tip_y - height

    draw_triangle(
        buffer,
        (geo.cx, tip_y + 2),
        (geo.cx - half_width - 2, base_y - 1),
        (geo.cx + half_width + 2, base_y - 1),
        style.pointer_outline,
    )
    draw_triangle(
        buffer,
        (geo.cx, tip_y),
        (geo.cx - half_width, base_y),
        (geo.cx + half_width, base_y),
        style.pointer,
    )


def layout_labels(
    slices: Sequence[WheelSlice],
    rotation_angle: float,
    geo: WheelGeometry,
    style: Optional[WheelStyle] = None,
) -> List[LabelPlacement]:
    """Place one radial label per slice.

    Text runs along the radius; labels on the left half are flipped by pi so
    none is ever upside down.
    """
    style = style or WheelStyle()
    text_radius = geo.radius * style.label_ratio
    placements: List[LabelPlacement] = []

    for wheel_slice in slices:
        mid = wheel_slice.start_angle + wheel_slice.sweep_angle / 2 + rotation_angle
        norm = normalize_angle(mid)
        rotation = mid + math.pi if math.pi / 2 < norm < 3 * math.pi / 2 else mid
        placements.append(LabelPlacement(
            text=slice_label(wheel_slice.name),
            x=geo.cx + text_radius * math.cos(mid),
            y=geo.cy + text_radius * math.sin(mid),
            rotation=rotation,
        ))

    return placements
