"""Graphics: numpy drawing primitives and the wheel rasterizer."""

from spinwheel.graphics.primitives import create_buffer, clear, draw_circle, draw_triangle
from spinwheel.graphics.wheel import (
    WheelStyle,
    WheelGeometry,
    LabelPlacement,
    render_wheel,
    layout_labels,
    slice_label,
    PLACEHOLDER_TEXT,
)

__all__ = [
    "create_buffer",
    "clear",
    "draw_circle",
    "draw_triangle",
    "WheelStyle",
    "WheelGeometry",
    "LabelPlacement",
    "render_wheel",
    "layout_labels",
    "slice_label",
    "PLACEHOLDER_TEXT",
]
