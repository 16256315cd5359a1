"""Basic drawing primitives on numpy RGB buffers."""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Point = Tuple[float, float]
Buffer = NDArray[np.uint8]


def create_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    """Allocate a (height, width, 3) buffer filled with a color."""
    buffer = np.zeros((height, width, 3), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


def clear(buffer: Buffer, color: Color = (0, 0, 0)) -> None:
    """Clear buffer to a solid color."""
    buffer[:, :] = color


def pixel_grid(buffer: Buffer) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Pixel-center coordinates (x, y) for every pixel of the buffer."""
    h, w = buffer.shape[:2]
    y_indices, x_indices = np.mgrid[:h, :w]
    return x_indices + 0.5, y_indices + 0.5


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
    filled: bool = True,
    thickness: float = 1.0,
) -> None:
    """Draw a circle on the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        cx: Center x coordinate
        cy: Center y coordinate
        radius: Circle radius in pixels
        color: RGB color tuple
        filled: If True, fill circle; if False, draw a ring of ``thickness``
    """
    xs, ys = pixel_grid(buffer)
    dist = np.hypot(xs - cx, ys - cy)
    if filled:
        mask = dist <= radius
    else:
        mask = np.abs(dist - radius) <= thickness / 2
    buffer[mask] = color


def draw_triangle(
    buffer: Buffer,
    p1: Point,
    p2: Point,
    p3: Point,
    color: Color,
) -> None:
    """Fill a triangle using edge functions (either winding)."""
    xs, ys = pixel_grid(buffer)

    def edge(a: Point, b: Point) -> NDArray[np.float64]:
        return (b[0] - a[0]) * (ys - a[1]) - (b[1] - a[1]) * (xs - a[0])

    e1 = edge(p1, p2)
    e2 = edge(p2, p3)
    e3 = edge(p3, p1)
    inside = ((e1 >= 0) & (e2 >= 0) & (e3 >= 0)) | ((e1 <= 0) & (e2 <= 0) & (e3 <= 0))
    buffer[inside] = color
