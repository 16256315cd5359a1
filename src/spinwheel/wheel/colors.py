"""Deterministic slice colors.

Colors come from a fixed palette of 20 vibrant hues. An item name always
hashes to the same palette entry, so two items with the same name look the
same regardless of their position on the wheel or the order they were added.
"""

from typing import Tuple

Color = Tuple[int, int, int]

PALETTE: tuple[str, ...] = (
    "#e63230",  # red
    "#f05a18",  # orange-red
    "#f08800",  # orange
    "#e8b000",  # golden yellow
    "#a0c000",  # yellow-green
    "#30b030",  # green
    "#08a868",  # emerald
    "#009898",  # teal
    "#0088c8",  # ocean
    "#0858e8",  # blue
    "#2838d0",  # indigo
    "#5820d0",  # violet
    "#8818c8",  # purple
    "#b008b8",  # magenta
    "#d00878",  # pink
    "#e81848",  # rose
    "#f07830",  # coral
    "#68b800",  # lime
    "#08a0c0",  # sky cyan
    "#4838e0",  # periwinkle
)


def name_hash(name: str) -> int:
    """Signed 32-bit ``h * 31 + c`` hash over the UTF-16 code units of ``name``."""
    data = name.encode("utf-16-le")
    value = 0
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        value = (value * 31 + code_unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def palette_index(name: str) -> int:
    """Get the palette index a name maps to."""
    return abs(name_hash(name)) % len(PALETTE)


def name_to_color(name: str) -> str:
    """Map a name to its palette color."""
    return PALETTE[palette_index(name)]


def hex_to_rgb(hex_color: str) -> Color:
    """Convert "#RRGGBB" to an RGB tuple."""
    hex_color = hex_color.lstrip("#")
    return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
