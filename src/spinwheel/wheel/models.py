"""Data types for wheel items and the slices derived from them."""

from dataclasses import dataclass
from typing import Optional
import re

# Item limits
MAX_NAME_LENGTH = 40
MIN_WEIGHT = 1
MAX_WEIGHT = 100

HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

DEFAULT_ITEM_NAME = "New Item"
UNNAMED_ITEM_NAME = "Unnamed"


@dataclass(frozen=True)
class WheelItem:
    """A configured entry on the wheel.

    Attributes:
        id: Opaque identifier, immutable once created
        name: Display name (1..40 characters)
        weight: Number of slices this item occupies (1..100)
        color: Optional explicit "#RRGGBB" override of the palette color
    """

    id: str
    name: str
    weight: int = 1
    color: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name or len(self.name) > MAX_NAME_LENGTH:
            raise ValueError(
                f"Item name must be 1..{MAX_NAME_LENGTH} characters, got {self.name!r}"
            )
        if not MIN_WEIGHT <= self.weight <= MAX_WEIGHT:
            raise ValueError(
                f"Item weight must be {MIN_WEIGHT}..{MAX_WEIGHT}, got {self.weight}"
            )
        if self.color is not None and not HEX_COLOR_RE.match(self.color):
            raise ValueError(f"Item color must be #RRGGBB, got {self.color!r}")


@dataclass(frozen=True)
class WheelSlice:
    """One angular wedge of the wheel (wheel-local radians)."""

    item_id: str
    name: str
    color: str
    start_angle: float
    end_angle: float
    sweep_angle: float

    def contains(self, angle: float) -> bool:
        """Check if a wheel-local angle falls within [start, end)."""
        return self.start_angle <= angle < self.end_angle


DEFAULT_ITEMS: tuple[WheelItem, ...] = (
    WheelItem(id="default-1", name="Pizza", weight=3),
    WheelItem(id="default-2", name="Sushi", weight=2),
    WheelItem(id="default-3", name="Tacos", weight=1),
)


def clamp_weight(weight: int) -> int:
    """Clamp a requested weight into the allowed range."""
    return max(MIN_WEIGHT, min(MAX_WEIGHT, int(weight)))


def clean_name(name: str) -> str:
    """Normalize a user-entered name: blank becomes "Unnamed", long names are cut."""
    stripped = name.strip()
    if not stripped:
        return UNNAMED_ITEM_NAME
    return stripped[:MAX_NAME_LENGTH]
