"""
Menu layout and hit-testing.

The layout is a pure function of canvas size and is rebuilt on every call, so
a resize can never leave stale button positions behind.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from .document import BLUE, GREEN, RED, Mode
from .geometry import Point, distance

# Layout fractions
BUTTON_RADIUS = 0.08   # of canvas width
SPACING = 0.10         # of canvas width, both rows and columns
LEFT_COLUMN = 0.15     # of canvas width
TOP_ROW = 0.10         # of canvas height

BIG_BRUSH = 20.0
SMALL_BRUSH = 5.0


class ButtonKind(Enum):
    COLOR = auto()
    TOOL = auto()
    SIZE = auto()


@dataclass(frozen=True)
class UiButton:
    id: str
    label: str
    center: Point
    radius: float
    kind: ButtonKind
    value: Any


# (id, label, row, column, kind, value)
_MENU = [
    ("red",   "Red",    0, 0, ButtonKind.COLOR, RED),
    ("green", "Green",  0, 1, ButtonKind.COLOR, GREEN),
    ("blue",  "Blue",   0, 2, ButtonKind.COLOR, BLUE),
    ("pen",   "Pen",    1, 0, ButtonKind.TOOL,  Mode.DRAWING),
    ("erase", "Eraser", 1, 1, ButtonKind.TOOL,  Mode.ERASER),
    ("big",   "Big",    2, 0, ButtonKind.SIZE,  BIG_BRUSH),
    ("small", "Small",  2, 1, ButtonKind.SIZE,  SMALL_BRUSH),
]


def layout_buttons(canvas_w: float, canvas_h: float) -> list:
    radius = canvas_w * BUTTON_RADIUS
    step = canvas_w * SPACING
    top = canvas_h * TOP_ROW
    left = canvas_w * LEFT_COLUMN
    return [
        UiButton(id=bid, label=label,
                 center=Point(left + col * step, top + row * step),
                 radius=radius, kind=kind, value=value)
        for bid, label, row, col, kind, value in _MENU
    ]


def hit_test(point: Point, buttons: list, margin: float = 0.0) -> Optional[UiButton]:
    """Closest button whose radius + margin contains point, or None."""
    best, best_d = None, None
    for btn in buttons:
        d = distance(point, btn.center)
        if d < btn.radius + margin and (best_d is None or d < best_d):
            best, best_d = btn, d
    return best
