"""Synthetic hand landmarks for tests (no camera, no detector)."""

import numpy as np

from gesture_canvas.geometry import GestureFrame, HandLandmarks

# Synthetic hand, relative to a base point. Fingers point "up" (negative y).
_MCP = {5: (-0.06, 0.05), 9: (-0.02, 0.05), 13: (0.02, 0.05), 17: (0.06, 0.05)}
_PIP = {6: (-0.06, 0.0), 10: (-0.02, 0.0), 14: (0.02, 0.0), 18: (0.06, 0.0)}
_TIPS = {8: 5, 12: 9, 16: 13, 20: 17}   # tip -> mcp
_DIP = {7: 6, 11: 10, 15: 14, 19: 18}   # dip -> pip

EXTENDED = (0.0, -0.15)
CURLED = (0.0, 0.01)


def make_hand(pose="fist", base=(0.5, 0.5), index_tip_at=None):
    """
    Build a 21x2 landmark array for a named pose.

    fist    - all fingers curled, thumb away: no gesture
    palm    - all four fingers extended: palm_open
    pinch   - fingers curled, thumb tip touching index tip
    victory - index + middle extended, ring + pinky curled
    """
    rel = np.zeros((21, 2))
    rel[0] = (0.0, 0.2)
    rel[1], rel[2], rel[3] = (-0.05, 0.17), (-0.09, 0.14), (-0.13, 0.12)
    rel[4] = (-0.2, 0.1)
    for idx, xy in {**_MCP, **_PIP}.items():
        rel[idx] = xy
    for dip, pip in _DIP.items():
        rel[dip] = rel[pip]

    extended = {
        "fist": set(),
        "pinch": set(),
        "palm": {8, 12, 16, 20},
        "victory": {8, 12},
    }[pose]
    for tip, mcp in _TIPS.items():
        rel[tip] = np.add(rel[mcp], EXTENDED if tip in extended else CURLED)

    if pose == "pinch":
        rel[4] = rel[8] + (0.02, 0.0)

    if index_tip_at is not None:
        base = np.subtract(index_tip_at, rel[8])
    return rel + np.asarray(base, dtype=float)


def hand(pose="fist", **kwargs) -> HandLandmarks:
    return HandLandmarks(landmarks=make_hand(pose, **kwargs))


def frame(*hands, size=(1000.0, 1000.0), t=0.0) -> GestureFrame:
    return GestureFrame(hands=list(hands), canvas_size=size, timestamp=t)
