"""
Landmark geometry and canvas mapping.

Coordinate conventions:
- Landmarks are normalized in [0..1] for x/y (relative to frame width/height).
- Larger x moves right, larger y moves down (image coordinates).
- The frame producer has already rotated and mirrored the image, so mapping to
  the canvas is a plain scale by the canvas size.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)

NUM_LANDMARKS = 21
MAX_HANDS = 2

# Fixed MediaPipe hand landmark indices used by the gesture rules.
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_TIP = 12
RING_MCP = 13
RING_PIP = 14
RING_TIP = 16
PINKY_MCP = 17
PINKY_TIP = 20


@dataclass
class Point:
    """Canvas-space coordinate."""
    x: float
    y: float

    def copy(self) -> "Point":
        return Point(self.x, self.y)


# HandLandmarks wraps one detected hand and provides helper metrics:
# - Common points (tips) in normalized space
# - finger_distance() for pinch/spread thresholds
@dataclass
class HandLandmarks:
    """One hand: 21 normalized landmarks in fixed index order."""
    landmarks: np.ndarray  #21x2 (or 21x3) array of landmark positions

    @property
    def thumb_tip(self) -> np.ndarray:
        return self.landmarks[THUMB_TIP]

    @property
    def index_tip(self) -> np.ndarray:
        return self.landmarks[INDEX_TIP]

    @property
    def middle_tip(self) -> np.ndarray:
        return self.landmarks[MIDDLE_TIP]

    @property
    def ring_tip(self) -> np.ndarray:
        return self.landmarks[RING_TIP]

    @property
    def pinky_tip(self) -> np.ndarray:
        return self.landmarks[PINKY_TIP]

    def finger_distance(self, finger1_idx: int, finger2_idx: int) -> float:
        a = self.landmarks[finger1_idx][:2]  # XY only
        b = self.landmarks[finger2_idx][:2]
        return float(np.linalg.norm(a - b))


@dataclass
class GestureFrame:
    """One detector result: 0..2 hands plus the canvas they map onto."""
    hands: list = field(default_factory=list)
    canvas_size: tuple = (0.0, 0.0)
    timestamp: float = 0.0


def is_well_formed(hand) -> bool:
    """21+ finite x/y landmarks wrapped in HandLandmarks."""
    if not isinstance(hand, HandLandmarks):
        return False
    arr = np.asarray(hand.landmarks)
    if arr.ndim != 2 or arr.shape[0] < NUM_LANDMARKS or arr.shape[1] < 2:
        return False
    return bool(np.all(np.isfinite(arr[:NUM_LANDMARKS, :2])))


def usable_hands(hands) -> list:
    """Hands of a frame, or [] when any of them is malformed."""
    hands = list(hands or [])[:MAX_HANDS]
    if not all(is_well_formed(h) for h in hands):
        logger.warning("Rejecting frame: malformed hand landmarks")
        return []
    return hands


def canvas_ready(canvas_size) -> bool:
    w, h = canvas_size
    return w > 0 and h > 0


def to_canvas(landmark, canvas_size) -> Point:
    """Scale a normalized landmark (array row or Point) to canvas units."""
    w, h = canvas_size
    x, y = _xy(landmark)
    return Point(x * w, y * h)


def distance(a, b) -> float:
    """Euclidean distance in whatever space both inputs share."""
    ax, ay = _xy(a)
    bx, by = _xy(b)
    return math.hypot(ax - bx, ay - by)


def midpoint(a, b) -> Point:
    ax, ay = _xy(a)
    bx, by = _xy(b)
    return Point((ax + bx) / 2, (ay + by) / 2)


def _xy(p):
    if isinstance(p, Point):
        return p.x, p.y
    return float(p[0]), float(p[1])


def _as_array(raw_hand) -> np.ndarray:
    # MediaPipe NormalizedLandmark objects expose .x/.y; plain rows are indexable
    rows = []
    for lm in raw_hand:
        if hasattr(lm, "x") and hasattr(lm, "y"):
            rows.append((lm.x, lm.y))
        else:
            rows.append((lm[0], lm[1]))
    return np.asarray(rows, dtype=float).reshape(-1, 2)


def validate_hands(raw_hands: Sequence) -> list:
    """
    Convert raw detector hands into HandLandmarks.

    A malformed hand (fewer than 21 landmarks, NaN/inf coordinates) rejects the
    whole frame: the caller sees an empty list and treats it as "no hands".
    Only the first two hands are kept.
    """
    hands = []
    for raw in list(raw_hands)[:MAX_HANDS]:
        try:
            arr = _as_array(raw)
        except (TypeError, ValueError, IndexError):
            logger.warning("Rejecting frame: unreadable landmark data")
            return []
        if arr.shape[0] < NUM_LANDMARKS:
            logger.warning("Rejecting frame: hand has %d landmarks, need %d",
                           arr.shape[0], NUM_LANDMARKS)
            return []
        arr = arr[:NUM_LANDMARKS]
        if not np.all(np.isfinite(arr)):
            logger.warning("Rejecting frame: non-finite landmark coordinates")
            return []
        hands.append(HandLandmarks(landmarks=arr))
    return hands


def frame_from_landmarks(raw_hands, canvas_size, timestamp: float = 0.0) -> GestureFrame:
    return GestureFrame(
        hands=validate_hands(raw_hands or []),
        canvas_size=(float(canvas_size[0]), float(canvas_size[1])),
        timestamp=timestamp,
    )
