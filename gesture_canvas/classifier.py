"""
Per-hand gesture rules.

All thresholds are in normalized landmark coordinates (not pixels), so the
same numbers work regardless of canvas resolution. Each rule is stateless;
temporal behaviour (edge triggers, debouncing) belongs to the state machine.
"""

from dataclasses import dataclass

from .geometry import (
    HandLandmarks,
    THUMB_TIP,
    INDEX_MCP, INDEX_PIP, INDEX_TIP,
    MIDDLE_MCP, MIDDLE_PIP, MIDDLE_TIP,
    RING_MCP, RING_PIP, RING_TIP,
    PINKY_MCP, PINKY_TIP,
)

# ──────────────────────────────────────────────────────────────
# Tuning Constants (normalized units)
#
# PALM_OPEN_THRESHOLD: fingertip-to-knuckle spread every finger must exceed.
# PINCH_THRESHOLD: thumb-index tip distance below which we call it a pinch.
# ──────────────────────────────────────────────────────────────
PALM_OPEN_THRESHOLD = 0.03
PINCH_THRESHOLD = 0.1

# (tip, mcp) pairs for index/middle/ring/pinky
SPREAD_PAIRS = [(INDEX_TIP, INDEX_MCP), (MIDDLE_TIP, MIDDLE_MCP),
                (RING_TIP, RING_MCP), (PINKY_TIP, PINKY_MCP)]


@dataclass(frozen=True)
class GestureSignals:
    palm_open: bool = False
    pinch: bool = False
    victory: bool = False


def is_palm_open(hand: HandLandmarks, threshold: float = PALM_OPEN_THRESHOLD) -> bool:
    return all(hand.finger_distance(tip, mcp) > threshold for tip, mcp in SPREAD_PAIRS)


def is_pinch(hand: HandLandmarks, threshold: float = PINCH_THRESHOLD) -> bool:
    return hand.finger_distance(INDEX_TIP, THUMB_TIP) < threshold


def is_victory(hand: HandLandmarks) -> bool:
    # y grows downward: "above the PIP joint" means a smaller y.
    # Index + middle extended, ring curled.
    lm = hand.landmarks
    return bool(
        lm[INDEX_TIP][1] < lm[INDEX_PIP][1]
        and lm[MIDDLE_TIP][1] < lm[MIDDLE_PIP][1]
        and lm[RING_TIP][1] > lm[RING_PIP][1]
    )


def classify(hand: HandLandmarks,
             palm_threshold: float = PALM_OPEN_THRESHOLD,
             pinch_threshold: float = PINCH_THRESHOLD) -> GestureSignals:
    """Evaluate every rule on one hand."""
    return GestureSignals(
        palm_open=is_palm_open(hand, palm_threshold),
        pinch=is_pinch(hand, pinch_threshold),
        victory=is_victory(hand),
    )
