"""
Drawing document: ordered strokes plus the particle buffer.

Stroke order is z-order and is preserved by every operation. Particles are an
unordered buffer written by dissolve_all() and drained by the simulator.
"""

import copy
import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from .geometry import Point, distance

logger = logging.getLogger(__name__)

# RGBA, 0..255
RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
TRANSPARENT = (0, 0, 0, 0)

MIN_WIDTH = 1.0
MAX_WIDTH = 100.0

# Dissolve keeps every DISSOLVE_STRIDE-th point of each stroke
DISSOLVE_STRIDE = 5
# Upper bound on live particles; oldest are dropped first
MAX_PARTICLES = 5000


class Mode(Enum):
    DRAWING = "drawing"
    ERASER = "eraser"


def clamp_width(width: float, lo: float = MIN_WIDTH, hi: float = MAX_WIDTH) -> float:
    return max(lo, min(hi, float(width)))


@dataclass
class Stroke:
    points: list = field(default_factory=list)
    color: tuple = GREEN
    width: float = 10.0
    is_eraser: bool = False

    def __post_init__(self):
        self.width = clamp_width(self.width)


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    alpha: float = 1.0
    color: tuple = GREEN
    radius: float = 5.0


class DocumentModel:
    """Owns strokes and particles; every mutation is O(total points)."""

    def __init__(self, max_particles: int = MAX_PARTICLES):
        self.strokes: list[Stroke] = []
        self.particles: list[Particle] = []
        self.max_particles = max_particles

    def start_stroke(self, origin: Point, color, width: float, is_eraser: bool = False) -> Stroke:
        stroke = Stroke(points=[origin.copy()], color=color, width=width, is_eraser=is_eraser)
        self.strokes.append(stroke)
        return stroke

    def extend_active_stroke(self, point: Point) -> bool:
        if not self.strokes:
            # Out-of-order delivery can land here; tolerate it.
            logger.warning("extend_active_stroke called with no stroke; ignoring")
            return False
        self.strokes[-1].points.append(point.copy())
        return True

    def erase_near(self, center: Point, radius: float) -> int:
        """Drop every non-eraser point within radius of center, then purge empties."""
        removed = 0
        for stroke in self.strokes:
            if stroke.is_eraser:
                continue
            kept = [p for p in stroke.points if distance(p, center) >= radius]
            removed += len(stroke.points) - len(kept)
            stroke.points = kept
        self.remove_empty()
        return removed

    def remove_empty(self) -> int:
        before = len(self.strokes)
        self.strokes = [s for s in self.strokes if s.points]
        return before - len(self.strokes)

    def rescale_about(self, center: Point, factor: float,
                      size_clamp: tuple = (MIN_WIDTH, MAX_WIDTH)) -> None:
        lo, hi = size_clamp
        cx, cy = center.x, center.y
        for stroke in self.strokes:
            if not stroke.points:
                continue
            stroke.width = clamp_width(stroke.width * factor, lo, hi)
            for p in stroke.points:
                p.x = cx + (p.x - cx) * factor
                p.y = cy + (p.y - cy) * factor

    def dissolve_all(self, rng: random.Random = None) -> list:
        """Turn every stroke into particles (every 5th point) and clear strokes."""
        rng = rng or random
        produced = []
        for stroke in self.strokes:
            for p in stroke.points[::DISSOLVE_STRIDE]:
                produced.append(Particle(
                    x=p.x, y=p.y,
                    vx=rng.uniform(-5.0, 5.0),
                    vy=rng.uniform(5.0, 10.0),
                    alpha=1.0,
                    color=stroke.color,
                    radius=stroke.width * 0.5,
                ))
        self.strokes.clear()
        self.particles.extend(produced)
        overflow = len(self.particles) - self.max_particles
        if overflow > 0:
            del self.particles[:overflow]
            logger.debug("Particle cap reached; dropped %d oldest", overflow)
        return produced

    def clear_all(self) -> None:
        self.strokes.clear()
        self.particles.clear()

    def point_count(self) -> int:
        return sum(len(s.points) for s in self.strokes)

    def snapshot(self) -> "DocumentModel":
        """Detached copy for readers (renderer); mutating it never touches self."""
        snap = DocumentModel(self.max_particles)
        snap.strokes = copy.deepcopy(self.strokes)
        snap.particles = copy.deepcopy(self.particles)
        return snap
