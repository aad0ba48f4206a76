import logging
import random

logger = logging.getLogger(__name__)


class ParticleSimulator:
    """
    Advances dissolve particles by elapsed time.

    Motion is defined per nominal tick (1/60 s) and scaled by the real elapsed
    time, so dropped ticks do not slow the animation down.
    """
    # ──────────────────────────────────────────────────────────
    # Tuning Constants (canvas units per nominal tick)
    #
    # TICK: nominal step length in seconds.
    # ALPHA_DECAY: alpha lost per tick (fully faded after 50 ticks).
    # JITTER: horizontal velocity noise amplitude per tick.
    # ──────────────────────────────────────────────────────────
    TICK = 1.0 / 60.0
    ALPHA_DECAY = 0.02
    JITTER = 0.5

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def advance(self, particles: list, dt: float) -> int:
        """Move, fade and prune particles in place; returns how many were pruned."""
        if dt <= 0 or not particles:
            return 0
        ticks = dt / self.TICK
        alive = []
        for p in particles:
            p.x += p.vx * ticks
            p.y += p.vy * ticks
            p.vx += (self.rng.random() - 0.5) * self.JITTER * ticks
            p.alpha -= self.ALPHA_DECAY * ticks
            if p.alpha > 0:
                alive.append(p)
        pruned = len(particles) - len(alive)
        particles[:] = alive
        if pruned:
            logger.debug("Pruned %d faded particles, %d left", pruned, len(alive))
        return pruned
