import random

import pytest

from gesture_canvas.document import GREEN, Particle
from gesture_canvas.particles import ParticleSimulator

TICK = ParticleSimulator.TICK


def _particles(n=10):
    return [Particle(x=i, y=0, vx=1.0, vy=2.0, color=GREEN) for i in range(n)]


def test_decay_removes_every_particle_in_finite_time():
    sim = ParticleSimulator(random.Random(1))
    particles = _particles()
    steps = 0
    while particles:
        sim.advance(particles, TICK)
        steps += 1
        assert steps < 200
    assert steps in (50, 51)


def test_alpha_is_monotonic():
    sim = ParticleSimulator(random.Random(1))
    particles = _particles(1)
    last = particles[0].alpha
    for _ in range(20):
        sim.advance(particles, TICK)
        assert particles[0].alpha < last
        last = particles[0].alpha


def test_elapsed_time_not_tick_count():
    a, b = _particles(1), _particles(1)
    ParticleSimulator(random.Random(0)).advance(a, 3 * TICK)
    sim = ParticleSimulator(random.Random(0))
    for _ in range(3):
        sim.advance(b, TICK)
    assert a[0].alpha == pytest.approx(b[0].alpha)
    assert a[0].y == pytest.approx(b[0].y)


def test_motion_follows_velocity():
    particles = _particles(1)
    ParticleSimulator(random.Random(0)).advance(particles, TICK)
    assert particles[0].x == pytest.approx(1.0)
    assert particles[0].y == pytest.approx(2.0)


def test_non_positive_dt_is_noop():
    particles = _particles(2)
    assert ParticleSimulator().advance(particles, 0) == 0
    assert ParticleSimulator().advance(particles, -1) == 0
    assert [p.alpha for p in particles] == [1.0, 1.0]


def test_large_dt_prunes_at_once():
    particles = _particles(4)
    assert ParticleSimulator().advance(particles, 2.0) == 4
    assert particles == []
