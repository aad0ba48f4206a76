import math
import random

import pytest

from gesture_canvas.document import (
    GREEN, RED, TRANSPARENT, DocumentModel, Stroke, clamp_width,
)
from gesture_canvas.geometry import Point, distance


def _doc_with(*point_lists, width=10.0):
    doc = DocumentModel()
    for pts in point_lists:
        doc.start_stroke(Point(*pts[0]), RED, width)
        for p in pts[1:]:
            doc.extend_active_stroke(Point(*p))
    return doc


def test_start_and_extend():
    doc = _doc_with([(0, 0), (1, 1), (2, 2)])
    assert len(doc.strokes) == 1
    assert [(p.x, p.y) for p in doc.strokes[0].points] == [(0, 0), (1, 1), (2, 2)]


def test_extend_without_stroke_is_noop():
    doc = DocumentModel()
    assert doc.extend_active_stroke(Point(1, 1)) is False
    assert doc.strokes == []


def test_start_stroke_copies_origin():
    doc = DocumentModel()
    origin = Point(5, 5)
    doc.start_stroke(origin, RED, 5)
    origin.x = 99
    assert doc.strokes[0].points[0].x == 5


def test_width_clamped_on_write():
    assert Stroke(width=0.2).width == 1.0
    assert Stroke(width=500).width == 100.0
    assert clamp_width(42) == 42.0


def test_erase_near_removes_points_and_purges_empty():
    doc = _doc_with([(0, 0), (1, 0), (2, 0)], [(100, 100), (200, 200)])
    removed = doc.erase_near(Point(1, 0), 5)
    assert removed == 3
    assert len(doc.strokes) == 1
    assert doc.strokes[0].points[0].x == 100


def test_erase_near_keeps_partial_strokes():
    doc = _doc_with([(0, 0), (50, 0)])
    doc.erase_near(Point(0, 0), 10)
    assert [(p.x, p.y) for p in doc.strokes[0].points] == [(50, 0)]


def test_erase_never_targets_eraser_strokes():
    doc = DocumentModel()
    doc.start_stroke(Point(0, 0), TRANSPARENT, 60, is_eraser=True)
    doc.erase_near(Point(0, 0), 100)
    assert len(doc.strokes) == 1
    assert doc.strokes[0].is_eraser


def test_erase_on_empty_document():
    assert DocumentModel().erase_near(Point(0, 0), 10) == 0


def test_remove_empty():
    doc = _doc_with([(0, 0)], [(1, 1)])
    doc.strokes[0].points.clear()
    assert doc.remove_empty() == 1
    assert len(doc.strokes) == 1


def test_rescale_preserves_distance_ratio():
    rng = random.Random(3)
    pts = [(rng.uniform(-200, 200), rng.uniform(-200, 200)) for _ in range(30)]
    doc = _doc_with(pts[:15], pts[15:], width=10)
    before = [[p.copy() for p in s.points] for s in doc.strokes]
    center, factor = Point(12.5, -40.0), 1.37

    doc.rescale_about(center, factor)

    for old_pts, stroke in zip(before, doc.strokes):
        for old, new in zip(old_pts, stroke.points):
            assert distance(new, center) == pytest.approx(distance(old, center) * factor)
        assert stroke.width == pytest.approx(13.7)


def test_rescale_clamps_width():
    doc = _doc_with([(0, 0)], width=80)
    doc.rescale_about(Point(0, 0), 2.0)
    assert doc.strokes[0].width == 100.0
    doc.rescale_about(Point(0, 0), 0.001)
    assert doc.strokes[0].width == 1.0


def test_rescale_skips_empty_strokes():
    doc = _doc_with([(0, 0)], width=10)
    doc.strokes.append(Stroke(points=[], width=10))
    doc.rescale_about(Point(0, 0), 2.0)
    assert doc.strokes[1].width == 10


def test_dissolve_samples_every_fifth_point():
    doc = _doc_with([(i, 0) for i in range(12)], [(0, i) for i in range(5)], width=8)
    produced = doc.dissolve_all(random.Random(0))

    expected = math.ceil(12 / 5) + math.ceil(5 / 5)
    assert len(produced) == expected
    assert doc.strokes == []
    assert len(doc.particles) == expected
    assert [p.x for p in produced[:3]] == [0, 5, 10]
    for p in produced:
        assert p.alpha == 1.0
        assert p.radius == 4.0
        assert p.color == RED
        assert -5 <= p.vx <= 5
        assert 5 <= p.vy <= 10


def test_dissolve_respects_particle_cap():
    doc = DocumentModel(max_particles=3)
    doc.start_stroke(Point(0, 0), GREEN, 2)
    for i in range(1, 25):
        doc.extend_active_stroke(Point(i, 0))
    doc.dissolve_all(random.Random(0))
    assert len(doc.particles) == 3
    # newest samples survive
    assert [p.x for p in doc.particles] == [10, 15, 20]


def test_clear_all():
    doc = _doc_with([(0, 0)])
    doc.dissolve_all()
    doc.start_stroke(Point(1, 1), RED, 3)
    doc.clear_all()
    assert doc.strokes == [] and doc.particles == []


def test_snapshot_is_detached():
    doc = _doc_with([(0, 0), (1, 1)])
    snap = doc.snapshot()
    snap.strokes[0].points[0].x = 500
    snap.strokes.clear()
    assert doc.strokes[0].points[0].x == 0
    assert doc.point_count() == 2
