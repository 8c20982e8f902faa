from __future__ import annotations

import pytest

from faceshape.analysis.geometry import Point2D, Segment, distance, intersect


def _segment(x1: float, y1: float, x2: float, y2: float) -> Segment:
    return Segment(Point2D(x1, y1), Point2D(x2, y2))


def test_intersect_simple_cross() -> None:
    point = intersect(_segment(0, 0, 10, 10), _segment(0, 10, 10, 0))
    assert point == Point2D(5.0, 5.0)


@pytest.mark.parametrize(
    "other",
    [
        _segment(20, 3, 30, 3),
        _segment(5, 3, 15, 3),
        _segment(0, 3, 10, 3),
    ],
)
def test_intersect_parallel_horizontal_segments_never_cross(other: Segment) -> None:
    assert intersect(_segment(0, 3, 10, 3), other) is None


def test_intersect_parallel_offset_lines() -> None:
    assert intersect(_segment(0, 0, 10, 10), _segment(0, 5, 10, 15)) is None


def test_intersect_rejects_crossing_outside_segments() -> None:
    assert intersect(_segment(0, 0, 1, 1), _segment(5, 5, 6, 4)) is None


def test_intersect_accepts_endpoint_touch() -> None:
    point = intersect(_segment(0, 0, 10, 0), _segment(5, 0, 5, 10))
    assert point == Point2D(5.0, 0.0)


def test_intersect_is_order_independent_for_interior_crossing() -> None:
    a = _segment(22, 120, 178, 124)
    b = _segment(20, 100, 100, 202)
    forward = intersect(a, b)
    backward = intersect(b, a)
    assert forward is not None and backward is not None
    assert forward.x == pytest.approx(backward.x)
    assert forward.y == pytest.approx(backward.y)


def test_intersect_is_deterministic() -> None:
    a = _segment(0.3, 1.7, 9.1, 8.2)
    b = _segment(0.5, 9.9, 8.8, 0.1)
    assert intersect(a, b) == intersect(a, b)


def test_distance() -> None:
    assert distance(Point2D(1, 1), Point2D(4, 5)) == 5.0
    assert distance(Point2D(2, 2), Point2D(2, 2)) == 0.0
