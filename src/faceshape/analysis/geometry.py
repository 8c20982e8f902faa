from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float


@dataclass(frozen=True)
class Segment:
    start: Point2D
    end: Point2D


def distance(a: Point2D, b: Point2D) -> float:
    return math.sqrt((b.x - a.x) ** 2 + (b.y - a.y) ** 2)


def _within(value: float, bound_a: float, bound_b: float) -> bool:
    return min(bound_a, bound_b) <= value <= max(bound_a, bound_b)


def intersect(segment_a: Segment, segment_b: Segment) -> Point2D | None:
    """Return the crossing point of two segments, or ``None``.

    The infinite lines are solved with the determinant form and the result is
    accepted when it lies inside the bounding box of both segments. This is a
    bounding-box test, not an exact segment test: for nearly collinear inputs
    a point on a line extension can pass. Parallel and coincident lines both
    yield ``None``.
    """
    x1, y1 = segment_a.start.x, segment_a.start.y
    x2, y2 = segment_a.end.x, segment_a.end.y
    x3, y3 = segment_b.start.x, segment_b.start.y
    x4, y4 = segment_b.end.x, segment_b.end.y

    d = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if d == 0:
        return None

    cross_a = x1 * y2 - y1 * x2
    cross_b = x3 * y4 - y3 * x4
    px = (cross_a * (x3 - x4) - (x1 - x2) * cross_b) / d
    py = (cross_a * (y3 - y4) - (y1 - y2) * cross_b) / d

    if not (_within(px, x1, x2) and _within(py, y1, y2)):
        return None
    if not (_within(px, x3, x4) and _within(py, y3, y4)):
        return None
    return Point2D(px, py)
