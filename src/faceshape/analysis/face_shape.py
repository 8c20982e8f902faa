from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from faceshape.analysis.geometry import Point2D, Segment, distance, intersect
from faceshape.landmarks.layout import (
    CHEEK_CROSS,
    JAW_CENTER,
    JAW_LEFT_END,
    JAW_OUTLINE,
    JAW_RIGHT_END,
    JAWLINE_SUM_FIRST_END,
    LANDMARK_COUNT,
    LEFT_EYEBROW,
    RIGHT_EYEBROW,
    select,
)


class ShapeLabel(str, Enum):
    diamond_round_oval = "Diamond, Round, Oval"
    triangle = "Triangle"
    heart = "Heart"
    square_oblong = "Square, Oblong"
    unrecognized = ""


@dataclass(frozen=True)
class FaceMeasurements:
    forehead_width: float
    cheekbone_width: float
    jawline_length_from_center: float

    def as_dict(self) -> dict[str, float]:
        return {
            "forehead_width": self.forehead_width,
            "cheekbone_width": self.cheekbone_width,
            "jawline_length_from_center": self.jawline_length_from_center,
        }


@dataclass(frozen=True)
class LandmarkSet:
    """68 landmark points of one face in image-pixel space."""

    points: tuple[Point2D, ...]

    @classmethod
    def from_array(cls, values: Any) -> LandmarkSet:
        array = np.asarray(values, dtype=np.float64)
        if array.shape != (LANDMARK_COUNT, 2):
            raise ValueError(
                f"landmarks must have shape ({LANDMARK_COUNT}, 2), got {array.shape}"
            )
        return cls(points=tuple(Point2D(float(x), float(y)) for x, y in array))

    @property
    def left_eyebrow(self) -> list[Point2D]:
        return select(self.points, LEFT_EYEBROW)

    @property
    def right_eyebrow(self) -> list[Point2D]:
        return select(self.points, RIGHT_EYEBROW)

    @property
    def jaw_outline(self) -> list[Point2D]:
        return select(self.points, JAW_OUTLINE)


def _forehead_width(landmarks: LandmarkSet) -> float:
    # min()/max() keep the first point on ties.
    leftmost = min(landmarks.left_eyebrow, key=lambda point: point.x)
    rightmost = max(landmarks.right_eyebrow, key=lambda point: point.x)
    return rightmost.x - leftmost.x


def _cheekbone_width(jaw: list[Point2D]) -> float:
    center = jaw[JAW_CENTER]
    cross = Segment(jaw[CHEEK_CROSS[0]], jaw[CHEEK_CROSS[1]])
    left_hit = intersect(Segment(jaw[JAW_LEFT_END], center), cross)
    right_hit = intersect(Segment(jaw[JAW_RIGHT_END], center), cross)
    if left_hit is None or right_hit is None:
        return 0.0
    return distance(left_hit, right_hit)


def _jawline_length_from_center(jaw: list[Point2D]) -> float:
    total = 0.0
    for idx in range(JAWLINE_SUM_FIRST_END, JAW_CENTER + 1):
        total += distance(jaw[idx - 1], jaw[idx])
    return total


def measure(landmarks: LandmarkSet) -> FaceMeasurements:
    jaw = landmarks.jaw_outline
    return FaceMeasurements(
        forehead_width=_forehead_width(landmarks),
        cheekbone_width=_cheekbone_width(jaw),
        jawline_length_from_center=_jawline_length_from_center(jaw),
    )


def classify(measurements: FaceMeasurements) -> ShapeLabel:
    """Map measurements to a shape label; the first matching rule wins.

    Comparisons are strict and the all-equal rule uses exact float equality,
    so nearly equal measurements do not count as equal.
    """
    forehead = measurements.forehead_width
    cheekbone = measurements.cheekbone_width
    jaw = measurements.jawline_length_from_center

    if cheekbone > forehead and forehead > jaw:
        return ShapeLabel.diamond_round_oval
    if jaw > cheekbone and cheekbone > forehead:
        return ShapeLabel.triangle
    if forehead > cheekbone and forehead > jaw:
        return ShapeLabel.heart
    if jaw == cheekbone and cheekbone == forehead:
        return ShapeLabel.square_oblong
    return ShapeLabel.unrecognized


def analyze_face_shape(landmarks: LandmarkSet) -> ShapeLabel:
    return classify(measure(landmarks))
