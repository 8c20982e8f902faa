from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from faceshape.analysis.face_shape import FaceMeasurements, ShapeLabel, classify, measure
from faceshape.landmarks.provider_base import DetectedFace, FaceBox, LandmarkProvider


@dataclass(frozen=True)
class FaceShapeResult:
    face_index: int
    box: FaceBox
    measurements: FaceMeasurements
    label: ShapeLabel
    face: DetectedFace


def classify_faces(faces: list[DetectedFace]) -> list[FaceShapeResult]:
    results: list[FaceShapeResult] = []
    for face_index, face in enumerate(faces):
        measurements = measure(face.landmarks)
        results.append(
            FaceShapeResult(
                face_index=face_index,
                box=face.box,
                measurements=measurements,
                label=classify(measurements),
                face=face,
            )
        )
    return results


def analyze_frame(
    image_rgb: Any,
    provider: LandmarkProvider,
    timestamp_ms: int | None = None,
) -> list[FaceShapeResult]:
    """Detect every face in ``image_rgb`` and classify each one independently."""
    return classify_faces(provider.detect(image_rgb, timestamp_ms=timestamp_ms))
