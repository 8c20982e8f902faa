from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from faceshape.analysis.face_shape import LandmarkSet


@dataclass(frozen=True)
class FaceBox:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class DetectedFace:
    landmarks: LandmarkSet
    box: FaceBox


class LandmarkProvider(ABC):
    """Interface for frame-level face and landmark detection."""

    @abstractmethod
    def detect(self, image_rgb: Any, timestamp_ms: int | None = None) -> list[DetectedFace]:
        """Return one entry per detected face, in detector order."""

    def close(self) -> None:
        """Release detector resources."""

    def __enter__(self) -> LandmarkProvider:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
