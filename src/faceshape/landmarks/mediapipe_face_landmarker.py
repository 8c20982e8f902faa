from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from faceshape.analysis.face_shape import LandmarkSet
from faceshape.landmarks.layout import MEDIAPIPE_MIN_LANDMARKS, MEDIAPIPE_TO_68
from faceshape.landmarks.provider_base import DetectedFace, FaceBox, LandmarkProvider
from faceshape.runtime_paths import get_model_path

logger = logging.getLogger(__name__)

OFFICIAL_FACE_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
    "face_landmarker/float16/1/face_landmarker.task"
)


def _build_missing_model_message(model_path: Path) -> str:
    return (
        f"Model file not found: {model_path}\n"
        f"Official model URL: {OFFICIAL_FACE_LANDMARKER_MODEL_URL}\n"
        "Download example:\n"
        f'mkdir -p "{model_path.parent}"\n'
        f'curl -L -o "{model_path}" "{OFFICIAL_FACE_LANDMARKER_MODEL_URL}"'
    )


def _require_model_file(model_path: str | Path) -> Path:
    resolved = Path(model_path)
    if not resolved.exists() or not resolved.is_file():
        raise FileNotFoundError(_build_missing_model_message(resolved))
    return resolved


def _import_mediapipe() -> Any:
    try:
        import mediapipe as mp  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "mediapipe is required for landmark detection. Install with: pip install mediapipe"
        ) from exc
    return mp


def face_from_normalized(face_landmarks: Any, width: int, height: int) -> DetectedFace | None:
    """Convert one MediaPipe face (normalized coordinates) to pixel space.

    Returns ``None`` when the face carries fewer points than the Face Mesh
    topology, since the 68-point layout cannot be picked from it.
    """
    if len(face_landmarks) < MEDIAPIPE_MIN_LANDMARKS:
        return None

    all_xy = np.asarray(
        [[landmark.x * width, landmark.y * height] for landmark in face_landmarks],
        dtype=np.float64,
    )
    x_min, y_min = all_xy.min(axis=0)
    x_max, y_max = all_xy.max(axis=0)
    box = FaceBox(
        x=float(x_min),
        y=float(y_min),
        width=float(x_max - x_min),
        height=float(y_max - y_min),
    )
    landmarks = LandmarkSet.from_array(all_xy[MEDIAPIPE_TO_68])
    return DetectedFace(landmarks=landmarks, box=box)


def faces_from_result(result: Any, width: int, height: int) -> list[DetectedFace]:
    faces: list[DetectedFace] = []
    for face_idx, face_landmarks in enumerate(getattr(result, "face_landmarks", None) or []):
        face = face_from_normalized(face_landmarks, width, height)
        if face is None:
            logger.warning(
                "Skipping face %d: expected at least %d landmarks, got %d",
                face_idx,
                MEDIAPIPE_MIN_LANDMARKS,
                len(face_landmarks),
            )
            continue
        faces.append(face)
    return faces


class MediaPipeLandmarkProvider(LandmarkProvider):
    """Face Landmarker backed provider producing 68-point landmark sets."""

    def __init__(
        self,
        model_path: str | Path | None = None,
        num_faces: int = 1,
        video_mode: bool = False,
        use_gpu_delegate: bool = False,
    ) -> None:
        if num_faces < 1:
            raise ValueError(f"num_faces must be >= 1, got: {num_faces}")

        model_file = _require_model_file(model_path or get_model_path())
        mp = _import_mediapipe()

        base_options_kwargs: dict[str, Any] = {"model_asset_path": str(model_file)}
        if use_gpu_delegate:
            base_options_kwargs["delegate"] = mp.tasks.BaseOptions.Delegate.GPU
        running_mode = (
            mp.tasks.vision.RunningMode.VIDEO if video_mode else mp.tasks.vision.RunningMode.IMAGE
        )
        options = mp.tasks.vision.FaceLandmarkerOptions(
            base_options=mp.tasks.BaseOptions(**base_options_kwargs),
            running_mode=running_mode,
            num_faces=num_faces,
        )

        self._mp = mp
        self._video_mode = video_mode
        self._landmarker = mp.tasks.vision.FaceLandmarker.create_from_options(options)
        logger.info(
            "Loaded face landmarker %s (num_faces=%d, mode=%s)",
            model_file,
            num_faces,
            "video" if video_mode else "image",
        )

    def detect(self, image_rgb: Any, timestamp_ms: int | None = None) -> list[DetectedFace]:
        height, width = image_rgb.shape[:2]
        mp_image = self._mp.Image(
            image_format=self._mp.ImageFormat.SRGB,
            data=np.ascontiguousarray(image_rgb),
        )
        if self._video_mode:
            if timestamp_ms is None:
                raise ValueError("timestamp_ms is required when the provider runs in video mode")
            result = self._landmarker.detect_for_video(mp_image, int(timestamp_ms))
        else:
            result = self._landmarker.detect(mp_image)
        return faces_from_result(result, width, height)

    def close(self) -> None:
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
