from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from faceshape.landmarks.layout import MEDIAPIPE_LANDMARK_COUNT, MEDIAPIPE_TO_68
from faceshape.landmarks.mediapipe_face_landmarker import (
    OFFICIAL_FACE_LANDMARKER_MODEL_URL,
    MediaPipeLandmarkProvider,
    face_from_normalized,
    faces_from_result,
)


def _fake_face(count: int = MEDIAPIPE_LANDMARK_COUNT) -> list[SimpleNamespace]:
    points = []
    for idx in range(count):
        x = 0.25 + 0.5 * (idx % 100) / 99.0
        y = 0.2 + 0.6 * (idx // 100) / 4.0
        points.append(SimpleNamespace(x=x, y=y, z=0.0))
    return points


def test_provider_reports_helpful_model_missing_message(tmp_path: Path) -> None:
    missing_model = tmp_path / "missing.task"

    with pytest.raises(FileNotFoundError) as exc_info:
        MediaPipeLandmarkProvider(model_path=missing_model)

    message = str(exc_info.value)
    assert "Model file not found" in message
    assert OFFICIAL_FACE_LANDMARKER_MODEL_URL in message


def test_provider_rejects_invalid_num_faces(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="num_faces"):
        MediaPipeLandmarkProvider(model_path=tmp_path / "missing.task", num_faces=0)


def test_face_from_normalized_scales_to_pixels_and_picks_layout() -> None:
    face = face_from_normalized(_fake_face(), width=640, height=480)

    assert face is not None
    raw = _fake_face()
    for layout_idx in (0, 8, 16, 17, 26):
        mp_point = raw[MEDIAPIPE_TO_68[layout_idx]]
        point = face.landmarks.points[layout_idx]
        assert point.x == pytest.approx(mp_point.x * 640)
        assert point.y == pytest.approx(mp_point.y * 480)

    assert face.box.x == pytest.approx(0.25 * 640)
    assert face.box.y == pytest.approx(0.2 * 480)
    assert face.box.width == pytest.approx(0.5 * 640)
    assert face.box.height == pytest.approx(0.6 * 480)


def test_faces_from_result_skips_incomplete_faces(caplog: pytest.LogCaptureFixture) -> None:
    result = SimpleNamespace(face_landmarks=[_fake_face(10), _fake_face()])

    with caplog.at_level(logging.WARNING):
        faces = faces_from_result(result, width=320, height=240)

    assert len(faces) == 1
    assert "Skipping face 0" in caplog.text


def test_faces_from_result_handles_no_detection() -> None:
    assert faces_from_result(SimpleNamespace(face_landmarks=[]), width=320, height=240) == []
    assert faces_from_result(SimpleNamespace(), width=320, height=240) == []
