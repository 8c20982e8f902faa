from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pytest

# fmt: off
JAW_XY = [
    (20, 100), (22, 120), (26, 140), (32, 160), (40, 176), (52, 188), (66, 196), (82, 200),
    (100, 202),
    (118, 200), (134, 196), (148, 188), (160, 176), (168, 160), (174, 140), (178, 124), (180, 100),
]
# Deliberately unsorted along x.
LEFT_EYEBROW_XY = [(50, 70), (40, 72), (60, 68), (70, 68), (85, 72)]
RIGHT_EYEBROW_XY = [(115, 72), (130, 68), (160, 72), (145, 68), (150, 70)]
# fmt: on


def build_face_xy() -> np.ndarray:
    face_xy = np.zeros((68, 2), dtype=np.float64)
    face_xy[0:17] = JAW_XY
    face_xy[17:22] = LEFT_EYEBROW_XY
    face_xy[22:27] = RIGHT_EYEBROW_XY
    for offset, idx in enumerate(range(27, 68)):
        face_xy[idx] = (80.0 + (offset % 10) * 4.0, 90.0 + (offset // 10) * 20.0)
    return face_xy


@pytest.fixture
def face_xy() -> np.ndarray:
    return build_face_xy()


def _write_dummy_video(path: Path, *, codec: str, width: int, height: int, frame_count: int) -> bool:
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*codec), 10.0, (width, height))
    if not writer.isOpened():
        return False
    try:
        for idx in range(frame_count):
            frame_bgr = np.zeros((height, width, 3), dtype=np.uint8)
            frame_bgr[:, :, 2] = (idx * 40) % 255
            writer.write(frame_bgr)
    finally:
        writer.release()
    return path.exists() and path.stat().st_size > 0


@pytest.fixture
def dummy_video(tmp_path: Path) -> tuple[Path, int, int]:
    """Six-frame 64x48 clip at 10 fps, as (path, width, height)."""
    width, height = 64, 48
    for name, codec in (("dummy.mp4", "mp4v"), ("dummy.avi", "MJPG")):
        video_path = tmp_path / name
        if _write_dummy_video(video_path, codec=codec, width=width, height=height, frame_count=6):
            return video_path, width, height
    pytest.skip("No available OpenCV writer codec for test video generation")
