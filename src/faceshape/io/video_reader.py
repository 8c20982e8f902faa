from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import cv2
import numpy as np

SUPPORTED_VIDEO_EXTENSIONS = {".mp4", ".avi", ".mov", ".mkv", ".m4v"}
SUPPORTED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".webp"}


@dataclass(frozen=True)
class VideoInfo:
    path: Path
    fps: float
    frame_count: int
    width: int
    height: int
    duration_ms: int


@dataclass(frozen=True)
class Frame:
    idx: int
    timestamp_ms: int
    image_rgb: np.ndarray


def _require_file(path: str | Path, kind: str, extensions: set[str]) -> Path:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"{kind} file does not exist: {file_path}")
    if not file_path.is_file():
        raise ValueError(f"{kind} path is not a file: {file_path}")
    if file_path.suffix.lower() not in extensions:
        supported = ", ".join(sorted(extensions))
        raise ValueError(
            f"Unsupported {kind.lower()} extension '{file_path.suffix}'. Supported: {supported}"
        )
    return file_path


def probe_video(path: str | Path) -> VideoInfo:
    video_path = _require_file(path, "Video", SUPPORTED_VIDEO_EXTENSIONS)
    cap = cv2.VideoCapture(str(video_path))
    if not cap.isOpened():
        cap.release()
        raise RuntimeError(f"Failed to open video file with OpenCV: {video_path}")

    try:
        fps = float(cap.get(cv2.CAP_PROP_FPS))
        frame_count = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
    finally:
        cap.release()

    if fps <= 0:
        raise RuntimeError(f"Invalid FPS from video metadata: {video_path}")
    if width <= 0 or height <= 0:
        raise RuntimeError(f"Invalid frame size from video metadata: {video_path}")
    if frame_count < 0:
        raise RuntimeError(f"Invalid frame count from video metadata: {video_path}")

    return VideoInfo(
        path=video_path,
        fps=fps,
        frame_count=frame_count,
        width=width,
        height=height,
        duration_ms=round(frame_count * 1000 / fps),
    )


def iter_frames(
    path: str | Path,
    *,
    stride: int = 1,
    max_frames: int | None = None,
) -> Iterator[Frame]:
    """Yield every ``stride``-th frame as RGB, stopping after ``max_frames`` frames."""
    if stride < 1:
        raise ValueError(f"stride must be >= 1, got: {stride}")
    if max_frames is not None and max_frames < 1:
        raise ValueError(f"max_frames must be >= 1, got: {max_frames}")

    info = probe_video(path)
    cap = cv2.VideoCapture(str(info.path))
    if not cap.isOpened():
        cap.release()
        raise RuntimeError(f"Failed to open video file with OpenCV: {info.path}")

    yielded = 0
    frame_idx = -1
    try:
        while max_frames is None or yielded < max_frames:
            ok, image_bgr = cap.read()
            if not ok:
                return
            frame_idx += 1
            if frame_idx % stride:
                continue
            yielded += 1
            yield Frame(
                idx=frame_idx,
                timestamp_ms=round(frame_idx * 1000 / info.fps),
                image_rgb=cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB),
            )
    finally:
        cap.release()


def open_camera(index: int = 0) -> cv2.VideoCapture:
    if index < 0:
        raise ValueError(f"camera index must be >= 0, got: {index}")
    cap = cv2.VideoCapture(index)
    if not cap.isOpened():
        cap.release()
        raise RuntimeError(f"Failed to open camera {index} with OpenCV. Try another --camera index.")
    return cap


def load_image_rgb(path: str | Path) -> np.ndarray:
    image_path = _require_file(path, "Image", SUPPORTED_IMAGE_EXTENSIONS)
    image_bgr = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
    if image_bgr is None:
        raise RuntimeError(f"Failed to decode image with OpenCV: {image_path}")
    return cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)
