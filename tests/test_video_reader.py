from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pytest

from faceshape.io.video_reader import iter_frames, load_image_rgb, open_camera, probe_video


def test_probe_video_reads_metadata(dummy_video: tuple[Path, int, int]) -> None:
    video_path, width, height = dummy_video

    info = probe_video(video_path)

    assert info.path == video_path
    assert info.width == width
    assert info.height == height
    assert info.frame_count > 0
    assert info.duration_ms == round(info.frame_count * 1000 / info.fps)


def test_iter_frames_stride_and_timestamps(dummy_video: tuple[Path, int, int]) -> None:
    video_path, width, height = dummy_video
    info = probe_video(video_path)

    frames = list(iter_frames(video_path, stride=2))

    assert [frame.idx for frame in frames] == list(range(0, frames[-1].idx + 1, 2))
    for frame in frames:
        assert frame.image_rgb.shape == (height, width, 3)
        assert frame.timestamp_ms == round(frame.idx * 1000 / info.fps)


def test_iter_frames_stops_after_max_frames(dummy_video: tuple[Path, int, int]) -> None:
    video_path, _, _ = dummy_video

    frames = list(iter_frames(video_path, stride=2, max_frames=2))

    assert [frame.idx for frame in frames] == [0, 2]


def test_iter_frames_rejects_invalid_arguments(dummy_video: tuple[Path, int, int]) -> None:
    video_path, _, _ = dummy_video
    with pytest.raises(ValueError, match="stride"):
        next(iter_frames(video_path, stride=0))
    with pytest.raises(ValueError, match="max_frames"):
        next(iter_frames(video_path, max_frames=0))


def test_probe_video_rejects_missing_and_unsupported_files(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="does not exist"):
        probe_video(tmp_path / "missing.mp4")

    text_file = tmp_path / "notes.txt"
    text_file.write_text("stub", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported video extension"):
        probe_video(text_file)


def test_load_image_rgb_converts_channel_order(tmp_path: Path) -> None:
    image_bgr = np.zeros((8, 8, 3), dtype=np.uint8)
    image_bgr[:, :, 0] = 255
    image_path = tmp_path / "blue.png"
    assert cv2.imwrite(str(image_path), image_bgr)

    image_rgb = load_image_rgb(image_path)

    assert image_rgb.shape == (8, 8, 3)
    assert tuple(image_rgb[0, 0]) == (0, 0, 255)


def test_load_image_rgb_reports_undecodable_file(tmp_path: Path) -> None:
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not a png")
    with pytest.raises(RuntimeError, match="Failed to decode"):
        load_image_rgb(broken)


def test_open_camera_rejects_negative_index() -> None:
    with pytest.raises(ValueError, match="camera index"):
        open_camera(-1)
