from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from faceshape.runtime_paths import get_model_path

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
DEFAULT_INTERVAL_MS = 100


def hex_to_bgr(value: str) -> tuple[int, int, int]:
    if not HEX_COLOR_PATTERN.match(value):
        raise ValueError(f"Color must be a '#RRGGBB' hex string, got: {value}")
    red = int(value[1:3], 16)
    green = int(value[3:5], 16)
    blue = int(value[5:7], 16)
    return blue, green, red


class DetectorConfig(BaseModel):
    model_path: Path = Field(
        default_factory=get_model_path,
        description="MediaPipe Face Landmarker .task model path",
    )
    num_faces: int = Field(default=1, ge=1, description="Maximum number of faces per frame")
    use_gpu_delegate: bool = False

    @field_validator("model_path")
    @classmethod
    def validate_model_path(cls, value: Path) -> Path:
        if value.exists() and not value.is_file():
            raise ValueError(f"Model path is not a file: {value}")
        return value


class OverlayStyle(BaseModel):
    box_color: str = "#FF0000"
    text_color: str = "#FF0000"
    landmark_color: str = "#00FFFF"
    line_width: int = Field(default=2, ge=1)
    font_size: int = Field(default=12, ge=6)
    draw_landmarks: bool = True

    @field_validator("box_color", "text_color", "landmark_color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        hex_to_bgr(value)
        return value.upper()

    @property
    def box_bgr(self) -> tuple[int, int, int]:
        return hex_to_bgr(self.box_color)

    @property
    def text_bgr(self) -> tuple[int, int, int]:
        return hex_to_bgr(self.text_color)

    @property
    def landmark_bgr(self) -> tuple[int, int, int]:
        return hex_to_bgr(self.landmark_color)


class LiveConfig(BaseModel):
    camera_index: int = Field(default=0, ge=0, description="OpenCV camera index")
    interval_ms: int = Field(
        default=DEFAULT_INTERVAL_MS,
        gt=0,
        description="Minimum delay between two analyzed frames",
    )
    max_frames: int | None = Field(default=None, ge=1)
    show_window: bool = True
    window_name: str = "faceshape"
    detector: DetectorConfig = Field(default_factory=DetectorConfig)
    style: OverlayStyle = Field(default_factory=OverlayStyle)

    def as_summary(self) -> dict[str, object]:
        return {
            "camera_index": self.camera_index,
            "interval_ms": self.interval_ms,
            "max_frames": self.max_frames,
            "show_window": self.show_window,
            "model_path": str(self.detector.model_path),
            "num_faces": self.detector.num_faces,
            "use_gpu_delegate": self.detector.use_gpu_delegate,
        }
