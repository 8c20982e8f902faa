from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np

from faceshape.analysis.face_shape import ShapeLabel
from faceshape.config import OverlayStyle
from faceshape.pipeline import FaceShapeResult

FONT = cv2.FONT_HERSHEY_SIMPLEX
# Cap height of FONT_HERSHEY_SIMPLEX at scale 1.0, in pixels.
HERSHEY_BASE_PX = 22.0
STATUS_ORIGIN = (10, 24)


def _font_scale(style: OverlayStyle) -> float:
    return style.font_size / HERSHEY_BASE_PX


def display_label(label: ShapeLabel | None) -> str:
    if label is None:
        return "-"
    return label.value or "(unrecognized)"


def draw_face_overlay(
    image_bgr: np.ndarray,
    result: FaceShapeResult,
    style: OverlayStyle | None = None,
) -> np.ndarray:
    """Draw the face box, its shape caption, and optionally landmark dots."""
    style = style or OverlayStyle()
    box = result.box
    top_left = (int(round(box.x)), int(round(box.y)))
    bottom_right = (int(round(box.x + box.width)), int(round(box.y + box.height)))
    cv2.rectangle(image_bgr, top_left, bottom_right, style.box_bgr, style.line_width)

    if result.label.value:
        scale = _font_scale(style)
        (text_w, text_h), baseline = cv2.getTextSize(result.label.value, FONT, scale, 1)
        caption_top = max(top_left[1] - text_h - baseline - 4, 0)
        cv2.rectangle(
            image_bgr,
            (top_left[0], caption_top),
            (top_left[0] + text_w + 4, caption_top + text_h + baseline + 4),
            style.box_bgr,
            thickness=-1,
        )
        cv2.putText(
            image_bgr,
            result.label.value,
            (top_left[0] + 2, caption_top + text_h + 2),
            FONT,
            scale,
            (255, 255, 255),
            1,
            cv2.LINE_AA,
        )

    if style.draw_landmarks:
        for point in result.face.landmarks.points:
            cv2.circle(
                image_bgr,
                (int(round(point.x)), int(round(point.y))),
                1,
                style.landmark_bgr,
                thickness=-1,
            )
    return image_bgr


def draw_status_text(
    image_bgr: np.ndarray,
    text: str,
    style: OverlayStyle | None = None,
) -> np.ndarray:
    style = style or OverlayStyle()
    cv2.putText(
        image_bgr,
        text,
        STATUS_ORIGIN,
        FONT,
        _font_scale(style) * 1.5,
        style.text_bgr,
        2,
        cv2.LINE_AA,
    )
    return image_bgr


def render_results(
    image_bgr: np.ndarray,
    results: Sequence[FaceShapeResult],
    style: OverlayStyle | None = None,
) -> np.ndarray:
    style = style or OverlayStyle()
    for result in results:
        draw_face_overlay(image_bgr, result, style)
    last_label = results[-1].label if results else None
    draw_status_text(image_bgr, f"Face Shape: {display_label(last_label)}", style)
    return image_bgr
