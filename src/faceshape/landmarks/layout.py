"""68-point facial landmark layout used by the face shape classifier.

Indices follow the iBUG 300-W / dlib numbering: the jaw outline runs from the
image-left ear area (0) through the chin (8) to the image-right ear area (16),
followed by the left eyebrow (17..21) and the right eyebrow (22..26).
"""

from __future__ import annotations

from typing import Sequence, TypeVar

LANDMARK_COUNT = 68
MEDIAPIPE_LANDMARK_COUNT = 478
MEDIAPIPE_MIN_LANDMARKS = 468

T = TypeVar("T")

JAW_OUTLINE = list(range(0, 17))
LEFT_EYEBROW = list(range(17, 22))
RIGHT_EYEBROW = list(range(22, 27))
NOSE_BRIDGE = list(range(27, 31))
NOSE_LOWER = list(range(31, 36))
LEFT_EYE = list(range(36, 42))
RIGHT_EYE = list(range(42, 48))
OUTER_LIP = list(range(48, 60))
INNER_LIP = list(range(60, 68))

# Positions inside JAW_OUTLINE, not absolute landmark indices.
JAW_CENTER = len(JAW_OUTLINE) // 2
JAW_LEFT_END = 0
JAW_RIGHT_END = len(JAW_OUTLINE) - 1
CHEEK_CROSS = (1, len(JAW_OUTLINE) - 2)
JAWLINE_SUM_FIRST_END = 3

# fmt: off
_MP_JAW = [234, 93, 132, 58, 172, 136, 150, 176, 152, 400, 379, 365, 397, 288, 361, 323, 454]
_MP_LEFT_EYEBROW = [70, 63, 105, 66, 107]
_MP_RIGHT_EYEBROW = [336, 296, 334, 293, 300]
_MP_NOSE_BRIDGE = [168, 6, 197, 195]
_MP_NOSE_LOWER = [98, 97, 2, 326, 327]
_MP_LEFT_EYE = [33, 160, 158, 133, 153, 144]
_MP_RIGHT_EYE = [362, 385, 387, 263, 373, 380]
_MP_OUTER_LIP = [61, 40, 37, 0, 267, 270, 291, 321, 314, 17, 84, 91]
_MP_INNER_LIP = [78, 81, 13, 311, 308, 402, 14, 178]
# fmt: on

MEDIAPIPE_TO_68 = (
    _MP_JAW
    + _MP_LEFT_EYEBROW
    + _MP_RIGHT_EYEBROW
    + _MP_NOSE_BRIDGE
    + _MP_NOSE_LOWER
    + _MP_LEFT_EYE
    + _MP_RIGHT_EYE
    + _MP_OUTER_LIP
    + _MP_INNER_LIP
)


def select(points: Sequence[T], indices: Sequence[int]) -> list[T]:
    return [points[idx] for idx in indices]


def _validate_mediapipe_table() -> None:
    if len(MEDIAPIPE_TO_68) != LANDMARK_COUNT:
        raise ValueError(
            f"MEDIAPIPE_TO_68 must have {LANDMARK_COUNT} entries, got {len(MEDIAPIPE_TO_68)}"
        )
    if not all(isinstance(value, int) for value in MEDIAPIPE_TO_68):
        raise TypeError("MEDIAPIPE_TO_68 must contain integers only")
    if not all(0 <= value < MEDIAPIPE_MIN_LANDMARKS for value in MEDIAPIPE_TO_68):
        raise ValueError(f"MEDIAPIPE_TO_68 values must be in range 0..{MEDIAPIPE_MIN_LANDMARKS - 1}")
    if len(set(MEDIAPIPE_TO_68)) != LANDMARK_COUNT:
        raise ValueError("MEDIAPIPE_TO_68 must not map two layout points to one landmark")

    groups = [
        ("JAW_OUTLINE", JAW_OUTLINE, 17),
        ("LEFT_EYEBROW", LEFT_EYEBROW, 5),
        ("RIGHT_EYEBROW", RIGHT_EYEBROW, 5),
    ]
    for name, indices, expected in groups:
        if len(indices) != expected:
            raise ValueError(f"{name} must have {expected} points, got {len(indices)}")


_validate_mediapipe_table()
