"""Path resolution for development checkouts and PyInstaller-frozen builds.

The landmarker model is looked up relative to :func:`get_base_dir` so that a
bundled ``faceshape`` executable finds ``models/`` next to itself.
"""

from __future__ import annotations

import sys
from pathlib import Path

DEFAULT_MODEL_RELATIVE_PATH = "models/face_landmarker.task"


def is_frozen() -> bool:
    """Return ``True`` when running inside a PyInstaller bundle."""
    return getattr(sys, "frozen", False) is True


def get_base_dir() -> Path:
    """Return the directory relative model paths are resolved against.

    * **Frozen**: the directory containing the executable.
    * **Development**: the project root (``src/faceshape/`` -> project root).
    """
    if is_frozen():
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent.parent.parent


def get_model_path(relative: str = DEFAULT_MODEL_RELATIVE_PATH) -> Path:
    """Return the absolute path to a model file relative to the base dir."""
    return get_base_dir() / relative
