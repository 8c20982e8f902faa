"""Camera polling loop that re-classifies faces on a fixed interval."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import cv2

from faceshape.config import LiveConfig
from faceshape.landmarks.provider_base import LandmarkProvider
from faceshape.pipeline import FaceShapeResult, analyze_frame
from faceshape.viz.overlay import render_results

logger = logging.getLogger(__name__)

QUIT_KEYS = {ord("q"), 27}


class LiveSession:
    """Read frames from a capture, classify faces, and display the overlay.

    Detection runs on the first frame and then at most once per
    ``config.interval_ms``; frames in between are displayed with the latest
    results. The caller opens the capture and the session releases it when
    ``run`` returns; the provider is closed only when ``owns_provider`` is set.
    """

    def __init__(
        self,
        config: LiveConfig,
        provider: LandmarkProvider,
        capture: Any,
        *,
        clock: Callable[[], float] = time.monotonic,
        owns_provider: bool = False,
    ) -> None:
        self.config = config
        self.provider = provider
        self._capture = capture
        self._clock = clock
        self._owns_provider = owns_provider
        self._started_at: float | None = None
        self._last_tick: float | None = None
        self.latest_results: list[FaceShapeResult] = []
        self.frames_read = 0
        self.ticks = 0

    def _elapsed_ms(self, now: float) -> int:
        if self._started_at is None:
            self._started_at = now
        return int(round((now - self._started_at) * 1000))

    def should_analyze(self, now: float) -> bool:
        if self._last_tick is None:
            return True
        return (now - self._last_tick) * 1000 >= self.config.interval_ms

    def process(self, image_bgr: Any) -> list[FaceShapeResult]:
        now = self._clock()
        timestamp_ms = self._elapsed_ms(now)
        if self.should_analyze(now):
            image_rgb = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)
            self.latest_results = analyze_frame(image_rgb, self.provider, timestamp_ms=timestamp_ms)
            self._last_tick = now
            self.ticks += 1
            logger.debug(
                "tick %d at %d ms: %s",
                self.ticks,
                timestamp_ms,
                [result.label.value for result in self.latest_results],
            )
        render_results(image_bgr, self.latest_results, self.config.style)
        return self.latest_results

    def _show(self, image_bgr: Any) -> bool:
        if not self.config.show_window:
            return True
        cv2.imshow(self.config.window_name, image_bgr)
        key = cv2.waitKey(1) & 0xFF
        return key not in QUIT_KEYS

    def run(self) -> int:
        capture = self._capture
        logger.info(
            "Live session started (camera=%d, interval=%d ms)",
            self.config.camera_index,
            self.config.interval_ms,
        )

        try:
            while self.config.max_frames is None or self.frames_read < self.config.max_frames:
                ok, image_bgr = capture.read()
                if not ok:
                    logger.warning("Frame read failed after %d frames; stopping", self.frames_read)
                    break
                self.frames_read += 1
                self.process(image_bgr)
                if not self._show(image_bgr):
                    break
        finally:
            capture.release()
            if self._owns_provider:
                self.provider.close()
            if self.config.show_window:
                cv2.destroyAllWindows()

        logger.info("Live session stopped: %d frames, %d analyses", self.frames_read, self.ticks)
        return self.ticks
