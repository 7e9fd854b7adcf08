"""Smoothed gaze target derived from face detection results."""

from __future__ import annotations

import time
from typing import Callable

from pocketpet.face_detector import FaceResult


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class FaceTracker:
    """Keeps an exponentially smoothed, normalised face position."""

    def __init__(self, frame_width: int = 320, frame_height: int = 240,
                 timeout_ms: int = 1000,
                 clock: Callable[[], int] = _monotonic_ms) -> None:
        self._frame_width = frame_width
        self._frame_height = frame_height
        self._timeout_ms = timeout_ms
        self._clock = clock
        self._smooth_x = 0.0
        self._smooth_y = 0.0
        self._face_present = False
        self._last_face_time = 0

    def update(self, face: FaceResult) -> None:
        now = self._clock()
        if face.detected:
            nx = (face.center_x / self._frame_width) * 2.0 - 1.0
            ny = (face.center_y / self._frame_height) * 2.0 - 1.0
            if not self._face_present:
                self._smooth_x = nx
                self._smooth_y = ny
                self._face_present = True
            else:
                self._smooth_x = self._smooth_x * 0.8 + nx * 0.2
                self._smooth_y = self._smooth_y * 0.8 + ny * 0.2
            self._last_face_time = now
        elif self._face_present and now - self._last_face_time > self._timeout_ms:
            self.reset()

    def reset(self) -> None:
        self._face_present = False
        self._smooth_x = 0.0
        self._smooth_y = 0.0

    def gaze_x(self) -> float:
        """Horizontal gaze offset in -1..1."""
        return self._smooth_x

    def gaze_y(self) -> float:
        """Vertical gaze offset in -1..1."""
        return self._smooth_y

    def has_face(self) -> bool:
        return self._face_present