"""Turns detected face positions into pan/tilt corrections."""

from __future__ import annotations

from pocketpet.face_detector import FaceResult


class FaceTrackingController:
    """Filters face position and yields servo deltas outside a deadband."""

    def __init__(self, filter_alpha: float = 0.35, deadband: float = 0.12,
                 gain_deg: float = 6.0) -> None:
        self._filter_alpha = filter_alpha
        self._deadband = deadband
        self._gain_deg = gain_deg
        self._smooth_x = 0.0
        self._smooth_y = 0.0
        self._has_face = False
        self._centered = False
        self._status = "Face tracking idle"

    def reset(self) -> None:
        self._smooth_x = 0.0
        self._smooth_y = 0.0
        self._has_face = False
        self._centered = False
        self._status = "Face tracking idle"

    def update(self, face: FaceResult, frame_width: int,
               frame_height: int) -> tuple[float, float] | None:
        """Return (pan_delta_deg, tilt_delta_deg), or None without a face."""
        if not face.detected or frame_width <= 0 or frame_height <= 0:
            self._has_face = False
            self._centered = False
            self._status = "No face detected"
            return None

        nx = (face.center_x / frame_width) * 2.0 - 1.0
        ny = (face.center_y / frame_height) * 2.0 - 1.0

        if not self._has_face:
            self._smooth_x = nx
            self._smooth_y = ny
            self._has_face = True
        else:
            self._smooth_x += (nx - self._smooth_x) * self._filter_alpha
            self._smooth_y += (ny - self._smooth_y) * self._filter_alpha

        pan_centered = abs(self._smooth_x) < self._deadband
        tilt_centered = abs(self._smooth_y) < self._deadband
        self._centered = pan_centered and tilt_centered

        pan_delta = 0.0 if pan_centered else self._smooth_x * self._gain_deg
        tilt_delta = 0.0 if tilt_centered else self._smooth_y * self._gain_deg

        self._status = "Face centered" if self._centered else "Centering face"
        return pan_delta, tilt_delta

    def has_face(self) -> bool:
        return self._has_face

    def is_centered(self) -> bool:
        return self._centered

    def status_text(self) -> str:
        return self._status