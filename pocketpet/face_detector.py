"""Skin-colour heuristic face detection on RGB565 camera frames."""

from __future__ import annotations

from dataclasses import dataclass

_SAMPLE_STEP = 4
_MIN_SKIN_SAMPLES = 30
_MIN_SKIN_RATIO = 0.03
_MAX_SKIN_RATIO = 0.6
_MIN_BLOB_SIZE = 20
_MIN_ASPECT = 0.4
_MAX_ASPECT = 2.5
_HIGH_CONFIDENCE_RATIO = 0.15


@dataclass(frozen=True)
class FaceResult:
    """Outcome of one detection pass, in frame pixel coordinates."""

    detected: bool = False
    center_x: int = 0
    center_y: int = 0
    width: int = 0
    height: int = 0
    confidence: float = 0.0


def is_skin_pixel(pixel: int) -> bool:
    """Return True if an RGB565 pixel value looks like skin."""
    r5 = (pixel >> 11) & 0x1F
    g6 = (pixel >> 5) & 0x3F
    b5 = pixel & 0x1F

    r = (r5 << 3) | (r5 >> 2)
    g = (g6 << 2) | (g6 >> 4)
    b = (b5 << 3) | (b5 >> 2)

    if r < 60 or g < 30 or b < 15:
        return False
    if r < g or r < b:
        return False
    if r - g < 15 or r - b < 15:
        return False
    return not (g > 200 and b > 200)


class FaceDetector:
    """Finds a single skin-coloured blob that plausibly is a face."""

    def __init__(self, enabled_on_boot: bool = True) -> None:
        self._enabled_on_boot = enabled_on_boot
        self._enabled = False
        self._backend_available = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def backend_available(self) -> bool:
        return self._backend_available

    def begin(self) -> bool:
        self._enabled = self._enabled_on_boot
        self._backend_available = True
        return True

    def end(self) -> bool:
        self._enabled = False
        return True

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled and self._backend_available

    def status_text(self) -> str:
        if not self._backend_available:
            return "Face tracking unavailable"
        return "Face detection ready" if self._enabled else "Face detection disabled"

    def detect(self, frame: bytes | bytearray | memoryview | None,
               width: int, height: int) -> FaceResult:
        """Scan a big-endian RGB565 frame of width x height pixels."""
        if not self._enabled or frame is None or width <= 0 or height <= 0:
            return FaceResult()
        if len(frame) < width * height * 2:
            raise ValueError(
                f"frame holds {len(frame)} bytes, {width}x{height} RGB565 needs {width * height * 2}"
            )

        data = bytes(frame)
        skin = [
            (x, y)
            for y in range(0, height, _SAMPLE_STEP)
            for x in range(0, width, _SAMPLE_STEP)
            if is_skin_pixel(int.from_bytes(data[(y * width + x) * 2:(y * width + x) * 2 + 2], "big"))
        ]

        total_sampled = (width // _SAMPLE_STEP) * (height // _SAMPLE_STEP)
        if total_sampled <= 0:
            return FaceResult()

        skin_count = len(skin)
        skin_ratio = skin_count / total_sampled
        if skin_count < _MIN_SKIN_SAMPLES or not _MIN_SKIN_RATIO <= skin_ratio <= _MAX_SKIN_RATIO:
            return FaceResult()

        xs = [x for x, _ in skin]
        ys = [y for _, y in skin]
        blob_w = max(xs) - min(xs)
        blob_h = max(ys) - min(ys)
        if blob_w < _MIN_BLOB_SIZE or blob_h < _MIN_BLOB_SIZE:
            return FaceResult()

        aspect = blob_w / blob_h
        if aspect < _MIN_ASPECT or aspect > _MAX_ASPECT:
            return FaceResult()

        return FaceResult(
            detected=True,
            center_x=sum(xs) // skin_count,
            center_y=sum(ys) // skin_count,
            width=blob_w,
            height=blob_h,
            confidence=0.8 if skin_ratio > _HIGH_CONFIDENCE_RATIO else 0.5,
        )