"""Device orientation, shake and twist detection from IMU readings."""

from __future__ import annotations

import time
from collections import deque
from enum import Enum
from typing import Callable

STABLE_THRESHOLD_MS = 700
TILT_THRESHOLD = 0.6

SHAKE_SAMPLE_COUNT = 10
SHAKE_VARIANCE_THRESHOLD = 0.15
SHAKE_COOLDOWN_MS = 2000

TWIST_THRESHOLD_DPS = 120.0
TWIST_COOLDOWN_MS = 800


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class Orientation(Enum):
    TOP = "Top"
    RIGHT = "Right"
    BOTTOM = "Bottom"
    LEFT = "Left"
    FLAT = "Flat"
    UNKNOWN = "Unknown"


class TwistDirection(Enum):
    NONE = "none"
    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counter_clockwise"


def orientation_name(orientation: Orientation | None) -> str:
    """Human-readable name of an orientation."""
    if isinstance(orientation, Orientation):
        return orientation.value
    return Orientation.UNKNOWN.value


class ImuOrientation:
    """Classifies accelerometer readings and detects shakes and twists."""

    def __init__(self, clock: Callable[[], int] = _monotonic_ms) -> None:
        self._clock = clock
        self._current = Orientation.UNKNOWN
        self._stable = Orientation.UNKNOWN
        self._candidate = Orientation.UNKNOWN
        self._stable_start = 0

        self._accel_history: deque[tuple[float, float, float]] = deque(maxlen=SHAKE_SAMPLE_COUNT)
        self._shaking = False
        self._last_shake_time = 0

        self._pending_twist = TwistDirection.NONE
        self._last_twist_time = 0

    def update(self, ax: float, ay: float, az: float, gz: float = 0.0) -> None:
        """Feed one accelerometer sample (g) and the z-axis gyro rate (deg/s)."""
        self._update_shake(ax, ay, az)
        self._update_twist(gz)

        abs_x, abs_y, abs_z = abs(ax), abs(ay), abs(az)
        if abs_z > TILT_THRESHOLD and abs_z > abs_x and abs_z > abs_y:
            detected = Orientation.FLAT
        elif abs_x > TILT_THRESHOLD or abs_y > TILT_THRESHOLD:
            if abs_x > abs_y:
                detected = Orientation.RIGHT if ax > 0 else Orientation.LEFT
            else:
                detected = Orientation.TOP if ay > 0 else Orientation.BOTTOM
        else:
            detected = Orientation.UNKNOWN

        self._current = detected

        now = self._clock()
        if detected == self._candidate:
            if detected != self._stable and now - self._stable_start >= STABLE_THRESHOLD_MS:
                self._stable = detected
        else:
            self._candidate = detected
            self._stable_start = now

    def current(self) -> Orientation:
        return self._current

    def stable(self) -> Orientation:
        """Orientation that has held steady for the stability threshold."""
        return self._stable

    def is_shaking(self) -> bool:
        return self._shaking

    def consume_twist(self) -> TwistDirection:
        """Return the pending twist, if any, and clear it."""
        twist = self._pending_twist
        self._pending_twist = TwistDirection.NONE
        return twist

    def _update_shake(self, ax: float, ay: float, az: float) -> None:
        now = self._clock()
        self._accel_history.append((ax, ay, az))

        if now - self._last_shake_time < SHAKE_COOLDOWN_MS:
            self._shaking = False
            return
        if len(self._accel_history) < SHAKE_SAMPLE_COUNT:
            self._shaking = False
            return

        count = len(self._accel_history)
        mean_x = sum(s[0] for s in self._accel_history) / count
        mean_y = sum(s[1] for s in self._accel_history) / count
        mean_z = sum(s[2] for s in self._accel_history) / count
        variance = sum(
            (x - mean_x) ** 2 + (y - mean_y) ** 2 + (z - mean_z) ** 2
            for x, y, z in self._accel_history
        ) / count

        if variance > SHAKE_VARIANCE_THRESHOLD:
            self._shaking = True
            self._last_shake_time = now
        else:
            self._shaking = False

    def _update_twist(self, gz: float) -> None:
        now = self._clock()
        if now - self._last_twist_time < TWIST_COOLDOWN_MS:
            return
        if gz > TWIST_THRESHOLD_DPS:
            self._pending_twist = TwistDirection.CLOCKWISE
            self._last_twist_time = now
        elif gz < -TWIST_THRESHOLD_DPS:
            self._pending_twist = TwistDirection.COUNTER_CLOCKWISE
            self._last_twist_time = now