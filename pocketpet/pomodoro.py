"""Pomodoro timer screen: presets chosen by device orientation, countdown and ringing."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from pocketpet.imu_orientation import Orientation, orientation_name

BACK_X = 5
BACK_Y = 5
BACK_W = 80
BACK_H = 28

BTN_W = 80
BTN_H = 28

REDRAW_INTERVAL_MS = 250
DEFAULT_RING_MS = 5000

_SHORT_LABELS = ("25m", "5m", "15m", "50m")


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class PomodoroState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    RINGING = "ringing"


class PomoHitZone(Enum):
    NONE = "none"
    BACK = "back"
    START = "start"
    RESET = "reset"


@dataclass(frozen=True)
class PomoPreset:
    label: str
    duration_ms: int
    orientation: Orientation


PRESETS: tuple[PomoPreset, ...] = (
    PomoPreset("Focus 25m", 25 * 60 * 1000, Orientation.TOP),
    PomoPreset("Short 5m", 5 * 60 * 1000, Orientation.RIGHT),
    PomoPreset("Long 15m", 15 * 60 * 1000, Orientation.BOTTOM),
    PomoPreset("Deep 50m", 50 * 60 * 1000, Orientation.LEFT),
)

_ROTATION_OFFSETS = {
    Orientation.TOP: 0,
    Orientation.RIGHT: 1,
    Orientation.BOTTOM: 2,
    Orientation.LEFT: 3,
}


class PomodoroTimer:
    """Countdown state of the pomodoro screen and the display rotation it wants."""

    def __init__(self, clock: Callable[[], int] = _monotonic_ms,
                 ring_ms: int = DEFAULT_RING_MS, width: int = 320, height: int = 240,
                 base_rotation: int = 1) -> None:
        self._clock = clock
        self._ring_ms = ring_ms
        self._base_width = width
        self._base_height = height
        self._base_rotation = base_rotation & 3
        self._applied_rotation = self._base_rotation

        self._visible = False
        self._state = PomodoroState.IDLE
        self._active_preset = 0
        self._elapsed = 0
        self._last_tick = 0
        self._ring_start = 0
        self._paused = False
        self._dirty = True
        self._selection_locked = False
        self._completion_notified = False
        self._last_draw_time = 0
        self._current_orientation = Orientation.FLAT
        self._complete_callback: Callable[[int], None] | None = None

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def state(self) -> PomodoroState:
        return self._state

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def active_preset(self) -> int:
        return self._active_preset

    @property
    def preset(self) -> PomoPreset:
        return PRESETS[self._active_preset]

    @property
    def orientation(self) -> Orientation:
        return self._current_orientation

    @property
    def orientation_label(self) -> str:
        return orientation_name(self._current_orientation)

    @property
    def rotation(self) -> int:
        """Display rotation currently applied (0-3)."""
        return self._applied_rotation

    @property
    def width(self) -> int:
        """Display width at the applied rotation."""
        if (self._applied_rotation - self._base_rotation) % 2:
            return self._base_height
        return self._base_width

    @property
    def height(self) -> int:
        """Display height at the applied rotation."""
        if (self._applied_rotation - self._base_rotation) % 2:
            return self._base_width
        return self._base_height

    @property
    def progress(self) -> float:
        duration = self.preset.duration_ms
        if duration <= 0:
            return 0.0
        return min(self._elapsed / duration, 1.0)

    @property
    def time_text(self) -> str:
        remaining = self.remaining_ms()
        minutes = (remaining // 60000) % 60
        seconds = (remaining // 1000) % 60
        return f"{minutes:02d}:{seconds:02d}"

    @staticmethod
    def short_label(index: int) -> str:
        return _SHORT_LABELS[index] if 0 <= index < len(_SHORT_LABELS) else "--"

    def show(self) -> None:
        self._visible = True
        self._applied_rotation = self._base_rotation
        self._current_orientation = Orientation.UNKNOWN
        self.reset()
        self._dirty = True

    def hide(self) -> None:
        self._visible = False
        self._applied_rotation = self._base_rotation

    def mark_dirty(self) -> None:
        self._dirty = True

    def update(self) -> bool:
        """Advance the countdown; return True when a redraw is due."""
        if not self._visible:
            return False
        now = self._clock()

        if not self._paused and self._state == PomodoroState.RUNNING:
            self._elapsed += now - self._last_tick
            self._last_tick = now
            duration = self.preset.duration_ms
            if self._elapsed >= duration:
                self._state = PomodoroState.RINGING
                self._ring_start = now
                self._elapsed = duration
                if not self._completion_notified:
                    self._completion_notified = True
                    if self._complete_callback is not None:
                        self._complete_callback(self._active_preset)
                self._dirty = True

        if self._state == PomodoroState.RINGING and now - self._ring_start > self._ring_ms:
            self.reset()

        if not self._dirty and now - self._last_draw_time < REDRAW_INTERVAL_MS:
            return False
        self._last_draw_time = now
        self._dirty = False
        return True

    def select_preset(self, index: int) -> None:
        if self._selection_locked:
            return
        if 0 <= index < len(PRESETS) and index != self._active_preset:
            self._active_preset = index
            self._dirty = True

    def set_orientation(self, orientation: Orientation) -> None:
        if orientation in (Orientation.UNKNOWN, Orientation.FLAT):
            return
        if orientation == self._current_orientation:
            return
        self._current_orientation = orientation
        self._applied_rotation = self.rotation_for_orientation(orientation)
        self._dirty = True
        if not self._selection_locked:
            self._sync_preset_to_orientation()

    def toggle_pause(self) -> None:
        if self._state == PomodoroState.IDLE:
            self._state = PomodoroState.RUNNING
            self._elapsed = 0
            self._last_tick = self._clock()
            self._paused = False
            self._selection_locked = True
            self._completion_notified = False
        elif self._state == PomodoroState.RINGING:
            self.reset()
        else:
            self._paused = not self._paused
            if not self._paused:
                self._last_tick = self._clock()
        self._dirty = True

    def reset(self) -> None:
        self._state = PomodoroState.IDLE
        self._elapsed = 0
        self._paused = False
        self._selection_locked = False
        self._completion_notified = False
        self._sync_preset_to_orientation()
        self._dirty = True

    def set_complete_callback(self, callback: Callable[[int], None] | None) -> None:
        self._complete_callback = callback

    def rotation_for_orientation(self, orientation: Orientation) -> int:
        return (self._base_rotation + _ROTATION_OFFSETS.get(orientation, 0)) & 3

    def remaining_ms(self) -> int:
        duration = self.preset.duration_ms
        return 0 if self._elapsed >= duration else duration - self._elapsed

    def status_text(self) -> str:
        if self._state == PomodoroState.RUNNING:
            return "PAUSED" if self._paused else "FOCUSING"
        if self._state == PomodoroState.RINGING:
            return "DONE"
        return "READY"

    def hit_test(self, x: int, y: int) -> PomoHitZone:
        w, h = self.width, self.height
        btn_y = h - 42
        start_x = max(w // 4 - BTN_W // 2, 8)
        reset_x = (w * 3) // 4 - BTN_W // 2
        if reset_x + BTN_W > w - 8:
            reset_x = w - BTN_W - 8

        if BACK_X <= x < BACK_X + BACK_W and BACK_Y <= y < BACK_Y + BACK_H:
            return PomoHitZone.BACK
        if btn_y <= y < btn_y + BTN_H:
            if start_x <= x < start_x + BTN_W:
                return PomoHitZone.START
            if reset_x <= x < reset_x + BTN_W:
                return PomoHitZone.RESET
        return PomoHitZone.NONE

    def _sync_preset_to_orientation(self) -> None:
        for index, preset in enumerate(PRESETS):
            if preset.orientation == self._current_orientation:
                self.select_preset(index)
                return