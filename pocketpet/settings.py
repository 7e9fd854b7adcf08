"""Settings screen: brightness and volume levels with touch hit testing."""

from __future__ import annotations

from enum import Enum

BACK_X = 5
BACK_Y = 5
BACK_W = 74
BACK_H = 26

ROW_X = 20
BTN_W = 80
BTN_H = 36
BTN_GAP = 10

BRIGHT_ROW_Y = 60
VOLUME_ROW_Y = 145

LEVEL_LABELS = ("Low", "Mid", "High")


class SettingsHitZone(Enum):
    NONE = "none"
    BACK = "back"
    BRIGHTNESS_DIM = "brightness_dim"
    BRIGHTNESS_NORMAL = "brightness_normal"
    BRIGHTNESS_BRIGHT = "brightness_bright"
    VOLUME_QUIET = "volume_quiet"
    VOLUME_NORMAL = "volume_normal"
    VOLUME_LOUD = "volume_loud"


_BRIGHTNESS_ZONES = (SettingsHitZone.BRIGHTNESS_DIM, SettingsHitZone.BRIGHTNESS_NORMAL,
                     SettingsHitZone.BRIGHTNESS_BRIGHT)
_VOLUME_ZONES = (SettingsHitZone.VOLUME_QUIET, SettingsHitZone.VOLUME_NORMAL,
                 SettingsHitZone.VOLUME_LOUD)


def _clamp_level(level: int) -> int:
    return min(max(level, 0), len(LEVEL_LABELS) - 1)


class SettingsScreen:
    """Holds the selected brightness and volume levels (0-2)."""

    def __init__(self) -> None:
        self._visible = False
        self._dirty = True
        self._brightness = 2
        self._volume = 1

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def brightness(self) -> int:
        return self._brightness

    @property
    def volume(self) -> int:
        return self._volume

    def show(self) -> None:
        self._visible = True
        self._dirty = True

    def hide(self) -> None:
        self._visible = False

    def mark_dirty(self) -> None:
        self._dirty = True

    def update(self) -> bool:
        """Return True when a redraw is due, and consume the pending change."""
        if not self._visible or not self._dirty:
            return False
        self._dirty = False
        return True

    def set_brightness(self, level: int) -> None:
        level = _clamp_level(level)
        if level != self._brightness:
            self._brightness = level
            self._dirty = True

    def set_volume(self, level: int) -> None:
        level = _clamp_level(level)
        if level != self._volume:
            self._volume = level
            self._dirty = True

    def hit_test(self, x: int, y: int) -> SettingsHitZone:
        if BACK_X <= x <= BACK_X + BACK_W and BACK_Y <= y <= BACK_Y + BACK_H:
            return SettingsHitZone.BACK
        for row_y, zones in ((BRIGHT_ROW_Y, _BRIGHTNESS_ZONES), (VOLUME_ROW_Y, _VOLUME_ZONES)):
            if row_y <= y <= row_y + BTN_H:
                for i, zone in enumerate(zones):
                    bx = ROW_X + i * (BTN_W + BTN_GAP)
                    if bx <= x <= bx + BTN_W:
                        return zone
        return SettingsHitZone.NONE