"""Companion bond ("affinity") screen state."""

from __future__ import annotations

from enum import Enum

BACK_X = 8
BACK_W = 76
BACK_H = 24
METER_WIDTH = 220
MAX_ROW_VALUE = 20


class AffinityHitZone(Enum):
    NONE = "none"
    BACK = "back"


def _map_range(value: int, in_min: int, in_max: int, out_min: int, out_max: int) -> int:
    span = in_max - in_min
    if span == 0:
        return out_min
    numerator = (value - in_min) * (out_max - out_min)
    quotient = abs(numerator) // abs(span)
    if (numerator < 0) != (span < 0):
        quotient = -quotient
    return quotient + out_min


def _truncate(text: str) -> str:
    return text[:17] + "..." if len(text) > MAX_ROW_VALUE else text


class AffinityScreen:
    """Holds the bond value and labels, and tracks when a redraw is due."""

    def __init__(self, display_height: int = 240, min_value: int = 0,
                 max_value: int = 100, default_value: int = 50) -> None:
        self._back_y = display_height - 32
        self._min_value = min_value
        self._max_value = max_value
        self._visible = False
        self._dirty = True
        self._value = default_value
        self._level = "Familiar"
        self._mood = "Warm"
        self._recent = "Ready"

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def value(self) -> int:
        return self._value

    @property
    def level(self) -> str:
        return self._level

    @property
    def mood(self) -> str:
        return self._mood

    @property
    def recent(self) -> str:
        return self._recent

    @property
    def rows(self) -> list[tuple[str, str]]:
        """Labelled rows as shown, long values shortened."""
        return [("Lv", _truncate(self._level)), ("Mood", _truncate(self._mood)),
                ("Recent", _truncate(self._recent))]

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

    def set_state(self, value: int, level: str | None, mood: str | None,
                  recent: str | None) -> None:
        new_level = level or ""
        new_mood = mood or ""
        new_recent = recent or ""
        if (value, new_level, new_mood, new_recent) != (
                self._value, self._level, self._mood, self._recent):
            self._value = value
            self._level = new_level
            self._mood = new_mood
            self._recent = new_recent
            self._dirty = True

    def meter_fill(self, width: int = METER_WIDTH) -> int:
        """Filled width in pixels of a meter of the given outer width."""
        inner = width - 8
        fill = _map_range(self._value, self._min_value, self._max_value, 0, inner)
        return min(max(fill, 0), inner)

    def hit_test(self, x: int, y: int) -> AffinityHitZone:
        if BACK_X <= x < BACK_X + BACK_W and self._back_y <= y < self._back_y + BACK_H:
            return AffinityHitZone.BACK
        return AffinityHitZone.NONE