"""Battery monitoring with low and critical level notifications."""

from __future__ import annotations

import time
from typing import Callable

VoltageCallback = Callable[[float], None]

_MIN_VALID_MV = 100
_PRESENT_VOLTAGE = 0.1


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class PowerManager:
    """Tracks battery voltage, charge fraction and low/critical states."""

    def __init__(self, read_millivolts: Callable[[], int],
                 clock: Callable[[], int] = _monotonic_ms,
                 full_voltage: float = 4.15,
                 empty_voltage: float = 3.3,
                 low_threshold: float = 3.45,
                 critical_voltage: float = 3.35,
                 critical_duration_ms: int = 30_000) -> None:
        self._read_millivolts = read_millivolts
        self._clock = clock
        self._full_voltage = full_voltage
        self._empty_voltage = empty_voltage
        self._low_threshold = low_threshold
        self._critical_voltage = critical_voltage
        self._critical_duration_ms = critical_duration_ms

        self._voltage = 0.0
        self._percentage = 0.0
        self._low_battery = False
        self._critical_battery = False
        self._critical_start_ms = 0
        self._low_callback: VoltageCallback | None = None
        self._critical_callback: VoltageCallback | None = None
        self._sleeping = False

    @property
    def voltage(self) -> float:
        return self._voltage

    @property
    def percentage(self) -> float:
        """Charge fraction between 0.0 and 1.0."""
        return self._percentage

    @property
    def is_low_battery(self) -> bool:
        return self._low_battery

    @property
    def is_critical_battery(self) -> bool:
        return self._critical_battery

    @property
    def is_sleeping(self) -> bool:
        return self._sleeping

    def begin(self) -> bool:
        self._voltage = self._read_voltage()
        self.update()
        return True

    def update(self) -> None:
        """Take a new reading; meant to be called about once a second."""
        voltage = self._voltage = self._read_voltage()

        if voltage >= self._full_voltage:
            self._percentage = 1.0
        elif voltage <= self._empty_voltage:
            self._percentage = 0.0
        else:
            self._percentage = ((voltage - self._empty_voltage)
                                / (self._full_voltage - self._empty_voltage))

        was_low = self._low_battery
        self._low_battery = _PRESENT_VOLTAGE < voltage < self._low_threshold
        if self._low_battery and not was_low and self._low_callback:
            self._low_callback(voltage)

        if _PRESENT_VOLTAGE < voltage < self._critical_voltage:
            now = self._clock()
            if not self._critical_battery:
                self._critical_battery = True
                self._critical_start_ms = now
            elif now - self._critical_start_ms >= self._critical_duration_ms:
                if self._critical_callback:
                    self._critical_callback(voltage)
        else:
            self._critical_battery = False
            self._critical_start_ms = 0

    def set_low_battery_callback(self, callback: VoltageCallback | None) -> None:
        self._low_callback = callback

    def set_critical_battery_callback(self, callback: VoltageCallback | None) -> None:
        self._critical_callback = callback

    def enter_sleep(self) -> None:
        self._sleeping = True

    def exit_sleep(self) -> None:
        self._sleeping = False

    def _read_voltage(self) -> float:
        millivolts = self._read_millivolts()
        if millivolts < _MIN_VALID_MV:
            return 0.0
        return millivolts / 1000.0