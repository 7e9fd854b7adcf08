"""Pan/tilt servo control through a PCA9685 PWM driver."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Protocol

REG_MODE1 = 0x00
REG_MODE2 = 0x01
REG_LED0_ON_L = 0x06
REG_PRESCALE = 0xFE

MODE1_RESTART = 0x80
MODE1_AUTO_INCREMENT = 0x20
MODE1_SLEEP = 0x10
MODE2_OUTDRV = 0x04
FULL_OFF_BIT = 0x10

OSCILLATOR_HZ = 25_000_000.0
PWM_STEPS = 4096.0
CHANNEL_COUNT = 16
MAX_SCAN_FAILURES = 3


class I2CBus(Protocol):
    """Register-level I2C access; methods raise OSError on failure."""

    def begin(self) -> None: ...

    def probe(self, address: int) -> bool: ...

    def write(self, address: int, register: int, data: bytes) -> None: ...


@dataclass(frozen=True)
class ServoConfig:
    address: int = 0x40
    pan_channel: int = 0
    tilt_channel: int = 1
    pan_center_deg: float = 90.0
    tilt_center_deg: float = 90.0
    safe_min_deg: float = 20.0
    safe_max_deg: float = 160.0
    min_pulse_us: float = 500.0
    max_pulse_us: float = 2500.0
    pwm_freq_hz: float = 50.0


class ServoController:
    """Drives two servo channels and tracks their last commanded angles."""

    def __init__(self, bus: I2CBus, config: ServoConfig | None = None,
                 sleep: Callable[[float], None] = time.sleep) -> None:
        self._bus = bus
        self._config = config or ServoConfig()
        self._sleep = sleep
        self._ready = False
        self._released = True
        self._permanently_disabled = False
        self._scan_fail_count = 0
        self._pan_angle = float(self._config.pan_center_deg)
        self._tilt_angle = float(self._config.tilt_center_deg)
        self._status = "Servo not initialized"

    @property
    def config(self) -> ServoConfig:
        return self._config

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def is_released(self) -> bool:
        return self._released

    @property
    def status_text(self) -> str:
        return self._status

    @property
    def pan_angle(self) -> float:
        return self._pan_angle

    @property
    def tilt_angle(self) -> float:
        return self._tilt_angle

    def begin(self) -> bool:
        if self._permanently_disabled:
            return False

        try:
            self._bus.begin()
        except OSError:
            self._fail("PortA I2C init failed")
            return False

        address = self._config.address
        if not self._bus.probe(address):
            self._ready = False
            self._released = True
            self._scan_fail_count += 1
            if self._scan_fail_count >= MAX_SCAN_FAILURES:
                self._permanently_disabled = True
                self._status = "PCA9685 not found, disabled"
            else:
                self._status = f"PCA9685 not found @0x{address:x}"
            return False

        self._ready = True
        if not (self._write8(REG_MODE1, MODE1_SLEEP)
                and self._write8(REG_MODE2, MODE2_OUTDRV)
                and self._set_pwm_frequency(self._config.pwm_freq_hz)):
            self._fail("PCA9685 init failed")
            return False

        self._status = f"PCA9685 ready @0x{address:x}"
        return True

    def center(self) -> bool:
        ok = self.set_pan_tilt(self._config.pan_center_deg, self._config.tilt_center_deg)
        if ok:
            self._status = "Centered"
        return ok

    def release(self) -> bool:
        if not self._ready:
            self._status = "Servo unavailable"
            return False
        ok = (self._set_channel_off(self._config.pan_channel)
              and self._set_channel_off(self._config.tilt_channel))
        if ok:
            self._released = True
            self._status = "PWM released"
        else:
            self._status = "PWM release failed"
        return ok

    def set_pan_tilt(self, pan_deg: float, tilt_deg: float) -> bool:
        if not self._ready:
            self._status = "Servo unavailable"
            return False

        safe_pan = self.clamp_angle(pan_deg)
        safe_tilt = self.clamp_angle(tilt_deg)
        ok = (self._set_pwm(self._config.pan_channel, 0, self.angle_to_ticks(safe_pan))
              and self._set_pwm(self._config.tilt_channel, 0, self.angle_to_ticks(safe_tilt)))
        if ok:
            self._pan_angle = safe_pan
            self._tilt_angle = safe_tilt
            self._released = False
            self._status = "Tracking tilt"
        else:
            self._status = "Servo write failed"
        return ok

    def clamp_angle(self, angle_deg: float) -> float:
        """Limit an angle to the configured safe range."""
        return float(min(max(angle_deg, self._config.safe_min_deg), self._config.safe_max_deg))

    def angle_to_ticks(self, angle_deg: float) -> int:
        """Convert 0..180 degrees into PCA9685 off-tick counts."""
        cfg = self._config
        clamped = min(max(angle_deg, 0.0), 180.0)
        pulse_us = cfg.min_pulse_us + (cfg.max_pulse_us - cfg.min_pulse_us) * (clamped / 180.0)
        ticks = pulse_us * cfg.pwm_freq_hz * PWM_STEPS / 1_000_000.0
        ticks = min(max(ticks, 0.0), PWM_STEPS - 1.0)
        return int(ticks + 0.5)

    def _fail(self, status: str) -> None:
        self._ready = False
        self._released = True
        self._status = status

    def _write(self, register: int, data: bytes) -> bool:
        try:
            self._bus.write(self._config.address, register, data)
        except OSError:
            return False
        return True

    def _write8(self, register: int, value: int) -> bool:
        return self._write(register, bytes([value & 0xFF]))

    def _set_pwm_frequency(self, frequency_hz: float) -> bool:
        prescale = int(OSCILLATOR_HZ / (PWM_STEPS * frequency_hz) - 1.0 + 0.5) & 0xFF
        if not self._write8(REG_MODE1, MODE1_SLEEP):
            return False
        if not self._write8(REG_PRESCALE, prescale):
            return False
        if not self._write8(REG_MODE1, MODE1_AUTO_INCREMENT):
            return False
        self._sleep(0.005)
        return self._write8(REG_MODE1, MODE1_RESTART | MODE1_AUTO_INCREMENT)

    def _set_pwm(self, channel: int, on_tick: int, off_tick: int) -> bool:
        if not 0 <= channel < CHANNEL_COUNT:
            return False
        data = bytes([
            on_tick & 0xFF,
            (on_tick >> 8) & 0x0F,
            off_tick & 0xFF,
            (off_tick >> 8) & 0x0F,
        ])
        return self._write(REG_LED0_ON_L + 4 * channel, data)

    def _set_channel_off(self, channel: int) -> bool:
        if not 0 <= channel < CHANNEL_COUNT:
            return False
        return self._write(REG_LED0_ON_L + 4 * channel, bytes([0, 0, 0, FULL_OFF_BIT]))