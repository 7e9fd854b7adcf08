import pytest

from pocketpet.imu_orientation import Orientation
from pocketpet.pomodoro import (
    PRESETS,
    PomodoroState,
    PomodoroTimer,
    PomoHitZone,
)


class FakeClock:
    def __init__(self, now=1000):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer(clock):
    t = PomodoroTimer(clock=clock, ring_ms=5000, width=320, height=240, base_rotation=1)
    t.show()
    return t


def test_initial_state(timer):
    assert timer.state == PomodoroState.IDLE
    assert timer.active_preset == 0
    assert timer.remaining_ms() == PRESETS[0].duration_ms
    assert timer.status_text() == "READY"


def test_preset_labels_from_source():
    assert [p.label for p in PRESETS] == ["Focus 25m", "Short 5m", "Long 15m", "Deep 50m"]
    assert PomodoroTimer.short_label(3) == "50m"
    assert PomodoroTimer.short_label(9) == "--"


def test_running_counts_down(timer, clock):
    timer.toggle_pause()
    assert timer.state == PomodoroState.RUNNING
    assert timer.status_text() == "FOCUSING"
    clock.now += 3000
    timer.update()
    assert timer.remaining_ms() == PRESETS[0].duration_ms - 3000


def test_pause_stops_elapsed(timer, clock):
    timer.toggle_pause()
    clock.now += 1000
    timer.update()
    timer.toggle_pause()
    assert timer.status_text() == "PAUSED"
    before = timer.remaining_ms()
    clock.now += 10000
    timer.update()
    assert timer.remaining_ms() == before
    timer.toggle_pause()
    clock.now += 500
    timer.update()
    assert timer.remaining_ms() == before - 500


def test_completion_rings_and_notifies_once(timer, clock):
    calls = []
    timer.set_complete_callback(calls.append)
    timer.toggle_pause()
    clock.now += PRESETS[0].duration_ms + 10
    timer.update()
    assert timer.state == PomodoroState.RINGING
    assert timer.status_text() == "DONE"
    assert timer.remaining_ms() == 0
    assert timer.progress == 1.0
    clock.now += 100
    timer.update()
    assert calls == [0]


def test_ringing_resets_after_ring_time(timer, clock):
    timer.toggle_pause()
    clock.now += PRESETS[0].duration_ms
    timer.update()
    assert timer.state == PomodoroState.RINGING
    clock.now += 5001
    timer.update()
    assert timer.state == PomodoroState.IDLE
    assert timer.remaining_ms() == PRESETS[0].duration_ms


def test_toggle_while_ringing_resets(timer, clock):
    timer.toggle_pause()
    clock.now += PRESETS[0].duration_ms
    timer.update()
    timer.toggle_pause()
    assert timer.state == PomodoroState.IDLE


def test_select_preset_locked_while_running(timer):
    timer.select_preset(2)
    assert timer.active_preset == 2
    timer.toggle_pause()
    timer.select_preset(1)
    assert timer.active_preset == 2
    timer.reset()
    timer.select_preset(1)
    assert timer.active_preset == 1


def test_select_preset_out_of_range_ignored(timer):
    timer.select_preset(7)
    timer.select_preset(-1)
    assert timer.active_preset == 0


def test_orientation_picks_preset_and_rotation(timer):
    timer.set_orientation(Orientation.RIGHT)
    assert timer.active_preset == 1
    assert timer.rotation == timer.rotation_for_orientation(Orientation.RIGHT)
    assert timer.orientation_label == "Right"
    assert (timer.width, timer.height) == (240, 320)
    timer.set_orientation(Orientation.BOTTOM)
    assert timer.active_preset == 2
    assert (timer.width, timer.height) == (320, 240)


def test_rotation_for_orientation_wraps(timer):
    rotations = {timer.rotation_for_orientation(o) for o in
                 (Orientation.TOP, Orientation.RIGHT, Orientation.BOTTOM, Orientation.LEFT)}
    assert rotations == {0, 1, 2, 3}
    assert timer.rotation_for_orientation(Orientation.TOP) == 1


def test_flat_and_unknown_orientation_ignored(timer):
    timer.set_orientation(Orientation.LEFT)
    timer.set_orientation(Orientation.FLAT)
    timer.set_orientation(Orientation.UNKNOWN)
    assert timer.orientation == Orientation.LEFT
    assert timer.active_preset == 3


def test_hide_restores_rotation(timer):
    timer.set_orientation(Orientation.LEFT)
    timer.hide()
    assert timer.rotation == timer.rotation_for_orientation(Orientation.TOP)
    assert timer.visible is False


def test_update_redraw_throttle(timer, clock):
    assert timer.update() is True
    clock.now += 100
    assert timer.update() is False
    clock.now += 200
    assert timer.update() is True
    timer.mark_dirty()
    assert timer.update() is True


def test_hidden_timer_does_not_update(clock):
    timer = PomodoroTimer(clock=clock)
    assert timer.update() is False


def test_hit_test(timer):
    assert timer.hit_test(10, 10) == PomoHitZone.BACK
    assert timer.hit_test(50, 200) == PomoHitZone.START
    assert timer.hit_test(210, 200) == PomoHitZone.RESET
    assert timer.hit_test(160, 120) == PomoHitZone.NONE


def test_time_text_format(timer):
    assert timer.time_text == "25:00"