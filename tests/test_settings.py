import pytest

from pocketpet.settings import (
    BACK_H,
    BACK_W,
    BACK_X,
    BACK_Y,
    BRIGHT_ROW_Y,
    BTN_GAP,
    BTN_H,
    BTN_W,
    ROW_X,
    VOLUME_ROW_Y,
    SettingsHitZone,
    SettingsScreen,
)


def test_defaults():
    screen = SettingsScreen()
    assert screen.brightness == 2
    assert screen.volume == 1


@pytest.mark.parametrize("given,expected", [(-3, 0), (0, 0), (1, 1), (2, 2), (9, 2)])
def test_brightness_clamped(given, expected):
    screen = SettingsScreen()
    screen.set_brightness(given)
    assert screen.brightness == expected


@pytest.mark.parametrize("given,expected", [(-1, 0), (2, 2), (5, 2)])
def test_volume_clamped(given, expected):
    screen = SettingsScreen()
    screen.set_volume(given)
    assert screen.volume == expected


def test_dirty_only_on_change():
    screen = SettingsScreen()
    screen.show()
    assert screen.update() is True
    assert screen.update() is False
    screen.set_brightness(2)
    assert screen.update() is False
    screen.set_brightness(0)
    assert screen.update() is True
    screen.set_volume(1)
    assert screen.update() is False


def test_hidden_never_redraws():
    screen = SettingsScreen()
    screen.mark_dirty()
    assert screen.update() is False
    screen.show()
    screen.hide()
    assert screen.update() is False


def test_back_edges_inclusive():
    screen = SettingsScreen()
    assert screen.hit_test(BACK_X, BACK_Y) == SettingsHitZone.BACK
    assert screen.hit_test(BACK_X + BACK_W, BACK_Y + BACK_H) == SettingsHitZone.BACK


@pytest.mark.parametrize("index,zone", [
    (0, SettingsHitZone.BRIGHTNESS_DIM),
    (1, SettingsHitZone.BRIGHTNESS_NORMAL),
    (2, SettingsHitZone.BRIGHTNESS_BRIGHT),
])
def test_brightness_buttons(index, zone):
    screen = SettingsScreen()
    bx = ROW_X + index * (BTN_W + BTN_GAP)
    assert screen.hit_test(bx, BRIGHT_ROW_Y) == zone
    assert screen.hit_test(bx + BTN_W, BRIGHT_ROW_Y + BTN_H) == zone


@pytest.mark.parametrize("index,zone", [
    (0, SettingsHitZone.VOLUME_QUIET),
    (1, SettingsHitZone.VOLUME_NORMAL),
    (2, SettingsHitZone.VOLUME_LOUD),
])
def test_volume_buttons(index, zone):
    screen = SettingsScreen()
    bx = ROW_X + index * (BTN_W + BTN_GAP)
    assert screen.hit_test(bx + BTN_W // 2, VOLUME_ROW_Y + BTN_H // 2) == zone


def test_gaps_and_empty_space_miss():
    screen = SettingsScreen()
    gap_x = ROW_X + BTN_W + BTN_GAP // 2
    assert screen.hit_test(gap_x, BRIGHT_ROW_Y + 5) == SettingsHitZone.NONE
    assert screen.hit_test(ROW_X + 5, BRIGHT_ROW_Y + BTN_H + 1) == SettingsHitZone.NONE
    assert screen.hit_test(ROW_X + 5, VOLUME_ROW_Y - 1) == SettingsHitZone.NONE