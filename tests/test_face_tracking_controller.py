import pytest

from pocketpet.face_detector import FaceResult
from pocketpet.face_tracking_controller import FaceTrackingController


def face(x, y):
    return FaceResult(detected=True, center_x=x, center_y=y, width=40, height=40, confidence=0.8)


def test_initial_status():
    ctl = FaceTrackingController(0.5, 0.1, 10.0)
    assert ctl.status_text() == "Face tracking idle"
    assert ctl.has_face() is False


def test_no_face_returns_none():
    ctl = FaceTrackingController(0.5, 0.1, 10.0)
    assert ctl.update(FaceResult(), 320, 240) is None
    assert ctl.status_text() == "No face detected"
    assert ctl.is_centered() is False


def test_bad_frame_size_returns_none():
    ctl = FaceTrackingController(0.5, 0.1, 10.0)
    assert ctl.update(face(10, 10), 0, 240) is None


def test_centered_face_gives_no_motion():
    ctl = FaceTrackingController(0.5, 0.1, 10.0)
    assert ctl.update(face(160, 120), 320, 240) == (0.0, 0.0)
    assert ctl.is_centered() is True
    assert ctl.status_text() == "Face centered"


def test_edge_face_moves_by_gain():
    ctl = FaceTrackingController(0.5, 0.1, 10.0)
    pan, tilt = ctl.update(face(320, 120), 320, 240)
    assert pan == pytest.approx(10.0)
    assert tilt == 0.0
    assert ctl.status_text() == "Centering face"


def test_filter_moves_toward_new_position():
    ctl = FaceTrackingController(0.5, 0.1, 10.0)
    first, _ = ctl.update(face(320, 120), 320, 240)
    second, _ = ctl.update(face(0, 120), 320, 240)
    assert -first < second < first


def test_reset_restores_idle():
    ctl = FaceTrackingController(0.5, 0.1, 10.0)
    ctl.update(face(320, 240), 320, 240)
    ctl.reset()
    assert ctl.has_face() is False
    assert ctl.status_text() == "Face tracking idle"