import pytest

from pocketpet.storage import StorageManager


@pytest.fixture
def storage(tmp_path):
    manager = StorageManager(tmp_path)
    assert manager.begin()
    return manager


def test_initial_status(tmp_path):
    manager = StorageManager(tmp_path)
    assert manager.status_text == "Not initialized"
    assert not manager.is_ready


def test_begin_creates_photo_dir(storage):
    assert storage.is_ready
    assert storage.photo_dir.is_dir()


def test_missing_root(tmp_path):
    manager = StorageManager(tmp_path / "absent")
    assert not manager.begin()
    assert manager.status_text == "SD not found"
    assert manager.next_photo_path() is None


def test_refresh_after_root_appears(tmp_path):
    root = tmp_path / "card"
    manager = StorageManager(root)
    assert not manager.begin()
    root.mkdir()
    assert manager.ensure_ready()
    assert manager.is_ready


def test_force_reprobe_detects_removal(tmp_path):
    root = tmp_path / "card"
    root.mkdir()
    manager = StorageManager(root)
    assert manager.begin()
    (root / "photos").rmdir()
    root.rmdir()
    assert manager.refresh()
    assert not manager.force_reprobe()
    assert not manager.is_ready


def test_next_photo_path_sequence(storage):
    first = storage.next_photo_path()
    assert first == storage.photo_dir / "IMG_0001.jpg"
    assert storage.write_file(first, b"jpegdata")
    second = storage.next_photo_path()
    assert second == storage.photo_dir / "IMG_0002.jpg"


def test_write_round_trip(storage):
    path = storage.next_photo_path()
    assert storage.write_file(path, b"\xff\xd8abc")
    assert path.read_bytes() == b"\xff\xd8abc"


def test_write_relative_path(storage):
    assert storage.write_file("photos/a.jpg", b"1")
    assert (storage.photo_dir / "a.jpg").read_bytes() == b"1"


def test_write_rejects_empty(storage):
    assert not storage.write_file(storage.next_photo_path(), b"")
    assert not storage.write_file(None, b"x")


def test_delete(storage):
    path = storage.next_photo_path()
    storage.write_file(path, b"x")
    assert storage.delete_file(path)
    assert not path.exists()
    assert not storage.delete_file(path)


def test_not_ready_refuses_io(tmp_path):
    manager = StorageManager(tmp_path)
    assert not manager.write_file(tmp_path / "f.jpg", b"x")
    assert not (tmp_path / "f.jpg").exists()
    (tmp_path / "g.jpg").write_bytes(b"x")
    assert not manager.delete_file(tmp_path / "g.jpg")
    assert (tmp_path / "g.jpg").exists()