import pytest

from pocketpet.album import AlbumBrowser, AlbumHitZone, AlbumViewMode
from pocketpet.storage import StorageManager


def _make(tmp_path, count):
    storage = StorageManager(tmp_path)
    assert storage.begin()
    for number in range(1, count + 1):
        (storage.photo_dir / f"IMG_{number:04d}.jpg").write_bytes(b"x")
    browser = AlbumBrowser(storage)
    browser.scan_photos()
    return storage, browser


def test_scan_sorted_newest_first(tmp_path):
    storage, browser = _make(tmp_path, 3)
    (storage.photo_dir / "notes.txt").write_bytes(b"n")
    browser.scan_photos()
    assert browser.photo_count == 3
    assert [p.name for p in browser.files] == ["IMG_0003.jpg", "IMG_0002.jpg", "IMG_0001.jpg"]


def test_scan_accepts_upper_case_suffix(tmp_path):
    storage, browser = _make(tmp_path, 0)
    (storage.photo_dir / "SHOT.JPG").write_bytes(b"x")
    (storage.photo_dir / "other.Jpg").write_bytes(b"x")
    browser.scan_photos()
    assert [p.name for p in browser.files] == ["SHOT.JPG"]


def test_scan_missing_directory(tmp_path):
    storage = StorageManager(tmp_path / "none")
    browser = AlbumBrowser(storage)
    browser.scan_photos()
    assert browser.photo_count == 0


def test_show_resets_to_grid(tmp_path):
    _, browser = _make(tmp_path, 3)
    browser.show_photo(2)
    browser.show()
    assert browser.visible
    assert browser.view_mode == AlbumViewMode.GRID
    assert browser.grid_offset == 0


def test_paging(tmp_path):
    _, browser = _make(tmp_path, 13)
    browser.scroll_up()
    assert browser.grid_offset == 0
    browser.scroll_down()
    assert browser.grid_offset == 12
    browser.scroll_down()
    assert browser.grid_offset == 12
    browser.scroll_up()
    assert browser.grid_offset == 0


def test_thumbnail_lookup(tmp_path):
    _, browser = _make(tmp_path, 13)
    assert browser.thumbnail_index_at(10, 45) == 0
    assert browser.thumbnail_index_at(90, 45) == 1
    assert browser.thumbnail_index_at(10, 10) == -1
    browser.scroll_down()
    assert browser.thumbnail_index_at(10, 45) == 12
    assert browser.thumbnail_index_at(90, 45) == -1


def test_hit_zones(tmp_path):
    _, browser = _make(tmp_path, 2)
    assert browser.hit_test(10, 10) == AlbumHitZone.BACK
    assert browser.hit_test(10, 45) == AlbumHitZone.THUMBNAIL
    assert browser.hit_test(260, 220) == AlbumHitZone.NONE
    browser.show_photo(0)
    assert browser.hit_test(260, 220) == AlbumHitZone.DELETE
    assert browser.hit_test(10, 45) == AlbumHitZone.NONE


def test_empty_album_has_no_thumbnails(tmp_path):
    _, browser = _make(tmp_path, 0)
    assert browser.thumbnail_index_at(10, 45) == -1
    assert browser.hit_test(10, 45) == AlbumHitZone.NONE


def test_navigation_bounds(tmp_path):
    _, browser = _make(tmp_path, 3)
    browser.show_photo(5)
    assert browser.view_mode == AlbumViewMode.GRID
    browser.show_photo(1)
    assert browser.view_mode == AlbumViewMode.FULLVIEW
    browser.next_photo()
    browser.next_photo()
    assert browser.current_index == 2
    browser.prev_photo()
    browser.prev_photo()
    browser.prev_photo()
    assert browser.current_index == 0


def test_delete_current_photo(tmp_path):
    _, browser = _make(tmp_path, 3)
    browser.show_photo(2)
    target = browser.current_photo
    assert browser.delete_current_photo()
    assert not target.exists()
    assert browser.photo_count == 2
    assert browser.current_index == 1
    assert target not in browser.files


def test_delete_all_returns_to_grid(tmp_path):
    _, browser = _make(tmp_path, 1)
    browser.show_photo(0)
    assert browser.delete_current_photo()
    assert browser.photo_count == 0
    assert browser.view_mode == AlbumViewMode.GRID
    assert not browser.delete_current_photo()


@pytest.mark.parametrize("remove_first", [True])
def test_delete_fails_when_file_gone(tmp_path, remove_first):
    _, browser = _make(tmp_path, 2)
    browser.show_photo(0)
    if remove_first:
        browser.current_photo.unlink()
    assert not browser.delete_current_photo()
    assert browser.photo_count == 2