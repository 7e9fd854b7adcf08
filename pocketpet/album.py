"""Photo album browsing: grid paging, full view and touch hit testing."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pocketpet.storage import StorageManager

MAX_PHOTOS = 200
GRID_COLS = 4
GRID_ROWS = 3
GRID_MARGIN = 4
GRID_TOP_Y = 36
PAGE_SIZE = GRID_COLS * GRID_ROWS

BACK_X = 5
BACK_Y = 5
BACK_W = 60
BACK_H = 24

DEL_W = 58
DEL_H = 24

_PHOTO_SUFFIXES = (".jpg", ".JPG")


class AlbumViewMode(Enum):
    GRID = "grid"
    FULLVIEW = "fullview"


class AlbumHitZone(Enum):
    NONE = "none"
    BACK = "back"
    THUMBNAIL = "thumbnail"
    DELETE = "delete"


class AlbumBrowser:
    """State of the album screen: photo list, page and selected photo."""

    def __init__(self, storage: StorageManager, display_width: int = 320,
                 display_height: int = 240) -> None:
        self._storage = storage
        self._width = display_width
        self._height = display_height
        self._cell_w = (display_width - GRID_MARGIN * (GRID_COLS + 1)) // GRID_COLS
        self._cell_h = (display_height - GRID_TOP_Y - 30
                        - GRID_MARGIN * (GRID_ROWS + 1)) // GRID_ROWS
        self._del_x = display_width - 64
        self._del_y = display_height - 28

        self._visible = False
        self._dirty = True
        self._view_mode = AlbumViewMode.GRID
        self._files: list[Path] = []
        self._grid_offset = 0
        self._current_index = 0
        self._thumbs_decoded = 0

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def view_mode(self) -> AlbumViewMode:
        return self._view_mode

    @property
    def files(self) -> list[Path]:
        return list(self._files)

    @property
    def photo_count(self) -> int:
        return len(self._files)

    @property
    def grid_offset(self) -> int:
        return self._grid_offset

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_photo(self) -> Path | None:
        if 0 <= self._current_index < len(self._files):
            return self._files[self._current_index]
        return None

    def show(self) -> None:
        self._visible = True
        self._dirty = True
        self._view_mode = AlbumViewMode.GRID
        self._grid_offset = 0
        self._thumbs_decoded = 0

    def hide(self) -> None:
        self._visible = False

    def mark_dirty(self) -> None:
        self._dirty = True

    def set_view_mode(self, mode: AlbumViewMode) -> None:
        self._view_mode = mode
        self._dirty = True
        if mode == AlbumViewMode.GRID:
            self._thumbs_decoded = 0

    def scan_photos(self) -> None:
        """Reload the photo list, newest (highest file name) first."""
        self._files = []
        directory = self._storage.photo_dir
        if not directory.is_dir():
            return

        found: list[Path] = []
        with os.scandir(directory) as entries:
            for entry in entries:
                if len(found) >= MAX_PHOTOS:
                    break
                if entry.name.endswith(_PHOTO_SUFFIXES) and entry.is_file():
                    found.append(directory / entry.name)
        self._files = sorted(found, key=str, reverse=True)

        self._grid_offset = 0
        self._current_index = 0
        self._thumbs_decoded = 0

    def scroll_up(self) -> None:
        if self._grid_offset > 0:
            self._grid_offset = max(self._grid_offset - PAGE_SIZE, 0)
            self._thumbs_decoded = 0
            self._dirty = True

    def scroll_down(self) -> None:
        if self._grid_offset + PAGE_SIZE < len(self._files):
            self._grid_offset += PAGE_SIZE
            self._thumbs_decoded = 0
            self._dirty = True

    def show_photo(self, index: int) -> None:
        if not 0 <= index < len(self._files):
            return
        self._current_index = index
        self._view_mode = AlbumViewMode.FULLVIEW
        self._dirty = True

    def next_photo(self) -> None:
        if self._current_index < len(self._files) - 1:
            self._current_index += 1
            self._dirty = True

    def prev_photo(self) -> None:
        if self._current_index > 0:
            self._current_index -= 1
            self._dirty = True

    def delete_current_photo(self) -> bool:
        if not self._files or self._current_index >= len(self._files):
            return False
        if not self._storage.delete_file(self._files[self._current_index]):
            return False

        del self._files[self._current_index]
        if not self._files:
            self._view_mode = AlbumViewMode.GRID
        elif self._current_index >= len(self._files):
            self._current_index = len(self._files) - 1

        self._thumbs_decoded = 0
        self._dirty = True
        return True

    def hit_test(self, x: int, y: int) -> AlbumHitZone:
        if BACK_X <= x < BACK_X + BACK_W and BACK_Y <= y < BACK_Y + BACK_H:
            return AlbumHitZone.BACK
        if (self._view_mode == AlbumViewMode.FULLVIEW
                and self._del_x <= x < self._del_x + DEL_W
                and self._del_y <= y < self._del_y + DEL_H):
            return AlbumHitZone.DELETE
        if self._view_mode == AlbumViewMode.GRID and self.thumbnail_index_at(x, y) >= 0:
            return AlbumHitZone.THUMBNAIL
        return AlbumHitZone.NONE

    def thumbnail_index_at(self, x: int, y: int) -> int:
        """Index into the photo list of the thumbnail at (x, y), or -1."""
        if y < GRID_TOP_Y or not self._files:
            return -1
        for row in range(GRID_ROWS):
            cell_y = GRID_TOP_Y + GRID_MARGIN + row * (self._cell_h + GRID_MARGIN)
            if not cell_y <= y < cell_y + self._cell_h:
                continue
            for col in range(GRID_COLS):
                cell_x = GRID_MARGIN + col * (self._cell_w + GRID_MARGIN)
                if cell_x <= x < cell_x + self._cell_w:
                    index = self._grid_offset + row * GRID_COLS + col
                    return index if index < len(self._files) else -1
        return -1