"""Photo storage on a directory-backed card."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_PHOTO_NUMBER = 9999


class StorageManager:
    """Manages the storage root and the numbered photo files within it."""

    def __init__(self, root: str | os.PathLike[str], photo_dir: str = "photos") -> None:
        self._root = Path(root)
        self._photo_dir_name = photo_dir
        self._ready = False
        self._status = "Not initialized"

    @property
    def root(self) -> Path:
        return self._root

    @property
    def photo_dir(self) -> Path:
        return self._root / self._photo_dir_name

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def status_text(self) -> str:
        return self._status

    def begin(self) -> bool:
        return self._attempt_init()

    def refresh(self) -> bool:
        """Retry initialisation unless storage is already ready."""
        if self._ready:
            return True
        return self._attempt_init()

    def ensure_ready(self) -> bool:
        if self._ready:
            return True
        return self.refresh()

    def force_reprobe(self) -> bool:
        self._ready = False
        return self._attempt_init()

    def next_photo_path(self) -> Path | None:
        """First unused IMG_NNNN.jpg path, or None when unavailable."""
        if not self._ready:
            return None
        for number in range(1, MAX_PHOTO_NUMBER + 1):
            candidate = self.photo_dir / f"IMG_{number:04d}.jpg"
            if not candidate.exists():
                return candidate
        return None

    def write_file(self, path: str | os.PathLike[str] | None,
                   data: bytes | bytearray | memoryview | None) -> bool:
        if not self._ready or path is None or not data:
            return False
        try:
            self._resolve(path).write_bytes(bytes(data))
        except OSError:
            return False
        return True

    def delete_file(self, path: str | os.PathLike[str] | None) -> bool:
        if not self._ready or path is None:
            return False
        try:
            self._resolve(path).unlink()
        except OSError:
            return False
        return True

    def _resolve(self, path: str | os.PathLike[str]) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self._root / candidate

    def _attempt_init(self) -> bool:
        if self._root.is_dir():
            try:
                self.photo_dir.mkdir(exist_ok=True)
            except OSError:
                logger.warning("Storage: cannot create %s", self.photo_dir)
            else:
                self._ready = True
                self._status = "SD ready"
                return True
        self._ready = False
        self._status = "SD not found"
        return False