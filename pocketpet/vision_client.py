"""Client for a remote image description ("vision") HTTP endpoint."""

from __future__ import annotations

import json
import logging
import ssl
import urllib.error
import urllib.request
from typing import Any, Callable

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 120
_TOP_LEVEL_KEYS = ("description", "text", "result", "message")
_DATA_KEYS = ("description", "text", "result")


class VisionError(Exception):
    """Raised when an image could not be described; carries a short status."""

    def __init__(self, status: str) -> None:
        super().__init__(status)
        self.status = status


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _first_present(mapping: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return _as_text(value)
    return None


def parse_response(body: str) -> str | None:
    """Pull the description out of a JSON reply, or None if there is none."""
    try:
        doc = json.loads(body)
    except (ValueError, TypeError):
        return None
    if not isinstance(doc, dict):
        return None

    found = _first_present(doc, _TOP_LEVEL_KEYS)
    if found is not None:
        return found
    data = doc.get("data")
    if isinstance(data, dict):
        return _first_present(data, _DATA_KEYS)
    return None


class VisionClient:
    """Posts JPEG images to a vision endpoint and returns the description."""

    def __init__(self, timeout: float = 15.0,
                 is_connected: Callable[[], bool] | None = None) -> None:
        self._timeout = timeout
        self._is_connected = is_connected or (lambda: True)
        self.status = ""

    def describe_image(self, url: str | None, token: str | None,
                       jpeg: bytes | bytearray | memoryview | None) -> str:
        """Send a JPEG and return its description, at most 120 characters."""
        self.status = ""
        try:
            description = self._describe(url, token, jpeg)
        except VisionError as err:
            self.status = err.status
            raise
        self.status = "Vision OK"
        logger.info("VisionClient: result=%s", description)
        return description

    def _describe(self, url: str | None, token: str | None,
                  jpeg: bytes | bytearray | memoryview | None) -> str:
        if not self._is_connected():
            raise VisionError("Wi-Fi not connected")
        if not url:
            raise VisionError("Vision endpoint missing")
        if jpeg is None or len(jpeg) == 0:
            raise VisionError("JPEG empty")
        if not url.startswith(("http://", "https://")):
            raise VisionError("Vision HTTP begin failed")

        headers = {"Content-Type": "image/jpeg"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
            headers["X-Token"] = token
        try:
            request = urllib.request.Request(url, data=bytes(jpeg), headers=headers,
                                             method="POST")
        except ValueError as err:
            raise VisionError("Vision HTTP begin failed") from err

        context = None
        if url.startswith("https://"):
            context = ssl.create_default_context()
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        try:
            with urllib.request.urlopen(request, timeout=self._timeout,
                                        context=context) as response:
                code = response.status
                raw = response.read()
        except urllib.error.HTTPError as err:
            code = err.code
            raw = err.read()
            err.close()
        except (urllib.error.URLError, OSError, ValueError) as err:
            raise VisionError("Vision HTTP -1") from err

        body = raw.decode("utf-8", errors="replace")
        if not 200 <= code < 300:
            if body:
                logger.warning("VisionClient: HTTP %d body=%s", code, body)
            raise VisionError(f"Vision HTTP {code}")

        description = parse_response(body)
        if description is None:
            description = body
        description = description.strip()
        if not description:
            raise VisionError("Vision returned empty result")
        return description[:MAX_DESCRIPTION_LENGTH]