"""Test doubles and media builders shared across the suite."""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image

from core.errors import MediaDecodeError, TagDecodeError
from core.models import MediaFile, PreviewHandle, RawTagRecord
from core.services.interfaces import MediaProperties

MAKE_TAG = 0x010F


def make_image_bytes(
    fmt: str = "JPEG", size: tuple[int, int] = (64, 48), make: str | None = None
) -> bytes:
    """Encode a solid-colour test image, optionally with an EXIF Make tag."""
    im = Image.new("RGB", size, (200, 40, 40))
    params = {}
    if make is not None:
        exif = Image.Exif()
        exif[MAKE_TAG] = make
        params["exif"] = exif.tobytes()
    buf = io.BytesIO()
    im.save(buf, format=fmt, **params)
    return buf.getvalue()


def image_file(name: str = "photo.jpg", data: bytes | None = None) -> MediaFile:
    return MediaFile.from_bytes(name, data or make_image_bytes(), "image/jpeg", 0)


def video_file(name: str = "clip.mp4") -> MediaFile:
    return MediaFile.from_bytes(name, b"\x00\x00\x00\x18ftypmp42", "video/mp4", 0)


def text_file(name: str = "notes.txt") -> MediaFile:
    return MediaFile.from_bytes(name, b"hello", "text/plain", 0)


class FakeDecoder:
    """Returns canned tags; raises when `fail` is set."""

    def __init__(self, tags: dict | None = None, fail: bool = False) -> None:
        self.tags = tags or {}
        self.fail = fail
        self.calls = 0

    def decode(self, data: bytes) -> dict:
        self.calls += 1
        if self.fail:
            raise TagDecodeError("corrupt EXIF block")
        return dict(self.tags)


class FakeReader:
    """Reports fixed media properties; raises for undecodable input."""

    def __init__(self, broken: set[str] | None = None) -> None:
        self.broken = broken or set()

    def read_image(self, data: bytes) -> MediaProperties:
        if data == b"broken":
            raise MediaDecodeError("Failed to load image for EXIF extraction")
        return MediaProperties(width=640, height=480)

    def read_video(self, media_file: MediaFile) -> MediaProperties:
        if media_file.name in self.broken:
            raise MediaDecodeError("Failed to load video metadata")
        return MediaProperties(width=1920, height=1080, duration=125.0)


class FakePreviews:
    """Issues in-memory preview handles and remembers them."""

    def __init__(self) -> None:
        self.issued: list[PreviewHandle] = []

    def acquire(self, media_file: MediaFile) -> PreviewHandle:
        handle = PreviewHandle(Path("/previews") / media_file.name)
        self.issued.append(handle)
        return handle

    @property
    def outstanding(self) -> list[PreviewHandle]:
        return [h for h in self.issued if not h.released]


GPS_TAGS = {
    "Make": RawTagRecord(value="Canon", description="Canon"),
    "GPSLatitude": RawTagRecord(value=[34, 3, 0], description="34.05"),
    "GPSLatitudeRef": RawTagRecord(value="S", description="S"),
    "GPSLongitude": RawTagRecord(value=[118, 15, 0], description="118.25"),
    "GPSLongitudeRef": RawTagRecord(value="W", description="W"),
    "GPSAltitude": RawTagRecord(value=61.5, description="61.5 m"),
}
