"""Core service interfaces and shared data structures.

The extractor and pipeline depend only on these protocols so that the
infrastructure adapters (exifread, Pillow, pymediainfo, temp-file previews)
can be swapped for fakes in tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from core.models import MediaFile, PreviewHandle


@dataclass
class MediaProperties:
    """Intrinsic properties decoded from the media itself.

    Attributes:
        width: Pixel width.
        height: Pixel height.
        duration: Playback length in seconds (videos only).
    """

    width: int
    height: int
    duration: float | None = None


class TagDecoder(Protocol):
    """Turns raw file bytes into a mapping of tag name to raw tag record."""

    def decode(self, data: bytes) -> Mapping[str, Any]:
        """Decode tags; may raise on malformed data."""
        ...


class MediaReader(Protocol):
    """Reads intrinsic media properties by decoding the file."""

    def read_image(self, data: bytes) -> MediaProperties:
        """Decode image bytes; raises `MediaDecodeError` when undecodable."""
        ...

    def read_video(self, media_file: MediaFile) -> MediaProperties:
        """Probe a video; raises `MediaDecodeError` when undecodable."""
        ...


class PreviewProvider(Protocol):
    """Issues preview handles for files entering a batch."""

    def acquire(self, media_file: MediaFile) -> PreviewHandle | None:
        """Return a new handle, or None when no preview can be produced."""
        ...


class SaveTarget(Protocol):
    """Persistence collaborator used for exports and clean copies."""

    def save(self, data: bytes, suggested_name: str) -> str | None:
        """Write `data`; return the final location, or None if the user cancelled."""
        ...
