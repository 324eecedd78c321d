"""Intrinsic media properties: Pillow for images, MediaInfo for videos.

Includes optional Pillow-HEIF registration so HEIC/HEIF photos decode like
any other image.
"""

from __future__ import annotations

import io
from typing import Any

from PIL import Image, UnidentifiedImageError
from loguru import logger
from pymediainfo import MediaInfo

from core.errors import MediaDecodeError
from core.models import MediaFile
from core.services.interfaces import MediaProperties

IMAGE_DECODE_ERROR = "Failed to load image for EXIF extraction"
VIDEO_DECODE_ERROR = "Failed to load video metadata"

try:  # pragma: no cover - optional dependency
    from pillow_heif import register_heif_opener  # type: ignore

    register_heif_opener()
    PIL_HEIF_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    PIL_HEIF_AVAILABLE = False


def _as_number(value: Any) -> float | None:
    """MediaInfo reports numbers as int, float or str depending on version."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class MediaPropertyReader:
    """Decode files far enough to report width, height and duration."""

    def read_image(self, data: bytes) -> MediaProperties:
        """Fully decode image bytes and return their pixel size."""
        try:
            with Image.open(io.BytesIO(data)) as im:
                im.load()
                width, height = im.size
        except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as ex:
            logger.debug("Pillow decode failed: {}", ex)
            raise MediaDecodeError(IMAGE_DECODE_ERROR) from ex
        return MediaProperties(width=int(width), height=int(height))

    def read_video(self, media_file: MediaFile) -> MediaProperties:
        """Probe a video container for its first video track and duration."""
        try:
            with media_file.open() as stream:
                info = MediaInfo.parse(stream)
        except (OSError, RuntimeError, ValueError) as ex:
            logger.debug("MediaInfo parse failed for {}: {}", media_file.name, ex)
            raise MediaDecodeError(VIDEO_DECODE_ERROR) from ex

        video = next((t for t in info.tracks if t.track_type == "Video"), None)
        if video is None:
            raise MediaDecodeError(VIDEO_DECODE_ERROR)
        width = _as_number(getattr(video, "width", None))
        height = _as_number(getattr(video, "height", None))
        if width is None or height is None:
            raise MediaDecodeError(VIDEO_DECODE_ERROR)

        general = next((t for t in info.tracks if t.track_type == "General"), None)
        duration_ms = _as_number(getattr(general, "duration", None)) if general else None
        if duration_ms is None:
            duration_ms = _as_number(getattr(video, "duration", None))
        duration = duration_ms / 1000.0 if duration_ms is not None else None
        return MediaProperties(width=int(width), height=int(height), duration=duration)
