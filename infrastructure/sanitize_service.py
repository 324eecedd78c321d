"""Metadata-stripped copies of media files.

Images are redrawn onto a blank canvas of identical size and re-encoded in
their original format, which drops EXIF, XMP and ICC data. Videos are
returned unchanged: container-level tag removal is not implemented.
"""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError
from loguru import logger

from core.errors import SanitizeError
from core.models import MediaFile
from core.services.interfaces import SaveTarget

CLEAN_PREFIX = "clean_"

# Formats that cannot store an alpha channel
_NO_ALPHA_FORMATS = {"JPEG", "BMP"}


def _format_for_mime(mime_type: str, fallback: str | None) -> str | None:
    by_mime = {mime: fmt for fmt, mime in Image.MIME.items()}
    return by_mime.get(mime_type.lower(), fallback)


def clean_name(name: str) -> str:
    """Name for a metadata-stripped copy."""
    return f"{CLEAN_PREFIX}{name}"


class SanitizeService:
    """Produce and persist metadata-stripped copies."""

    def __init__(self, save_target: SaveTarget | None = None, jpeg_quality: int = 95) -> None:
        self._target = save_target
        self._quality = jpeg_quality

    def sanitize(self, media_file: MediaFile) -> bytes:
        """Return the file's bytes without embedded metadata where supported."""
        kind = media_file.media_kind
        data = media_file.read_bytes()
        if kind == "video":
            logger.warning(
                "Metadata removal is not supported for video; returning {} unchanged",
                media_file.name,
            )
            return data
        if kind != "image":
            raise SanitizeError(f"Unsupported file type for sanitizing: {media_file.type!r}")
        return self._reencode_image(media_file, data)

    def save_clean_copy(
        self, media_file: MediaFile, save_target: SaveTarget | None = None
    ) -> str | None:
        """Sanitize and write as `clean_<name>` through `save_target` or the default."""
        target = save_target or self._target
        if target is None:
            raise SanitizeError("No save target configured")
        cleaned = self.sanitize(media_file)
        return target.save(cleaned, clean_name(media_file.name))

    def _reencode_image(self, media_file: MediaFile, data: bytes) -> bytes:
        try:
            with Image.open(io.BytesIO(data)) as src:
                src.load()
                fmt = _format_for_mime(media_file.type, src.format)
                if fmt is None:
                    raise SanitizeError(f"Cannot determine output format for {media_file.name}")
                has_alpha = src.mode in ("RGBA", "LA", "PA") or (
                    src.mode == "P" and "transparency" in src.info
                )
                mode = "RGBA" if has_alpha and fmt.upper() not in _NO_ALPHA_FORMATS else "RGB"
                canvas = Image.new(mode, src.size)
                canvas.paste(src.convert(mode), (0, 0))
            out = io.BytesIO()
            params = {"quality": self._quality} if fmt.upper() == "JPEG" else {}
            canvas.save(out, format=fmt, **params)
        except (UnidentifiedImageError, OSError, ValueError, KeyError) as ex:
            raise SanitizeError(f"Failed to re-encode {media_file.name}: {ex}") from ex
        logger.info("Sanitized {} ({} -> {} bytes)", media_file.name, len(data), out.tell())
        return out.getvalue()
