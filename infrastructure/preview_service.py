"""Preview handles backed by temporary thumbnail files.

Image previews are bounded JPEG thumbnails written to a private temp
directory and deleted when their handle is released. Video previews point at
the source file and own no temporary data.
"""

from __future__ import annotations

import io
from pathlib import Path
import shutil
import tempfile
import threading
import uuid

from PIL import Image, ImageOps
from loguru import logger

from core.models import MediaFile, PreviewHandle


def _ensure_dir(p: Path) -> None:
    """Create directory `p` if missing (including parents)."""
    p.mkdir(parents=True, exist_ok=True)


class PreviewService:
    """Issue and track preview handles."""

    def __init__(self, max_side: int = 512, temp_dir: str | Path | None = None) -> None:
        self._max_side = max(16, int(max_side or 512))
        if temp_dir:
            self._dir = Path(temp_dir) / f"previews_{uuid.uuid4().hex[:8]}"
        else:
            self._dir = Path(tempfile.gettempdir()) / f"metadata_viewer_{uuid.uuid4().hex[:8]}"
        self._owns_dir = False
        self._outstanding: set[int] = set()
        self._lock = threading.Lock()

    @property
    def outstanding(self) -> int:
        """Number of handles issued and not yet released."""
        with self._lock:
            return len(self._outstanding)

    def acquire(self, media_file: MediaFile) -> PreviewHandle | None:
        """Create a preview for `media_file`, or None when it cannot be rendered."""
        kind = media_file.media_kind
        if kind == "image":
            path = self._write_thumbnail(media_file)
            if path is None:
                return None
            handle = PreviewHandle(path, on_release=self._delete_thumbnail)
        elif kind == "video" and media_file.path is not None:
            handle = PreviewHandle(media_file.path, on_release=self._forget)
        else:
            return None
        with self._lock:
            self._outstanding.add(id(handle))
        return handle

    def close(self) -> None:
        """Remove the temp directory and anything left in it."""
        if self.outstanding:
            logger.warning("Closing preview service with {} unreleased handles", self.outstanding)
        if self._owns_dir:
            shutil.rmtree(self._dir, ignore_errors=True)
            self._owns_dir = False

    def _write_thumbnail(self, media_file: MediaFile) -> Path | None:
        try:
            data = media_file.read_bytes()
            with Image.open(io.BytesIO(data)) as im:
                try:
                    im = ImageOps.exif_transpose(im)
                except (OSError, ValueError, AttributeError):
                    pass
                resampling = getattr(Image, "Resampling", Image)
                resample = getattr(resampling, "LANCZOS", getattr(resampling, "BICUBIC", 3))
                im.thumbnail((self._max_side, self._max_side), resample)
                if im.mode not in ("RGB", "L"):
                    im = im.convert("RGB")
                _ensure_dir(self._dir)
                self._owns_dir = True
                out = self._dir / f"{uuid.uuid4().hex}.jpg"
                im.save(out, format="JPEG", quality=85)
            return out
        except (OSError, ValueError) as ex:
            logger.debug("Preview thumbnail failed for {}: {}", media_file.name, ex)
            return None

    def _forget(self, handle: PreviewHandle) -> None:
        with self._lock:
            self._outstanding.discard(id(handle))

    def _delete_thumbnail(self, handle: PreviewHandle) -> None:
        self._forget(handle)
        try:
            handle.path.unlink(missing_ok=True)
        except OSError as ex:
            logger.debug("Delete preview {} failed: {}", handle.path, ex)
