"""Core domain models for media files, extracted metadata and batches."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
import io
import mimetypes
from pathlib import Path
from typing import Any, BinaryIO

from loguru import logger

from core.errors import PreviewError

# Types the platform registry often lacks
_EXTRA_MIME_TYPES = {
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".webp": "image/webp",
    ".mkv": "video/x-matroska",
    ".webm": "video/webm",
    ".mov": "video/quicktime",
}
for _ext, _mime in _EXTRA_MIME_TYPES.items():
    mimetypes.add_type(_mime, _ext)

FlatMetadata = dict[str, Any]


@dataclass
class MediaFile:
    """A user-supplied file handle.

    Either `path` or `data` must be provided; `data` wins when both are set.
    `last_modified` is epoch milliseconds.
    """

    name: str
    size: int
    type: str
    last_modified: int
    path: Path | None = None
    data: bytes | None = field(default=None, repr=False)

    @classmethod
    def from_path(cls, path: str | Path) -> MediaFile:
        """Build a handle for a file on disk, guessing its MIME type from the name."""
        p = Path(path)
        st = p.stat()
        mime, _ = mimetypes.guess_type(p.name)
        return cls(
            name=p.name,
            size=int(st.st_size),
            type=mime or "",
            last_modified=int(st.st_mtime_ns // 1_000_000),
            path=p,
        )

    @classmethod
    def from_bytes(
        cls, name: str, data: bytes, mime_type: str, last_modified: int | None = None
    ) -> MediaFile:
        """Build an in-memory handle."""
        if last_modified is None:
            last_modified = int(datetime.now(timezone.utc).timestamp() * 1000)
        return cls(
            name=name, size=len(data), type=mime_type, last_modified=last_modified, data=data
        )

    @property
    def media_kind(self) -> str | None:
        """Coarse MIME type: "image", "video" or None."""
        if self.type.startswith("image/"):
            return "image"
        if self.type.startswith("video/"):
            return "video"
        return None

    @property
    def last_modified_iso(self) -> str:
        """Modification time as ISO-8601 UTC with millisecond precision."""
        dt = datetime.fromtimestamp(self.last_modified / 1000, tz=timezone.utc)
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        """Yield a binary stream over the file bytes, closed on exit."""
        if self.data is not None:
            stream: BinaryIO = io.BytesIO(self.data)
        elif self.path is not None:
            stream = self.path.open("rb")
        else:
            raise FileNotFoundError(f"No data source for {self.name}")
        try:
            yield stream
        finally:
            stream.close()

    def read_bytes(self) -> bytes:
        """Return the raw file bytes."""
        with self.open() as stream:
            return stream.read()


@dataclass(frozen=True)
class RawTagRecord:
    """One decoded tag: a machine value and/or a human-readable description."""

    value: Any = None
    description: str | None = None


@dataclass(frozen=True)
class GeoCoordinate:
    """Hemisphere-corrected decimal coordinate."""

    latitude: float
    longitude: float
    altitude: float | None = None

    def to_dict(self) -> dict[str, float]:
        """Plain mapping; `altitude` is omitted when unknown."""
        data = {"latitude": self.latitude, "longitude": self.longitude}
        if self.altitude is not None:
            data["altitude"] = self.altitude
        return data


@dataclass
class Category:
    """A named partition of one file's metadata."""

    name: str
    items: FlatMetadata
    count: int
    preview: str


class PreviewHandle:
    """Ephemeral, revocable reference to displayable file bytes.

    The owner must call `release()` exactly once.
    """

    def __init__(self, path: Path, on_release: Callable[[PreviewHandle], None] | None = None):
        self.path = path
        self._on_release = on_release
        self._released = False

    @property
    def released(self) -> bool:
        """True once `release()` has run."""
        return self._released

    def release(self) -> None:
        """Revoke the handle; raises `PreviewError` on a second call."""
        if self._released:
            raise PreviewError(f"Preview handle already released: {self.path}")
        self._released = True
        if self._on_release is not None:
            self._on_release(self)

    def __repr__(self) -> str:
        return f"PreviewHandle(path={str(self.path)!r}, released={self._released})"


@dataclass
class FileRecord:
    """Per-file aggregate produced by the extractor."""

    file: MediaFile
    metadata: FlatMetadata | None = None
    gps: GeoCoordinate | None = None
    error: str | None = None
    preview: PreviewHandle | None = None

    @property
    def file_name(self) -> str:
        """Name of the source file."""
        return self.file.name

    def release_preview(self) -> None:
        """Release and drop the preview handle if one is held."""
        handle, self.preview = self.preview, None
        if handle is not None:
            handle.release()


@dataclass
class BatchState:
    """Ordered records of one submitted batch; index order equals input order."""

    total: int = 0
    records: list[FileRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> FileRecord:
        return self.records[index]

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.records)

    @property
    def is_complete(self) -> bool:
        """True when every input file has a record."""
        return len(self.records) >= self.total

    def release_previews(self) -> int:
        """Release every held preview handle; returns how many were released.

        A handle that fails to release is logged and dropped; the rest are
        still released.
        """
        released = 0
        for record in self.records:
            if record.preview is None:
                continue
            try:
                record.release_preview()
            except Exception as ex:  # pylint: disable=broad-exception-caught
                logger.exception("Releasing preview for {} failed: {}", record.file_name, ex)
                continue
            released += 1
        return released
