"""Lightweight view model wrapper around `FileRecord`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from core.models import Category, FileRecord
from core.services.classifier import MetadataClassifier
from core.services.extractor import UNSUPPORTED_TYPE_ERROR
from core.services.value_formatter import format_metadata_key, format_metadata_value

MAP_ZOOM = 13


class MapMarker(NamedTuple):
    """What the external map widget consumes."""

    latitude: float
    longitude: float
    title: str | None = None


@dataclass
class FileRecordVM:
    """Expose display-ready properties for one record."""

    record: FileRecord
    classifier: MetadataClassifier = field(default_factory=MetadataClassifier)

    @property
    def file_name(self) -> str:
        """Base name of the source file."""
        return self.record.file_name

    @property
    def has_error(self) -> bool:
        """True if extraction failed for this file."""
        return bool(self.record.error)

    @property
    def error_text(self) -> str | None:
        """User-facing error message, shown in place of metadata."""
        error = self.record.error
        if not error:
            return None
        if error == UNSUPPORTED_TYPE_ERROR:
            return error
        return f"Error reading metadata: {error}"

    @property
    def categories(self) -> list[Category]:
        """Categorized metadata; empty for error records."""
        if self.has_error or not self.record.metadata:
            return []
        return self.classifier.classify(self.record.metadata)

    @staticmethod
    def rows_for(category: Category) -> list[tuple[str, str]]:
        """(label, value) pairs for a category detail view."""
        return [
            (format_metadata_key(key), format_metadata_value(key, value))
            for key, value in category.items.items()
        ]

    @property
    def map_marker(self) -> MapMarker | None:
        """Map input, or None when the record has no coordinate."""
        gps = self.record.gps
        if gps is None:
            return None
        return MapMarker(gps.latitude, gps.longitude, self.file_name)

    @property
    def map_url(self) -> str | None:
        """OpenStreetMap link centred on the coordinate."""
        marker = self.map_marker
        if marker is None:
            return None
        lat, lon = marker.latitude, marker.longitude
        return (
            f"https://www.openstreetmap.org/?mlat={lat:.6f}&mlon={lon:.6f}"
            f"#map={MAP_ZOOM}/{lat:.6f}/{lon:.6f}"
        )

    @property
    def preview_path(self) -> str | None:
        """Filesystem path of the preview, if one is held."""
        handle = self.record.preview
        if handle is None or handle.released:
            return None
        return str(handle.path)
