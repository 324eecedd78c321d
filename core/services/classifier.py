"""Partition flat metadata into display categories.

Buckets are evaluated in a fixed order and the first match wins. Emission
order follows the bucket order, and empty buckets are skipped.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core.models import Category, FlatMetadata
from core.services.value_formatter import format_metadata_value

FILE_INFORMATION = "File Information"
MEDIA_PROPERTIES = "Image/Video Properties"
EXIF_DATA = "EXIF Data"
TECHNICAL_DETAILS = "Technical Details"
OTHER = "Other"

CATEGORY_ORDER: list[str] = [
    FILE_INFORMATION,
    MEDIA_PROPERTIES,
    EXIF_DATA,
    TECHNICAL_DETAILS,
    OTHER,
]

FILE_KEYS = frozenset({"name", "size", "type", "lastModified"})
MEDIA_KEYS = frozenset({"width", "height", "duration"})
EXIF_HINTS = ("exif", "gps", "camera", "make", "model", "iso", "aperture", "shutter", "focal")
TECHNICAL_HINTS = ("format", "codec", "bitrate", "fps", "compression")

PREVIEW_MAX_LENGTH = 50


def category_for_key(key: str) -> str:
    """Return the category name a metadata key belongs to."""
    if key in FILE_KEYS:
        return FILE_INFORMATION
    if key in MEDIA_KEYS:
        return MEDIA_PROPERTIES
    lowered = key.lower()
    if any(hint in lowered for hint in EXIF_HINTS):
        return EXIF_DATA
    if any(hint in lowered for hint in TECHNICAL_HINTS):
        return TECHNICAL_DETAILS
    return OTHER


def _preview(key: str, value: Any) -> str:
    text = format_metadata_value(key, value)
    if len(text) > PREVIEW_MAX_LENGTH:
        return text[:PREVIEW_MAX_LENGTH] + "..."
    return text


class MetadataClassifier:
    """Builds `Category` lists from one file's flat metadata."""

    def classify(self, metadata: Mapping[str, Any] | None) -> list[Category]:
        """Return non-empty categories in fixed order."""
        buckets: dict[str, FlatMetadata] = {name: {} for name in CATEGORY_ORDER}
        for key, value in (metadata or {}).items():
            buckets[category_for_key(key)][key] = value

        categories: list[Category] = []
        for name in CATEGORY_ORDER:
            items = buckets[name]
            if not items:
                continue
            first_key, first_value = next(iter(items.items()))
            categories.append(
                Category(
                    name=name,
                    items=items,
                    count=len(items),
                    preview=_preview(first_key, first_value),
                )
            )
        return categories
