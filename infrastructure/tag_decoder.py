"""EXIF tag decoding via exifread.

exifread names tags "<IFD group> <TagName>" (e.g. "GPS GPSLatitude"); the
group prefix is stripped so keys read like the bare EXIF tag names.
"""

from __future__ import annotations

from collections.abc import Sequence
from fractions import Fraction
import io
from typing import Any

import exifread
from loguru import logger

from core.errors import TagDecodeError
from core.models import RawTagRecord

# IFD groups whose prefix is dropped from the key
_STRIPPED_GROUPS = {"Image", "EXIF", "GPS", "Interoperability"}
# Thumbnail IFD entries would shadow the primary image's tags
_SKIPPED_GROUPS = {"Thumbnail"}
_SKIPPED_KEYS = {"JPEGThumbnail", "TIFFThumbnail"}


def _to_float(value: Any) -> float:
    if isinstance(value, Fraction):
        return float(value)
    num = getattr(value, "num", None)
    den = getattr(value, "den", None)
    if num is not None and den is not None:
        return float(num) / float(den) if den else float("nan")
    return float(value)


def dms_to_decimal(values: Sequence[Any]) -> float:
    """Convert [degrees, minutes, seconds] rationals to decimal degrees."""
    parts = [_to_float(v) for v in values]
    while len(parts) < 3:
        parts.append(0.0)
    degrees, minutes, seconds = parts[:3]
    return degrees + minutes / 60.0 + seconds / 3600.0


def _split_key(key: str) -> tuple[str, str]:
    group, sep, name = key.partition(" ")
    if not sep:
        return "", key
    return group, name


def _plain_value(values: Any) -> Any:
    """Unwrap single-element lists so scalars stay scalars."""
    if isinstance(values, (list, tuple)):
        if len(values) == 1:
            return values[0]
        return list(values)
    return values


def _clean_text(text: Any) -> str:
    return str(text).strip("\x00 ").strip()


class ExifreadTagDecoder:
    """Decode embedded EXIF tags into `RawTagRecord`s."""

    def __init__(self, details: bool = False) -> None:
        self._details = details

    def decode(self, data: bytes) -> dict[str, RawTagRecord]:
        """Return tag name -> record; raises `TagDecodeError` on parser failure."""
        try:
            with io.BytesIO(data) as stream:
                tags = exifread.process_file(stream, details=self._details)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise TagDecodeError(f"EXIF parsing failed: {ex}") from ex

        records: dict[str, RawTagRecord] = {}
        for full_key, tag in (tags or {}).items():
            group, name = _split_key(full_key)
            if full_key in _SKIPPED_KEYS or group in _SKIPPED_GROUPS:
                continue
            key = name if group in _STRIPPED_GROUPS else full_key
            values = getattr(tag, "values", tag)
            printable = getattr(tag, "printable", None)
            description = _clean_text(printable) if printable is not None else None
            records[key] = RawTagRecord(value=_plain_value(values), description=description)

        self._describe_gps(records)
        logger.debug("Decoded {} EXIF tags", len(records))
        return records

    def _describe_gps(self, records: dict[str, RawTagRecord]) -> None:
        """Replace rational GPS descriptions with decimal ones."""
        for key in ("GPSLatitude", "GPSLongitude"):
            rec = records.get(key)
            if rec is None:
                continue
            values = rec.value if isinstance(rec.value, list) else [rec.value]
            try:
                decimal = dms_to_decimal(values)
            except (TypeError, ValueError, ZeroDivisionError) as ex:
                logger.debug("Cannot convert {} to decimal: {}", key, ex)
                continue
            records[key] = RawTagRecord(value=rec.value, description=repr(round(decimal, 7)))

        alt = records.get("GPSAltitude")
        if alt is not None:
            try:
                metres = _to_float(alt.value)
            except (TypeError, ValueError, ZeroDivisionError) as ex:
                logger.debug("Cannot convert GPSAltitude: {}", ex)
                return
            ref = records.get("GPSAltitudeRef")
            if ref is not None and str(ref.value) == "1":
                metres = -metres
            records["GPSAltitude"] = RawTagRecord(value=alt.value, description=f"{metres:g} m")
