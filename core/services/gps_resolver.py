"""Resolve a geographic coordinate from raw GPS tags."""

from __future__ import annotations

from collections.abc import Mapping
from fractions import Fraction
import math
import numbers
import re
from typing import Any

from loguru import logger

from core.models import GeoCoordinate, RawTagRecord

_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_float(text: str) -> float:
    """Parse the leading number of `text` ("61.5 m" -> 61.5); NaN if none."""
    match = _LEADING_FLOAT.match(text)
    if not match:
        return math.nan
    return float(match.group(0))


def coerce_float(value: Any) -> float:
    """Convert a raw value to float; NaN for anything non-numeric.

    A sequence of up to three numbers is read as degrees, minutes, seconds.
    """
    if isinstance(value, (list, tuple)):
        return _dms_to_float(value)
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (numbers.Real, Fraction)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def _dms_to_float(parts: list | tuple) -> float:
    if not 1 <= len(parts) <= 3 or any(isinstance(p, (list, tuple)) for p in parts):
        return math.nan
    return sum(coerce_float(p) / scale for p, scale in zip(parts, (1.0, 60.0, 3600.0)))


def _parts(record: Any) -> tuple[Any, str | None]:
    """Return (value, description) for a record of any supported shape."""
    if isinstance(record, RawTagRecord):
        return record.value, record.description
    if isinstance(record, Mapping):
        return record.get("value"), record.get("description")
    return record, None


def _ref_equals(record: Any, expected: str) -> bool:
    if record is None:
        return False
    value, description = _parts(record)
    text = description if description is not None else value
    return isinstance(text, str) and text.strip().upper() == expected


class GpsResolver:
    """Extract a `GeoCoordinate` from raw tags, or None when absent/invalid.

    Args:
        negate_raw_longitude: Reproduce the legacy behaviour of negating a
            longitude read from a raw value (no description) before hemisphere
            correction. Off by default.
    """

    def __init__(self, negate_raw_longitude: bool = False) -> None:
        self._negate_raw_longitude = negate_raw_longitude

    def resolve(self, tags: Mapping[str, Any] | None) -> GeoCoordinate | None:
        """Return the coordinate; never raises."""
        try:
            return self._resolve(tags or {})
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.debug("GPS resolution failed: {}", ex)
            return None

    def _component(self, record: Any) -> tuple[float, bool]:
        """Return (number, came_from_description)."""
        value, description = _parts(record)
        if description is not None:
            return parse_float(str(description)), True
        return coerce_float(value), False

    def _resolve(self, tags: Mapping[str, Any]) -> GeoCoordinate | None:
        lat_record = tags.get("GPSLatitude")
        lon_record = tags.get("GPSLongitude")
        if lat_record is None or lon_record is None:
            return None

        latitude, _ = self._component(lat_record)
        longitude, lon_from_description = self._component(lon_record)
        if math.isnan(latitude) or math.isnan(longitude):
            logger.debug("Discarding non-numeric GPS coordinate")
            return None

        if self._negate_raw_longitude and not lon_from_description:
            logger.debug("Applying legacy raw-longitude negation")
            longitude = -longitude

        if _ref_equals(tags.get("GPSLatitudeRef"), "S"):
            latitude = -latitude
        if _ref_equals(tags.get("GPSLongitudeRef"), "W"):
            longitude = -longitude

        if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
            logger.debug("Discarding out-of-range GPS coordinate: {}, {}", latitude, longitude)
            return None

        altitude: float | None = None
        alt_record = tags.get("GPSAltitude")
        if alt_record is not None:
            alt, _ = self._component(alt_record)
            if not math.isnan(alt) and not math.isinf(alt):
                altitude = alt

        return GeoCoordinate(latitude=latitude, longitude=longitude, altitude=altitude)
