"""Display formatting for metadata keys and values.

All functions are pure and never raise for unexpected value types; they
fall back to `str(value)`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from fractions import Fraction
import json
import math
import numbers
import re
from typing import Any

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]
_CAPITAL = re.compile(r"([A-Z])")


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def format_file_size(num_bytes: Any) -> str:
    """Render a byte count with base-1024 units, e.g. 1536 -> "1.5 KB"."""
    if not _is_number(num_bytes):
        return str(num_bytes)
    if num_bytes == 0:
        return "0 Bytes"
    scaled = float(num_bytes)
    unit = 0
    while abs(scaled) >= 1024 and unit < len(SIZE_UNITS) - 1:
        scaled /= 1024
        unit += 1
    text = f"{scaled:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"


def format_date(value: Any) -> str:
    """Locale-formatted local date/time from an ISO string or epoch milliseconds."""
    try:
        if _is_number(value):
            dt = datetime.fromtimestamp(float(value) / 1000, tz=timezone.utc)
        else:
            text = str(value).strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            dt = datetime.fromisoformat(text)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone().strftime("%x %X")
    except (ValueError, OverflowError, OSError):
        return str(value)


def format_duration(seconds: float) -> str:
    """Format seconds as M:SS (minutes unpadded)."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def _json_default(value: Any) -> Any:
    if isinstance(value, Fraction):
        return float(value)
    if isinstance(value, bytes):
        return value.hex()
    return str(value)


def format_structured(value: Any) -> str:
    """Pretty-print a structured value with stable key order."""
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False, default=_json_default)


def format_metadata_value(key: str, value: Any) -> str:
    """Return the display string for `value` given its metadata `key`."""
    if key == "size":
        return format_file_size(value)
    if key == "lastModified":
        return format_date(value)
    if key == "duration" and _is_number(value) and math.isfinite(value):
        return format_duration(float(value))
    if key in ("width", "height"):
        if _is_number(value) and float(value).is_integer():
            value = int(value)
        return f"{value}px"
    if isinstance(value, (dict, list, tuple)):
        return format_structured(value)
    if isinstance(value, bytes):
        return f"<{len(value)} bytes>"
    return str(value)


def format_metadata_key(key: str) -> str:
    """Human label for a key: "lastModified" -> "Last Modified"."""
    spaced = _CAPITAL.sub(r" \1", key)
    if spaced:
        spaced = spaced[0].upper() + spaced[1:]
    return spaced.strip()
