"""JSON export of file records.

Each record serializes as `{fileName, metadata, gpsData, error}`; absent GPS
data and absent errors are written as null.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from fractions import Fraction
import json
from typing import Any

from core.models import FileRecord


def _json_default(value: Any) -> Any:
    """Fallback encoder for decoder values (rationals, bytes, dates)."""
    if isinstance(value, Fraction):
        return float(value)
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.hex()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def record_to_dict(record: FileRecord) -> dict[str, Any]:
    """Portable mapping for one record."""
    return {
        "fileName": record.file_name,
        "metadata": record.metadata,
        "gpsData": record.gps.to_dict() if record.gps is not None else None,
        "error": record.error,
    }


def export_record_json(record: FileRecord) -> str:
    """Serialize one record."""
    return json.dumps(record_to_dict(record), indent=2, ensure_ascii=False, default=_json_default)


def export_batch_json(records: Iterable[FileRecord]) -> str:
    """Serialize every record, preserving batch order."""
    payload = [record_to_dict(r) for r in records]
    return json.dumps(payload, indent=2, ensure_ascii=False, default=_json_default)


def single_export_name(record: FileRecord, today: date | None = None) -> str:
    """Suggested file name for a single-record export."""
    stamp = (today or date.today()).isoformat()
    return f"{record.file_name}_metadata_{stamp}.json"


def batch_export_name(today: date | None = None) -> str:
    """Suggested file name for a batch export."""
    stamp = (today or date.today()).isoformat()
    return f"metadata_batch_{stamp}.json"
