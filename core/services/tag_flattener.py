"""Flatten decoder tag records into a display-ready metadata map."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core.models import FlatMetadata, RawTagRecord


def resolve_tag_value(record: Any) -> Any:
    """Pick the displayable value of one tag record.

    Priority: description, then value, then the record itself for bare
    scalars that the decoder returned unwrapped.
    """
    if isinstance(record, RawTagRecord):
        if record.description is not None:
            return record.description
        return record.value
    if isinstance(record, Mapping):
        if "description" in record and record["description"] is not None:
            return record["description"]
        if "value" in record:
            return record["value"]
    return record


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def flatten_tags(
    tags: Mapping[str, Any] | None, intrinsic: Mapping[str, Any] | None = None
) -> FlatMetadata:
    """Merge intrinsic fields and resolved tags into one flat map.

    Intrinsic fields go in first; a tag claiming the same key replaces them.
    Absent, None and empty-string values are never inserted.
    """
    flat: FlatMetadata = {}
    for key, value in (intrinsic or {}).items():
        if not _is_empty(value):
            flat[str(key)] = value
    for key, record in (tags or {}).items():
        value = resolve_tag_value(record)
        if _is_empty(value):
            continue
        flat[str(key)] = value
    return flat
