"""Per-file metadata extraction.

Combines the media reader, tag decoder, flattener and GPS resolver into one
`FileRecord`. Every failure is captured on the record; `extract` never raises.
Blocking decode calls run in worker threads so the caller suspends on them.
"""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from core.errors import MediaDecodeError
from core.models import FileRecord, FlatMetadata, MediaFile
from core.services.gps_resolver import GpsResolver
from core.services.interfaces import MediaProperties, MediaReader, TagDecoder
from core.services.tag_flattener import flatten_tags

UNSUPPORTED_TYPE_ERROR = "Unsupported file type. Please select an image or video file."


def file_base_info(media_file: MediaFile) -> dict[str, Any]:
    """Intrinsic file fields merged into every record."""
    return {
        "name": media_file.name,
        "size": media_file.size,
        "type": media_file.type,
        "lastModified": media_file.last_modified_iso,
    }


def _media_fields(props: MediaProperties) -> dict[str, Any]:
    fields: dict[str, Any] = {"width": props.width, "height": props.height}
    if props.duration is not None:
        fields["duration"] = props.duration
    return fields


class MetadataExtractor:
    """Produce one `FileRecord` per input file."""

    def __init__(
        self,
        tag_decoder: TagDecoder,
        media_reader: MediaReader,
        gps_resolver: GpsResolver | None = None,
    ) -> None:
        self._decoder = tag_decoder
        self._reader = media_reader
        self._gps = gps_resolver or GpsResolver()

    async def extract(self, media_file: MediaFile) -> FileRecord:
        """Extract metadata for `media_file`, isolating any failure."""
        kind = media_file.media_kind
        try:
            if kind == "image":
                record = await self._extract_image(media_file)
            elif kind == "video":
                record = await self._extract_video(media_file)
            else:
                logger.info("Unsupported file type {!r} for {}", media_file.type, media_file.name)
                return FileRecord(file=media_file, error=UNSUPPORTED_TYPE_ERROR)
        except MediaDecodeError as ex:
            logger.warning("Decode failed for {}: {}", media_file.name, ex)
            return FileRecord(file=media_file, error=str(ex))
        except OSError as ex:
            logger.warning("Read failed for {}: {}", media_file.name, ex)
            return FileRecord(file=media_file, error=str(ex))

        logger.info(
            "Extracted {} fields from {} (gps={})",
            len(record.metadata or {}),
            media_file.name,
            record.gps is not None,
        )
        return record

    async def _extract_image(self, media_file: MediaFile) -> FileRecord:
        data = await asyncio.to_thread(media_file.read_bytes)
        props = await asyncio.to_thread(self._reader.read_image, data)
        base = {**file_base_info(media_file), **_media_fields(props)}

        try:
            tags = await asyncio.to_thread(self._decoder.decode, data)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Tag parsing failed for {}: {}", media_file.name, ex)
            return FileRecord(file=media_file, metadata=flatten_tags(None, base))

        metadata: FlatMetadata = flatten_tags(tags, base)
        return FileRecord(file=media_file, metadata=metadata, gps=self._gps.resolve(tags))

    async def _extract_video(self, media_file: MediaFile) -> FileRecord:
        props = await asyncio.to_thread(self._reader.read_video, media_file)
        base = {**file_base_info(media_file), **_media_fields(props)}
        return FileRecord(file=media_file, metadata=flatten_tags(None, base))
