"""Exception hierarchy shared by services and infrastructure adapters."""

from __future__ import annotations


class MetadataViewerError(Exception):
    """Base exception for all metadata viewer errors."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


class MediaDecodeError(MetadataViewerError):
    """Raised when an image or video cannot be decoded at all."""


class TagDecodeError(MetadataViewerError):
    """Raised when embedded tags cannot be parsed from otherwise valid media."""


class PreviewError(MetadataViewerError):
    """Raised on preview handle misuse, e.g. releasing the same handle twice."""


class SanitizeError(MetadataViewerError):
    """Raised when a metadata-stripped copy cannot be produced."""
