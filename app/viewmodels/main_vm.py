"""ViewModel orchestrating batch extraction, export and clean copies."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Sequence
import mimetypes
from pathlib import Path

from loguru import logger

from app.viewmodels.record_vm import FileRecordVM
from core.models import BatchState, FileRecord, MediaFile
from core.services.batch_pipeline import BatchPipeline
from core.services.classifier import MetadataClassifier
from core.services.export_service import (
    batch_export_name,
    export_batch_json,
    export_record_json,
    single_export_name,
)
from core.services.interfaces import SaveTarget
from infrastructure.sanitize_service import SanitizeService


def media_file_for_path(path: str | Path) -> MediaFile:
    """Build a handle for `path`; unreadable paths still yield a handle."""
    p = Path(path)
    try:
        return MediaFile.from_path(p)
    except OSError as ex:
        logger.warning("Cannot stat {}: {}", p, ex)
        mime, _ = mimetypes.guess_type(p.name)
        return MediaFile(name=p.name, size=0, type=mime or "", last_modified=0, path=p)


class MainVM:
    """Main application view-model.

    Owns the `BatchPipeline` and exposes index-addressed records to views.
    """

    def __init__(
        self,
        pipeline: BatchPipeline,
        sanitizer: SanitizeService | None = None,
        save_target: SaveTarget | None = None,
        classifier: MetadataClassifier | None = None,
    ) -> None:
        """Create a MainVM.

        Args:
            pipeline: Batch pipeline doing the extraction.
            sanitizer: Service producing metadata-stripped copies.
            save_target: Persistence collaborator for exports.
            classifier: Category builder shared by record view models.
        """
        self._pipeline = pipeline
        self._sanitizer = sanitizer
        self._save_target = save_target
        self._classifier = classifier or MetadataClassifier()

    @property
    def state(self) -> BatchState:
        """The active batch."""
        return self._pipeline.state

    @property
    def records(self) -> list[FileRecord]:
        """Records of the active batch, in input order."""
        return list(self._pipeline.state.records)

    @property
    def record_count(self) -> int:
        """Number of records currently available."""
        return len(self._pipeline.state)

    def set_save_target(self, save_target: SaveTarget) -> None:
        """Swap the persistence collaborator (e.g. for a dialog-backed one)."""
        self._save_target = save_target

    def subscribe(self, listener: Callable[[BatchState], None]) -> Callable[[], None]:
        """Receive the batch state after every processed file."""
        return self._pipeline.subscribe(listener)

    async def submit(self, files: Sequence[MediaFile]) -> BatchState:
        """Run a new batch over `files`."""
        return await self._pipeline.submit(files)

    def load_paths(self, paths: Iterable[str | Path]) -> BatchState:
        """Synchronously process files on disk as a new batch."""
        files = [media_file_for_path(p) for p in paths]
        return asyncio.run(self.submit(files))

    def record_at(self, index: int) -> FileRecordVM:
        """View model for the record at `index`."""
        return FileRecordVM(self._pipeline.state[index], classifier=self._classifier)

    def export_record(self, index: int) -> str | None:
        """Export one record as JSON through the save target."""
        record = self._pipeline.state[index]
        data = export_record_json(record).encode("utf-8")
        path = self._require_target().save(data, single_export_name(record))
        logger.info("Exported metadata for {}: {}", record.file_name, path)
        return path

    def export_batch(self) -> str | None:
        """Export every record of the active batch as one JSON array."""
        records = self.records
        data = export_batch_json(records).encode("utf-8")
        path = self._require_target().save(data, batch_export_name())
        logger.info("Exported batch of {} records: {}", len(records), path)
        return path

    def save_clean_copy(self, index: int) -> str | None:
        """Write a metadata-stripped copy of the file at `index`."""
        if self._sanitizer is None:
            raise RuntimeError("No sanitizer configured")
        record = self._pipeline.state[index]
        return self._sanitizer.save_clean_copy(record.file, self._save_target)

    def close(self) -> None:
        """Release all resources held by the active batch."""
        self._pipeline.close()

    def _require_target(self) -> SaveTarget:
        if self._save_target is None:
            raise RuntimeError("No save target configured")
        return self._save_target
