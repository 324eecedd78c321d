"""Sequential batch processing with incremental publication.

The pipeline owns exactly one active `BatchState`. Submitting a batch first
releases the previous state's preview handles, then processes files one at a
time in input order, publishing the state after every file.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence

from loguru import logger

from core.models import BatchState, FileRecord, MediaFile, PreviewHandle
from core.services.extractor import MetadataExtractor
from core.services.interfaces import PreviewProvider

BatchListener = Callable[[BatchState], None]


class BatchPipeline:
    """Drives a `MetadataExtractor` over ordered file lists."""

    def __init__(
        self, extractor: MetadataExtractor, previews: PreviewProvider | None = None
    ) -> None:
        self._extractor = extractor
        self._previews = previews
        self._state = BatchState()
        self._listeners: list[BatchListener] = []

    @property
    def state(self) -> BatchState:
        """The active batch."""
        return self._state

    def subscribe(self, listener: BatchListener) -> Callable[[], None]:
        """Register a progress listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def submit(self, files: Sequence[MediaFile]) -> BatchState:
        """Replace the active batch with `files` and process them in order.

        Returns the batch's state. If another submission replaces this batch
        while it runs, processing stops after the file in flight.
        """
        released = self._state.release_previews()
        if released:
            logger.debug("Released {} preview handles from previous batch", released)
        state = BatchState(total=len(files))
        self._state = state
        logger.info("Batch started with {} files", len(files))
        self._publish(state)

        for index, media_file in enumerate(files):
            record = await self._process(media_file)
            preview = await self._acquire_preview(media_file)
            if self._state is not state:
                if preview is not None:
                    preview.release()
                logger.info("Batch superseded after {} of {} files", index, len(files))
                return state
            record.preview = preview
            state.records.append(record)
            self._publish(state)

        logger.info(
            "Batch finished: {} files, {} errors",
            len(state),
            sum(1 for r in state if r.error),
        )
        return state

    def close(self) -> None:
        """Tear down: release all previews and drop the active batch."""
        released = self._state.release_previews()
        logger.debug("Pipeline closed, released {} preview handles", released)
        self._state = BatchState()

    async def _process(self, media_file: MediaFile) -> FileRecord:
        try:
            return await self._extractor.extract(media_file)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected failure extracting {}: {}", media_file.name, ex)
            return FileRecord(file=media_file, error=str(ex) or type(ex).__name__)

    async def _acquire_preview(self, media_file: MediaFile) -> PreviewHandle | None:
        if self._previews is None or media_file.media_kind is None:
            return None
        try:
            return await asyncio.to_thread(self._previews.acquire, media_file)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Preview unavailable for {}: {}", media_file.name, ex)
            return None

    def _publish(self, state: BatchState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as ex:  # pylint: disable=broad-exception-caught
                logger.error("Batch listener failed: {}", ex)

    def __enter__(self) -> BatchPipeline:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()
