from __future__ import annotations

import asyncio
from collections.abc import Sequence
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
import threading
from typing import Any

from PySide6.QtCore import QObject
from loguru import logger

from core.models import BatchState, MediaFile


class BatchTaskRunner:
    """Runs batches on one background asyncio loop.

    All batches share the loop, so files are processed one at a time. A newer
    submission replaces the active batch at once; the running one stops after
    the file it is extracting and previewing has finished.

    Emits `receiver.batchProgress(snapshot)` after every published state, where
    snapshot is `(total, records)`, and `receiver.batchFinished(token)` when a
    submission returns. The receiver is expected to own matching Qt signals.
    """

    def __init__(self, *, vm: Any, receiver: QObject) -> None:
        self._vm = vm
        self._receiver = receiver
        self._token = 0
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever, name="batch-pipeline", daemon=True
        )
        self._thread.start()
        self._unsubscribe = vm.subscribe(self._forward)

    @property
    def current_token(self) -> int:
        """Token of the most recently submitted batch."""
        return self._token

    def submit(self, files: Sequence[MediaFile]) -> int:
        """Schedule a batch; returns its token."""
        self._token += 1
        token = self._token
        future = asyncio.run_coroutine_threadsafe(self._vm.submit(list(files)), self._loop)
        future.add_done_callback(lambda f: self._finished(token, f))
        return token

    def shutdown(self, timeout: float = 5.0) -> None:
        """Tear the pipeline down and stop the loop thread.

        The active batch is closed on the loop thread first, so a submission
        still in flight releases the preview of its current file and returns
        before the loop stops.
        """
        if self._loop.is_closed():
            return
        self._unsubscribe()
        drain = asyncio.run_coroutine_threadsafe(self._drain(), self._loop)
        try:
            drain.result(timeout)
        except FutureTimeoutError:
            logger.warning("Batch still running after {}s, stopping anyway", timeout)
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        if not self._thread.is_alive():
            self._loop.close()

    async def _drain(self) -> None:
        self._vm.close()
        current = asyncio.current_task()
        pending = [t for t in asyncio.all_tasks() if t is not current]
        if pending:
            logger.debug("Waiting for {} running batches to stop", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)
        await self._loop.shutdown_default_executor()

    def _forward(self, state: BatchState) -> None:
        # Snapshot so the GUI thread never sees the list mid-append
        snapshot = (state.total, list(state.records))
        try:
            self._receiver.batchProgress.emit(snapshot)  # type: ignore[attr-defined]
        except RuntimeError:  # pragma: no cover - receiver already destroyed
            pass

    def _finished(self, token: int, future: Future) -> None:
        if not future.cancelled() and future.exception() is not None:
            logger.error("Batch {} failed: {}", token, future.exception())
        try:
            self._receiver.batchFinished.emit(token)  # type: ignore[attr-defined]
        except RuntimeError:  # pragma: no cover - receiver already destroyed
            pass
