from pathlib import Path
import threading
import time

from fakes import image_file

from app.viewmodels.main_vm import MainVM
from app.views.batch_tasks import BatchTaskRunner
from core.models import PreviewHandle
from core.services.batch_pipeline import BatchPipeline


class Signal:
    def __init__(self):
        self.emitted = []

    def emit(self, value):
        self.emitted.append(value)


class Receiver:
    def __init__(self):
        self.batchProgress = Signal()
        self.batchFinished = Signal()


class SlowPreviews:
    """Preview provider that takes a while, like a large thumbnail."""

    def __init__(self, delay=0.3):
        self.delay = delay
        self.started = threading.Event()
        self.issued = []
        self._lock = threading.Lock()

    def acquire(self, media_file):
        self.started.set()
        time.sleep(self.delay)
        handle = PreviewHandle(Path("/previews") / media_file.name)
        with self._lock:
            self.issued.append(handle)
        return handle


def test_shutdown_mid_batch_releases_every_preview(extractor):
    previews = SlowPreviews()
    vm = MainVM(BatchPipeline(extractor, previews))
    receiver = Receiver()
    runner = BatchTaskRunner(vm=vm, receiver=receiver)

    token = runner.submit([image_file("a.jpg"), image_file("b.jpg")])
    assert previews.started.wait(5)
    runner.shutdown()
    vm.close()

    assert previews.issued
    assert all(h.released for h in previews.issued)
    assert receiver.batchFinished.emitted == [token]


def test_shutdown_after_finished_batch(extractor):
    previews = SlowPreviews(delay=0)
    vm = MainVM(BatchPipeline(extractor, previews))
    receiver = Receiver()
    runner = BatchTaskRunner(vm=vm, receiver=receiver)

    done = threading.Event()
    vm.subscribe(lambda state: done.set() if len(state) == 2 else None)
    runner.submit([image_file("a.jpg"), image_file("b.jpg")])
    assert done.wait(5)

    runner.shutdown()
    runner.shutdown()
    assert len(previews.issued) == 2
    assert all(h.released for h in previews.issued)
    assert vm.record_count == 0
