from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.main_vm import MainVM
from app.views.handlers.file_operations import DialogSaveTarget
from app.views.main_window import MainWindow
from core.services.batch_pipeline import BatchPipeline
from core.services.extractor import MetadataExtractor
from core.services.gps_resolver import GpsResolver
from infrastructure.file_store import DirectorySaveTarget
from infrastructure.logging import init_logging
from infrastructure.media_reader import MediaPropertyReader
from infrastructure.preview_service import PreviewService
from infrastructure.sanitize_service import SanitizeService
from infrastructure.settings import JsonSettings
from infrastructure.tag_decoder import ExifreadTagDecoder

BASE_DIR = Path(__file__).parent


def build_vm(settings: JsonSettings) -> tuple[MainVM, PreviewService]:
    """Wire adapters, services and the view-model from settings."""
    extractor = MetadataExtractor(
        tag_decoder=ExifreadTagDecoder(),
        media_reader=MediaPropertyReader(),
        gps_resolver=GpsResolver(
            negate_raw_longitude=settings.get_bool("gps.legacy_negate_raw_longitude", False)
        ),
    )
    previews = PreviewService(
        max_side=settings.get_int("preview.max_side", 512),
        temp_dir=settings.get("preview.temp_dir") or None,
    )
    pipeline = BatchPipeline(extractor, previews)
    save_target = DirectorySaveTarget(settings.get("export.directory") or "~/Downloads")
    vm = MainVM(pipeline, sanitizer=SanitizeService(), save_target=save_target)
    return vm, previews


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    log_dir = init_logging(
        settings.get("logging.dir") or None, settings.get("logging.level", "INFO")
    )

    app = QApplication(sys.argv)

    vm, previews = build_vm(settings)
    win = MainWindow(vm=vm, settings=settings, log_dir=str(log_dir))
    vm.set_save_target(
        DialogSaveTarget(win, start_dir=settings.get("export.directory") or "")
    )
    win.show()

    initial = [a for a in sys.argv[1:] if not a.startswith("-")]
    if initial:
        logger.info("Opening {} files from the command line", len(initial))
        win.submit_paths(initial)

    try:
        return app.exec()
    finally:
        vm.close()
        previews.close()


if __name__ == "__main__":
    raise SystemExit(main())
