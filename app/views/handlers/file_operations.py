"""FileOperationsHandler: open, export and clean-copy workflows with dialogs."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from PySide6.QtWidgets import QFileDialog, QMessageBox, QWidget
from loguru import logger

from app.views.constants import JSON_FILTER, OPEN_FILTER
from core.errors import MetadataViewerError


class StatusReporter(Protocol):
    """Protocol for status reporting callback."""

    def show_status(self, message: str, timeout: int = 3000) -> None:
        """Show status message."""
        ...


class DialogSaveTarget:
    """Save-as collaborator backed by a native save dialog."""

    def __init__(self, parent: QWidget, start_dir: str | Path = "") -> None:
        self._parent = parent
        self._start_dir = Path(start_dir).expanduser() if start_dir else Path.home()

    def save(self, data: bytes, suggested_name: str) -> str | None:
        """Ask for a location and write `data`; None if the user cancels."""
        name_filter = JSON_FILTER if suggested_name.lower().endswith(".json") else "All Files (*)"
        path, _ = QFileDialog.getSaveFileName(
            self._parent, "Save As", str(self._start_dir / suggested_name), name_filter
        )
        if not path:
            return None
        with open(path, "wb") as f:
            f.write(data)
        self._start_dir = Path(path).parent
        logger.info("Saved {} bytes to {}", len(data), path)
        return path


class FileOperationsHandler:
    """Handles user-triggered file workflows.

    This class encapsulates:
    - Picking input files
    - Single and batch metadata export
    - Metadata-stripped copies
    """

    def __init__(
        self,
        vm: Any,
        parent_widget: QWidget,
        status_reporter: StatusReporter,
    ) -> None:
        """Initialize with required services and callbacks.

        Args:
            vm: MainVM instance
            parent_widget: Parent widget for dialogs
            status_reporter: Callback for status messages
        """
        self.vm = vm
        self.parent = parent_widget
        self.status_reporter = status_reporter

    def pick_files(self) -> list[str]:
        """Show an open dialog and return the chosen paths."""
        paths, _ = QFileDialog.getOpenFileNames(self.parent, "Open Media Files", "", OPEN_FILTER)
        return list(paths)

    def export_selected(self, index: int | None) -> None:
        """Export the selected record as JSON."""
        if index is None:
            QMessageBox.information(self.parent, "Export", "Select a file first.")
            return
        self._run("Export", lambda: self.vm.export_record(index))

    def export_all(self) -> None:
        """Export every record of the batch as JSON."""
        if not self.vm.record_count:
            QMessageBox.information(self.parent, "Export", "No data to export.")
            return
        self._run("Export", self.vm.export_batch)

    def save_clean_copy(self, index: int | None) -> None:
        """Write a copy of the selected file without embedded metadata."""
        if index is None:
            QMessageBox.information(self.parent, "Clean Copy", "Select a file first.")
            return
        record = self.vm.record_at(index).record
        if record.file.media_kind == "video":
            QMessageBox.warning(
                self.parent,
                "Clean Copy",
                "Metadata removal is not supported for video files.\n"
                "The saved copy will be identical to the original.",
            )
        self._run("Clean Copy", lambda: self.vm.save_clean_copy(index))

    def _run(self, title: str, action) -> None:
        try:
            path = action()
        except (MetadataViewerError, OSError, RuntimeError) as ex:
            logger.exception("{} failed: {}", title, ex)
            QMessageBox.critical(self.parent, f"{title} Error", str(ex))
            self.status_reporter.show_status(f"{title} failed")
            return
        if path is None:
            self.status_reporter.show_status(f"{title} cancelled")
            return
        self.status_reporter.show_status(f"Saved {path}")
