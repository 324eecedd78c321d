"""MainWindow: file list, category cards, preview and map hand-off."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QSize, Qt, QUrl, Signal
from PySide6.QtGui import QDesktopServices, QPixmap
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.main_vm import media_file_for_path
from app.viewmodels.record_vm import FileRecordVM
from app.views.batch_tasks import BatchTaskRunner
from app.views.components.menu_controller import MenuController
from app.views.constants import (
    CARD_HEIGHT_PX,
    CARD_WIDTH_PX,
    CATEGORY_ROLE,
    DEFAULT_WINDOW_SIZE,
    FILE_LIST_MIN_WIDTH,
    INDEX_ROLE,
    PREVIEW_MAX_PX,
    WINDOW_TITLE,
)
from app.views.dialogs.category_dialog import CategoryDialog
from app.views.handlers.file_operations import FileOperationsHandler
from infrastructure.logging import open_latest_log, open_log_directory


class MainWindow(QMainWindow):
    """Main application window."""

    batchProgress = Signal(object)  # (total, records)
    batchFinished = Signal(int)  # token

    def __init__(self, vm: Any, settings: Any | None = None, log_dir: str | None = None) -> None:
        """Create the window.

        Args:
            vm: MainVM instance
            settings: Settings instance for configuration
            log_dir: Directory the file log sink writes to
        """
        super().__init__()
        self._vm = vm
        self._settings = settings
        self._log_dir = log_dir
        self._current: FileRecordVM | None = None

        self.status_reporter = StatusReporterImpl(self)
        self.file_operations = FileOperationsHandler(
            vm=self._vm, parent_widget=self, status_reporter=self.status_reporter
        )
        self.menu_controller = MenuController(self)
        self._runner = BatchTaskRunner(vm=self._vm, receiver=self)

        self._setup_ui()
        self._connect_signals()
        self._update_actions()
        self.statusBar().showMessage("Ready", 3000)

    def _setup_ui(self) -> None:
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(*DEFAULT_WINDOW_SIZE)

        self.file_list = QListWidget()
        self.file_list.setMinimumWidth(FILE_LIST_MIN_WIDTH)

        right = QWidget()
        right_layout = QVBoxLayout(right)
        self.title_label = QLabel("Select an image or video file to view its metadata")
        self.title_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #b00020;")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        self.preview_label = QLabel()
        self.preview_label.setAlignment(Qt.AlignCenter)
        self.preview_label.setMaximumHeight(PREVIEW_MAX_PX)

        self.category_list = QListWidget()
        self.category_list.setViewMode(QListView.IconMode)
        self.category_list.setResizeMode(QListView.Adjust)
        self.category_list.setMovement(QListView.Static)
        self.category_list.setGridSize(QSize(CARD_WIDTH_PX + 8, CARD_HEIGHT_PX + 8))
        self.category_list.setWordWrap(True)

        buttons = QHBoxLayout()
        self.btn_map = QPushButton("Show on Map")
        buttons.addStretch(1)
        buttons.addWidget(self.btn_map)

        right_layout.addWidget(self.title_label)
        right_layout.addWidget(self.error_label)
        right_layout.addWidget(self.preview_label)
        right_layout.addWidget(self.category_list, 1)
        right_layout.addLayout(buttons)

        splitter = QSplitter()
        splitter.addWidget(self.file_list)
        splitter.addWidget(right)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self.menu_controller.setup_menus()

    def _connect_signals(self) -> None:
        handlers = {
            "open": self.on_open_files,
            "export_selected": lambda: self.file_operations.export_selected(self._selected_index()),
            "export_all": self.file_operations.export_all,
            "clean_copy": lambda: self.file_operations.save_clean_copy(self._selected_index()),
            "show_map": self.on_show_map,
            "open_latest_log": lambda: open_latest_log(self._log_dir),
            "open_log_directory": lambda: open_log_directory(self._log_dir),
            "exit": self.close,
        }
        self.menu_controller.connect_actions(handlers)
        self.btn_map.clicked.connect(self.on_show_map)
        self.file_list.currentRowChanged.connect(self._on_file_selected)
        self.category_list.itemClicked.connect(self._on_category_activated)
        self.batchProgress.connect(self._on_batch_progress)
        self.batchFinished.connect(self._on_batch_finished)

    # Public API

    def submit_paths(self, paths: list[str]) -> None:
        """Start a new batch over `paths`."""
        if not paths:
            return
        files = [media_file_for_path(p) for p in paths]
        self.file_list.clear()
        self._show_record(None)
        self._runner.submit(files)
        self.statusBar().showMessage(f"Processing {len(files)} files…")
        logger.info("Submitted batch of {} files", len(files))

    def on_open_files(self) -> None:
        """Handle the open-files action."""
        self.submit_paths(self.file_operations.pick_files())

    def on_show_map(self) -> None:
        """Hand the selected record's coordinate to the external map."""
        if self._current is None or self._current.map_url is None:
            return
        QDesktopServices.openUrl(QUrl(self._current.map_url))

    # Slots

    def _on_batch_progress(self, snapshot: tuple[int, list]) -> None:
        total, records = snapshot
        selected = self._selected_index()
        self.file_list.blockSignals(True)
        self.file_list.clear()
        for index, record in enumerate(records):
            label = record.file_name if not record.error else f"⚠ {record.file_name}"
            item = QListWidgetItem(label)
            item.setData(INDEX_ROLE, index)
            self.file_list.addItem(item)
        self.file_list.blockSignals(False)
        if records:
            row = selected if selected is not None and selected < len(records) else 0
            self.file_list.setCurrentRow(row)
        self.statusBar().showMessage(f"Processed {len(records)} / {total} files")
        self._update_actions()

    def _on_batch_finished(self, token: int) -> None:
        if token != self._runner.current_token:
            return
        self.statusBar().showMessage(f"Done: {self._vm.record_count} files", 5000)
        self._update_actions()

    def _on_file_selected(self, row: int) -> None:
        if row < 0 or row >= self._vm.record_count:
            self._show_record(None)
            return
        self._show_record(self._vm.record_at(row))

    def _on_category_activated(self, item: QListWidgetItem) -> None:
        if self._current is None:
            return
        name = item.data(CATEGORY_ROLE)
        for category in self._current.categories:
            if category.name == name:
                dlg = CategoryDialog(category.name, self._current.rows_for(category), self)
                dlg.exec()
                return

    # Internals

    def _selected_index(self) -> int | None:
        row = self.file_list.currentRow()
        return row if row >= 0 else None

    def _show_record(self, rec: FileRecordVM | None) -> None:
        self._current = rec
        self.category_list.clear()
        self.preview_label.clear()
        self.error_label.hide()
        if rec is None:
            self.title_label.setText("Select an image or video file to view its metadata")
            self._update_actions()
            return

        self.title_label.setText(rec.file_name)
        if rec.has_error:
            self.error_label.setText(rec.error_text or "")
            self.error_label.show()
        else:
            for category in rec.categories:
                text = f"{category.name}\n{category.count} items\n{category.preview}"
                item = QListWidgetItem(text)
                item.setData(CATEGORY_ROLE, category.name)
                item.setSizeHint(QSize(CARD_WIDTH_PX, CARD_HEIGHT_PX))
                item.setToolTip(f"View {category.name} metadata ({category.count} items)")
                self.category_list.addItem(item)

        preview = rec.preview_path
        if preview and rec.record.file.media_kind == "image":
            pixmap = QPixmap(preview)
            if not pixmap.isNull():
                self.preview_label.setPixmap(
                    pixmap.scaled(PREVIEW_MAX_PX, PREVIEW_MAX_PX, Qt.KeepAspectRatio)
                )
        self._update_actions()

    def _update_actions(self) -> None:
        has_map = self._current is not None and self._current.map_marker is not None
        self.btn_map.setVisible(has_map)
        self.menu_controller.set_record_actions_enabled(self._current is not None, has_map)
        self.menu_controller.set_batch_actions_enabled(self._vm.record_count > 0)

    def closeEvent(self, event) -> None:
        """Stop background work and release every preview before closing."""
        try:
            self._runner.shutdown()
            self._vm.close()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("Close event handler failed: {}", ex)
        event.accept()


class StatusReporterImpl:
    """Implementation of StatusReporter protocol."""

    def __init__(self, main_window: QMainWindow):
        self.window = main_window

    def show_status(self, message: str, timeout: int = 3000) -> None:
        """Show status message in status bar."""
        self.window.statusBar().showMessage(message, timeout)
