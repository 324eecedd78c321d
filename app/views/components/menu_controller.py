"""MenuController: Manages menu creation and action connections."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QMenuBar

# (menu title, [(action key, label) or None for a separator])
MENU_LAYOUT: list[tuple[str, list[tuple[str, str] | None]]] = [
    (
        "File",
        [
            ("open", "Open Files…"),
            None,
            ("export_selected", "Export Selected Metadata…"),
            ("export_all", "Export All Metadata…"),
            ("clean_copy", "Save Copy Without Metadata…"),
            None,
            ("exit", "Exit"),
        ],
    ),
    ("View", [("show_map", "Show Location on Map")]),
    (
        "Log",
        [
            ("open_latest_log", "Open Latest Log"),
            None,
            ("open_log_directory", "Open Log Directory"),
        ],
    ),
]


class MenuController:
    """Manages main window menu creation and action connections."""

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to create menus for
        """
        self.window = main_window
        self.actions: dict[str, QAction] = {}

    def setup_menus(self) -> dict[str, QAction]:
        """Create all menus and return action references."""
        menubar = QMenuBar(self.window)
        for title, entries in MENU_LAYOUT:
            menu = menubar.addMenu(title)
            for entry in entries:
                if entry is None:
                    menu.addSeparator()
                    continue
                key, label = entry
                self.actions[key] = menu.addAction(label)
        self.window.setMenuBar(menubar)
        return self.actions

    def connect_actions(self, handlers: dict[str, Callable]) -> None:
        """Connect menu actions to their handler methods.

        Args:
            handlers: Dictionary mapping action names to handler callables
        """
        for key, handler in handlers.items():
            action = self.actions.get(key)
            if action is not None:
                action.triggered.connect(handler)

    def set_record_actions_enabled(self, has_record: bool, has_map: bool) -> None:
        """Enable actions that need a selected record / coordinate."""
        for key in ("export_selected", "clean_copy"):
            if key in self.actions:
                self.actions[key].setEnabled(has_record)
        if "show_map" in self.actions:
            self.actions["show_map"].setEnabled(has_map)

    def set_batch_actions_enabled(self, has_records: bool) -> None:
        """Enable actions that need a non-empty batch."""
        if "export_all" in self.actions:
            self.actions["export_all"].setEnabled(has_records)
