from __future__ import annotations

from PySide6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
)


class CategoryDialog(QDialog):
    """Read-only table of one category's formatted fields."""

    def __init__(self, title: str, rows: list[tuple[str, str]], parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        self.resize(560, 420)

        root = QVBoxLayout(self)
        root.addWidget(QLabel(f"{title} ({len(rows)} items)"))

        self.table = QTableWidget(len(rows), 2)
        self.table.setHorizontalHeaderLabels(["Field", "Value"])
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setWordWrap(True)
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.Stretch)
        for row, (label, value) in enumerate(rows):
            self.table.setItem(row, 0, QTableWidgetItem(label))
            self.table.setItem(row, 1, QTableWidgetItem(value))
        self.table.resizeRowsToContents()
        root.addWidget(self.table)

        btns = QHBoxLayout()
        btns.addStretch(1)
        self.btn_close = QPushButton("Close")
        btns.addWidget(self.btn_close)
        root.addLayout(btns)
        self.btn_close.clicked.connect(self.accept)
