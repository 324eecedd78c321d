"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

WINDOW_TITLE: str = "Media Metadata Viewer"

# Data roles
INDEX_ROLE: int = Qt.UserRole  # batch index stored on file list items
CATEGORY_ROLE: int = Qt.UserRole + 1  # category name stored on card items

# File dialog filters
OPEN_FILTER: str = (
    "Media Files (*.jpg *.jpeg *.png *.gif *.webp *.tif *.tiff *.heic *.heif "
    "*.mp4 *.mov *.webm *.avi *.mkv);;All Files (*)"
)
JSON_FILTER: str = "JSON Files (*.json)"

# Layout defaults
DEFAULT_WINDOW_SIZE: tuple[int, int] = (1100, 720)
FILE_LIST_MIN_WIDTH: int = 260
PREVIEW_MAX_PX: int = 320
CARD_WIDTH_PX: int = 220
CARD_HEIGHT_PX: int = 96
