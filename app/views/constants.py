"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

from core.models import SORT_DATE, SORT_NAME, SORT_SIZE, SORT_TYPE

WINDOW_TITLE: str = "Photo Browser"
VIEWER_TITLE: str = "Image Viewer"

# Sort combo entries: (label, key)
SORT_CHOICES: list[tuple[str, str]] = [
    ("Name", SORT_NAME),
    ("Type", SORT_TYPE),
    ("Date", SORT_DATE),
    ("Size", SORT_SIZE),
]
ARROW_ASC: str = "↑"
ARROW_DESC: str = "↓"

# Data roles
PATH_ROLE: int = Qt.UserRole  # full path on folder tree items
LOADED_ROLE: int = Qt.UserRole + 1  # children fetched for folder tree item

# Grid defaults
DEFAULT_THUMB_SIZE: int = 160  # overridable by settings.json
GRID_MIN_THUMB_PX: int = 100
GRID_SPACING_PX: int = 8
GRID_MARGIN_RATIO: float = 0.02

# Viewer defaults
DEFAULT_VIEWER_WIDTH: int = 1024
DEFAULT_VIEWER_HEIGHT: int = 768
OVERLAY_BACKGROUND: str = "background-color: rgba(0, 0, 0, 190);"
OVERLAY_HINT: str = "Use arrow keys to navigate and zoom. Scroll to change images."
