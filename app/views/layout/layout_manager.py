"""LayoutManager: Manages main window layout and splitter behavior."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QMainWindow,
    QSplitter,
    QVBoxLayout,
    QWidget,
)


class LayoutManager:
    """Manages main window layout and splitter behavior.

    The window is split into a folder sidebar (left) and the grid (right).
    """

    SIDEBAR_STRETCH_FACTOR = 1
    GRID_STRETCH_FACTOR = 3
    MIN_SIDEBAR_WIDTH = 200
    WINDOW_SIZE_RATIO = 0.7

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to manage layout for
        """
        self.window = main_window
        self.splitter: QSplitter | None = None

    def create_sidebar_section(self) -> tuple[QWidget, QVBoxLayout]:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        return widget, layout

    def create_grid_section(self) -> tuple[QWidget, QVBoxLayout]:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        return widget, layout

    def setup_main_layout(self, sidebar: QWidget, grid_section: QWidget) -> QWidget:
        """Create the main horizontal splitter layout.

        Args:
            sidebar: Widget containing the folder selector and tree
            grid_section: Widget containing sort controls and the grid

        Returns:
            Central widget configured with the layout
        """
        central = QWidget(self.window)
        root = QHBoxLayout(central)

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.addWidget(sidebar)
        self.splitter.addWidget(grid_section)
        self.splitter.setStretchFactor(0, self.SIDEBAR_STRETCH_FACTOR)
        self.splitter.setStretchFactor(1, self.GRID_STRETCH_FACTOR)
        sidebar.setMinimumWidth(self.MIN_SIDEBAR_WIDTH)

        root.addWidget(self.splitter)
        return central

    def setup_initial_window_size(self) -> None:
        """Setup initial window size based on screen dimensions."""
        try:
            screen = QApplication.primaryScreen()
            if screen is not None:
                rect = screen.availableGeometry()
                width = int(rect.width() * self.WINDOW_SIZE_RATIO)
                height = int(rect.height() * self.WINDOW_SIZE_RATIO)
                self.window.resize(width, height)
        except Exception:
            pass
