"""MainWindow: folder sidebar, sorted thumbnail grid and the expanded-image overlay.

The window only renders; every decision (sorting, click resolution, focus,
zoom, clone spawning) lives in `MainVM`.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtWidgets import QMainWindow, QPushButton, QTreeView, QVBoxLayout, QWidget
from loguru import logger

from app.viewmodels.main_vm import (
    ERROR,
    EXPANDED_CHANGED,
    FILES_CHANGED,
    FOLDER_CHANGED,
    SORT_CHANGED,
    ZOOM_CHANGED,
    MainVM,
)
from app.views.components.folder_tree import FolderTreeController
from app.views.components.menu_controller import MenuController
from app.views.components.sort_controls import SortControls
from app.views.constants import WINDOW_TITLE
from app.views.expanded_image import ExpandedImage
from app.views.image_grid import ImageGrid
from app.views.layout.layout_manager import LayoutManager
from infrastructure.logging import open_latest_log, open_log_directory


class MainWindow(QMainWindow):
    """Main browsing window."""

    def __init__(
        self,
        vm: MainVM,
        service: Any,
        runner: Any,
        image_service: Any,
        settings: Any | None = None,
    ) -> None:
        """Initialize MainWindow with all services and components.

        Args:
            vm: Session view-model of this window
            service: Directory service (folder tree listing)
            runner: Task runner for background work
            image_service: Image loader for thumbnails and previews
            settings: Settings instance for configuration
        """
        super().__init__()
        self._vm = vm
        self._service = service
        self._runner = runner
        self._img = image_service
        self._settings = settings

        self._thumb_size: int | None = None
        if self._settings is not None:
            self._thumb_size = self._settings.get_int("grid.thumb_size", 160)

        self._setup_components()
        self._setup_ui()
        self._connect_signals()
        self.statusBar().showMessage("Ready", 3000)

    def _setup_components(self) -> None:
        self.tree = QTreeView()
        self.tree_controller = FolderTreeController(
            self.tree, self._service, self._runner, self._vm.set_folder
        )
        self.menu_controller = MenuController(self)
        self.layout_manager = LayoutManager(self)

    def _setup_ui(self) -> None:
        self.setWindowTitle(WINDOW_TITLE)

        sidebar, sidebar_layout = self.layout_manager.create_sidebar_section()
        self.select_button = QPushButton("Select Folder")
        sidebar_layout.addWidget(self.select_button)
        self.tree_controller.setup_tree_properties()
        sidebar_layout.addWidget(self.tree, 1)

        grid_section, grid_layout = self.layout_manager.create_grid_section()
        self.sort_controls = SortControls(self._vm.set_sort_key, self._vm.set_sort_order)
        self.sort_controls.set_spec(self._vm.sort_spec)
        grid_layout.addWidget(self.sort_controls)

        self.grid_host = QWidget()
        host_layout = QVBoxLayout(self.grid_host)
        host_layout.setContentsMargins(0, 0, 0, 0)
        self.grid = ImageGrid(
            self._runner, self._img, self._vm.click_item, thumb_size=self._thumb_size
        )
        host_layout.addWidget(self.grid)
        grid_layout.addWidget(self.grid_host, 1)

        self.overlay = ExpandedImage(
            self.grid_host,
            self._runner,
            self._img,
            on_close=self._vm.close_expanded,
            on_next=self._vm.next_image,
            on_prev=self._vm.prev_image,
            on_zoom_in=self._vm.zoom_in,
            on_zoom_out=self._vm.zoom_out,
        )

        central = self.layout_manager.setup_main_layout(sidebar, grid_section)
        self.setCentralWidget(central)
        self.layout_manager.setup_initial_window_size()
        self.menu_controller.setup_menus()

    def _connect_signals(self) -> None:
        handlers = {
            "select_folder": self._vm.select_folder,
            "refresh": self._vm.load_directory,
            "open_in_window": self._open_expanded_in_window,
            "toggle_order": self._vm.toggle_sort_order,
            "open_latest_log": open_latest_log,
            "open_log_directory": open_log_directory,
            "exit": self.close,
        }
        self.menu_controller.connect_actions(handlers)
        self.select_button.clicked.connect(self._vm.select_folder)
        self._unsubscribe = self._vm.subscribe(self._on_vm_changed)

    def start(self) -> None:
        """Load tree roots and resolve the startup folder."""
        self.tree_controller.load_roots()
        self._vm.initialize()

    # View-model notifications

    def _on_vm_changed(self, change: str) -> None:
        if change == FOLDER_CHANGED:
            self.tree_controller.highlight(self._vm.current_path)
            self.statusBar().showMessage(f"Loading {self._vm.current_path}…")
        elif change == FILES_CHANGED:
            self.grid.show_entries(self._vm.files)
            self.statusBar().showMessage(
                f"{self._vm.current_path} ({len(self._vm.files)} items)", 3000
            )
        elif change == SORT_CHANGED:
            self.sort_controls.set_spec(self._vm.sort_spec)
        elif change == EXPANDED_CHANGED:
            self._sync_overlay()
        elif change == ZOOM_CHANGED:
            self.overlay.set_zoom(self._vm.zoom_factor)
        elif change == ERROR:
            self.statusBar().showMessage(self._vm.last_error or "Error", 5000)

    def _sync_overlay(self) -> None:
        entry = self._vm.grid.expanded_entry
        self.menu_controller.enable_action("open_in_window", entry is not None)
        if entry is None:
            self.overlay.close_overlay()
        else:
            self.overlay.open(entry.path, self._vm.zoom_factor)

    def _open_expanded_in_window(self) -> None:
        entry = self._vm.grid.expanded_entry
        if entry is not None:
            self._vm.open_in_window(entry.path)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        try:
            self.overlay.close_overlay()
            self._unsubscribe()
            self._vm.teardown()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("Close event handler failed: {}", ex)
        event.accept()
