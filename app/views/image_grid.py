from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QGridLayout, QLabel, QScrollArea, QVBoxLayout, QWidget
from loguru import logger

from app.views.constants import (
    DEFAULT_THUMB_SIZE,
    GRID_MARGIN_RATIO,
    GRID_MIN_THUMB_PX,
    GRID_SPACING_PX,
)
from core.models import FileEntry
from core.services.interfaces import TaskRunner
from core.services.navigation import is_navigable_image
from infrastructure.image_service import ImageService


class _Tile(QWidget):
    """One grid cell; reports every raw press with its index."""

    pressed = Signal(int)

    def __init__(self, index: int, entry: FileEntry, side: int, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.index = index
        self.entry = entry
        self.setCursor(Qt.PointingHandCursor)
        v = QVBoxLayout(self)
        v.setContentsMargins(0, 0, 0, 0)

        self.image_label = QLabel()
        self.image_label.setFixedSize(side, side)
        self.image_label.setAlignment(Qt.AlignCenter)
        if entry.is_dir:
            self.image_label.setText("📁")
            self.image_label.setStyleSheet("font-size: 48px; background-color: #f3f4f6;")
        elif is_navigable_image(entry.name):
            self.image_label.setText("Loading…")
        else:
            self.image_label.setText("📄")
            self.image_label.setStyleSheet("font-size: 48px; background-color: #f3f4f6;")
        v.addWidget(self.image_label)

        name = QLabel(entry.name)
        name.setFixedWidth(side)
        name.setAlignment(Qt.AlignHCenter)
        name.setToolTip(entry.path)
        v.addWidget(name)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.LeftButton:
            self.pressed.emit(self.index)
        super().mousePressEvent(event)

    def set_image(self, image: QImage | None) -> None:
        if image is None or image.isNull():
            self.image_label.setText("(failed)")
            return
        pm = QPixmap.fromImage(image)
        self.image_label.setPixmap(
            pm.scaled(
                self.image_label.width(),
                self.image_label.height(),
                Qt.KeepAspectRatio,
                Qt.SmoothTransformation,
            )
        )


class ImageGrid(QWidget):
    """Scrollable thumbnail grid over the sorted folder listing."""

    def __init__(
        self,
        runner: TaskRunner,
        image_service: ImageService,
        on_item_pressed: Callable[[int], None],
        thumb_size: int | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._runner = runner
        self._images = image_service
        self._on_item_pressed = on_item_pressed
        self._thumb_size = int(thumb_size or DEFAULT_THUMB_SIZE)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.scroll.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        root.addWidget(self.scroll)

        self._placeholder = QLabel("Please select a folder to start.")
        self._placeholder.setAlignment(Qt.AlignCenter)
        self.scroll.setWidget(self._placeholder)

        self._entries: list[FileEntry] = []
        self._tiles: dict[str, _Tile] = {}
        self._container: QWidget | None = None
        self._generation = 0
        self._cols = 0

    # Public API
    def show_entries(self, entries: list[FileEntry]) -> None:
        self._entries = list(entries)
        self._rebuild()

    def show_placeholder(self, text: str) -> None:
        self._entries = []
        self._tiles = {}
        self._container = None
        self._generation += 1
        self._placeholder = QLabel(text)
        self._placeholder.setAlignment(Qt.AlignCenter)
        self.scroll.setWidget(self._placeholder)

    # Qt events
    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        if self._entries and self._compute_grid_geometry()[0] != self._cols:
            self._rebuild()

    # internals
    def _rebuild(self) -> None:
        self._generation += 1
        generation = self._generation
        self._tiles = {}
        if not self._entries:
            self.show_placeholder("This folder is empty.")
            return

        container = QWidget()
        layout = QGridLayout(container)
        layout.setSpacing(GRID_SPACING_PX)
        layout.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        vp = self.scroll.viewport()
        m = int(max(1, vp.width()) * GRID_MARGIN_RATIO)
        layout.setContentsMargins(m, m, m, m)

        cols, side = self._compute_grid_geometry()
        self._cols = cols
        for i, entry in enumerate(self._entries):
            r, c = divmod(i, cols)
            tile = _Tile(i, entry, side)
            tile.pressed.connect(self._on_item_pressed)
            layout.addWidget(tile, r, c)
            self._tiles[entry.path] = tile
            if not entry.is_dir and is_navigable_image(entry.name):
                self._request_thumbnail(generation, entry.path, side)

        self._container = container
        self.scroll.setWidget(container)

    def _request_thumbnail(self, generation: int, path: str, side: int) -> None:
        self._runner.submit(
            lambda: self._images.get_thumbnail(path, side),
            lambda image: self._on_thumbnail(generation, path, image),
            lambda ex: logger.error("Thumbnail failed for {}: {}", path, ex),
        )

    def _on_thumbnail(self, generation: int, path: str, image: QImage | None) -> None:
        if generation != self._generation:
            return
        tile = self._tiles.get(path)
        if tile is not None:
            tile.set_image(image)

    def _compute_grid_geometry(self) -> tuple[int, int]:
        width = max(1, self.scroll.viewport().width())
        spacing = GRID_SPACING_PX
        best_cols = 1
        best_cell = GRID_MIN_THUMB_PX
        for cols in range(1, 32):
            cell = (width - spacing * (cols + 1)) // cols
            if cell < GRID_MIN_THUMB_PX:
                break
            best_cols = cols
            best_cell = min(cell, self._thumb_size)
            if cell <= self._thumb_size:
                break
        return best_cols, best_cell
