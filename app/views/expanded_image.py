from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QEvent, QObject, QSize, Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QSizePolicy,
    QToolButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.views.constants import OVERLAY_BACKGROUND, OVERLAY_HINT
from app.views.input_binding import InputBinding
from core.services.interfaces import TaskRunner
from infrastructure.image_service import ImageService, scaled_for_zoom


class ExpandedImage(QWidget):
    """Dimmed in-window overlay showing one grid image at the current zoom.

    Arrow keys and the wheel are bound only while the overlay is visible.
    """

    def __init__(
        self,
        parent: QWidget,
        runner: TaskRunner,
        image_service: ImageService,
        on_close: Callable[[], None],
        on_next: Callable[[], None],
        on_prev: Callable[[], None],
        on_zoom_in: Callable[[], None],
        on_zoom_out: Callable[[], None],
    ) -> None:
        super().__init__(parent)
        self._runner = runner
        self._images = image_service
        self._on_close = on_close
        self._path: str | None = None
        self._image: QImage | None = None
        self._zoom = 1.0

        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setStyleSheet(OVERLAY_BACKGROUND)
        self.setFocusPolicy(Qt.StrongFocus)

        root = QVBoxLayout(self)
        top = QHBoxLayout()
        top.addStretch(1)
        close_btn = QToolButton(text="×")
        close_btn.setStyleSheet("color: white; font-size: 24px; background: transparent;")
        close_btn.clicked.connect(on_close)
        top.addWidget(close_btn)
        root.addLayout(top)

        self._label = QLabel()
        self._label.setAlignment(Qt.AlignCenter)
        self._label.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        self._label.setStyleSheet("color: white; background: transparent;")
        root.addWidget(self._label, 1)

        hint = QLabel(OVERLAY_HINT)
        hint.setAlignment(Qt.AlignCenter)
        hint.setStyleSheet("color: white; background: transparent;")
        root.addWidget(hint)

        self._binding = InputBinding(
            self,
            {
                Qt.Key_Left: on_prev,
                Qt.Key_Right: on_next,
                Qt.Key_Up: on_zoom_in,
                Qt.Key_Down: on_zoom_out,
                Qt.Key_Escape: on_close,
            },
            on_wheel_next=on_next,
            on_wheel_prev=on_prev,
        )
        parent.installEventFilter(self)
        self.hide()

    # Public API
    def open(self, path: str, zoom: float) -> None:
        self._zoom = zoom
        if path != self._path:
            self._path = path
            self._image = None
            self._label.setPixmap(QPixmap())
            self._label.setText("Loading…")
            self._runner.submit(
                lambda: self._images.get_preview(path),
                lambda image: self._on_loaded(path, image),
                lambda ex: logger.error("Preview failed for {}: {}", path, ex),
            )
        if not self.isVisible():
            self.setGeometry(self.parentWidget().rect())
            self.show()
            self.raise_()
            self._binding.attach()
        self.setFocus()
        self._apply_pixmap()

    def set_zoom(self, zoom: float) -> None:
        self._zoom = zoom
        self._apply_pixmap()

    def close_overlay(self) -> None:
        self._binding.detach()
        self._path = None
        self._image = None
        self.hide()

    # Qt events
    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        # Clicking the dimmed backdrop (outside the image) closes the overlay
        if not self._label.geometry().contains(event.position().toPoint()):
            self._on_close()
            return
        super().mousePressEvent(event)

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # type: ignore[override]
        if obj is self.parentWidget() and event.type() == QEvent.Resize and self.isVisible():
            self.setGeometry(self.parentWidget().rect())
            self._apply_pixmap()
        return super().eventFilter(obj, event)

    # internals
    def _on_loaded(self, path: str, image: QImage | None) -> None:
        if path != self._path:
            return
        if image is None or image.isNull():
            self._label.setText("(failed)")
            return
        self._image = image
        self._apply_pixmap()

    def _apply_pixmap(self) -> None:
        if self._image is None:
            return
        fit = QSize(max(1, self._label.width()), max(1, self._label.height()))
        scaled = scaled_for_zoom(self._image, fit, self._zoom)
        self._label.setPixmap(QPixmap.fromImage(scaled))
