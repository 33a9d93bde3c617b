"""ViewerWindow: an independent clone viewer synchronized once at creation."""

from __future__ import annotations

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QLabel, QMainWindow, QSizePolicy
from loguru import logger

from app.viewmodels.viewer_vm import ERROR, IMAGE_CHANGED, ZOOM_CHANGED, ViewerVM
from app.views.constants import VIEWER_TITLE
from app.views.input_binding import InputBinding
from core.services.interfaces import TaskRunner
from infrastructure.image_service import ImageService, scaled_for_zoom


class ViewerWindow(QMainWindow):
    """Full-window image viewer with wraparound navigation and zoom."""

    def __init__(
        self,
        vm: ViewerVM,
        runner: TaskRunner,
        image_service: ImageService,
        on_closed=None,
    ) -> None:
        """Create the window and start the viewer's bootstrap.

        Args:
            vm: View-model of this window
            runner: Task runner for image decoding
            image_service: Image loader
            on_closed: Optional callback receiving the window handle on close
        """
        super().__init__()
        self._vm = vm
        self._runner = runner
        self._images = image_service
        self._on_closed = on_closed
        self._image: QImage | None = None
        self._image_path: str | None = None

        self.setWindowTitle(VIEWER_TITLE)
        self.setAttribute(Qt.WA_DeleteOnClose, True)
        self._label = QLabel("Loading...")
        self._label.setAlignment(Qt.AlignCenter)
        self._label.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        self.setCentralWidget(self._label)
        self.setFocusPolicy(Qt.StrongFocus)

        self._binding = InputBinding(
            self,
            {
                Qt.Key_Right: self._vm.next,
                Qt.Key_Left: self._vm.prev,
                Qt.Key_Up: self._vm.zoom_in,
                Qt.Key_Down: self._vm.zoom_out,
            },
            on_wheel_next=self._vm.next,
            on_wheel_prev=self._vm.prev,
        )
        self._unsubscribe = self._vm.subscribe(self._on_vm_changed)
        self._vm.start()

    # Qt events
    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self._binding.attach()
        self.setFocus()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._apply_pixmap()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._binding.detach()
        self._unsubscribe()
        self._vm.close()
        if self._on_closed is not None:
            try:
                self._on_closed(self._vm.handle)
            except Exception as ex:  # pylint: disable=broad-exception-caught
                logger.error("Viewer close callback failed: {}", ex)
        event.accept()

    # internals
    def _on_vm_changed(self, change: str) -> None:
        if change == IMAGE_CHANGED:
            self._show_current()
        elif change == ZOOM_CHANGED:
            self._apply_pixmap()
        elif change == ERROR:
            self._label.setText(self._vm.last_error or "(failed)")

    def _show_current(self) -> None:
        path = self._vm.current_path
        if path is None:
            self._image = None
            self._image_path = None
            self._label.setPixmap(QPixmap())
            self._label.setText("No images")
            return
        self.setWindowTitle(f"{VIEWER_TITLE} - {path}")
        self._label.setToolTip(self._vm.current_resource or "")
        if path == self._image_path and self._image is not None:
            self._apply_pixmap()
            return
        self._image_path = path
        self._image = None
        self._runner.submit(
            lambda: self._images.get_preview(path),
            lambda image: self._on_loaded(path, image),
            lambda ex: logger.error("Preview failed for {}: {}", path, ex),
        )

    def _on_loaded(self, path: str, image: QImage | None) -> None:
        if path != self._image_path:
            return
        if image is None or image.isNull():
            self._label.setPixmap(QPixmap())
            self._label.setText("(failed)")
            return
        self._image = image
        self._apply_pixmap()

    def _apply_pixmap(self) -> None:
        if self._image is None:
            return
        fit = QSize(max(1, self._label.width()), max(1, self._label.height()))
        scaled = scaled_for_zoom(self._image, fit, self._vm.zoom_factor)
        self._label.setPixmap(QPixmap.fromImage(scaled))
