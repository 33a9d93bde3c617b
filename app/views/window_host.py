"""QtWindowHost: window creation and per-window named events inside one Qt process."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
import itertools
import time

from PySide6.QtCore import QTimer, QUrl
from PySide6.QtWidgets import QWidget
from loguru import logger

from app.views.constants import DEFAULT_VIEWER_HEIGHT, DEFAULT_VIEWER_WIDTH
from core.models import WindowGeometry

WindowFactory = Callable[[str, str], QWidget]


class QtWindowHost:
    """Implements the `WindowHost` protocol for top-level Qt windows.

    Events are delivered asynchronously through the event loop, never inline,
    so an emitter cannot observe the receiver's handling.
    """

    def __init__(self, window_factory: WindowFactory | None = None) -> None:
        self._factory = window_factory
        self._windows: dict[str, QWidget] = {}
        self._listeners: dict[tuple[str, str], list[Callable[[dict], None]]] = defaultdict(list)
        self._seq = itertools.count(1)

    def set_window_factory(self, factory: WindowFactory) -> None:
        self._factory = factory

    def register(self, handle: str, window: QWidget) -> None:
        self._windows[handle] = window

    def unregister(self, handle: str) -> None:
        self._windows.pop(handle, None)
        for key in [k for k in self._listeners if k[0] == handle]:
            del self._listeners[key]

    def create_window(
        self,
        geometry: WindowGeometry,
        url: str,
        on_created: Callable[[str], None] | None = None,
    ) -> str:
        if self._factory is None:
            raise RuntimeError("QtWindowHost has no window factory")
        handle = f"image-{int(time.time() * 1000)}-{next(self._seq)}"
        window = self._factory(handle, url)
        window.setGeometry(geometry.x, geometry.y, geometry.width, geometry.height)
        self.register(handle, window)
        window.show()
        logger.info("Created window {} at {}", handle, geometry)
        if on_created is not None:
            QTimer.singleShot(0, lambda: on_created(handle))
        return handle

    def window_geometry(self, handle: str) -> WindowGeometry:
        window = self._windows.get(handle)
        if window is None:
            return WindowGeometry(100, 100, DEFAULT_VIEWER_WIDTH, DEFAULT_VIEWER_HEIGHT)
        g = window.geometry()
        return WindowGeometry(g.x(), g.y(), g.width(), g.height())

    def emit(self, handle: str, event: str, payload: dict) -> None:
        callbacks = list(self._listeners.get((handle, event), []))
        if not callbacks:
            logger.debug("No listener for {} on {}", event, handle)
        for callback in callbacks:
            QTimer.singleShot(0, lambda cb=callback: cb(payload))

    def listen(self, handle: str, event: str, callback: Callable[[dict], None]) -> Callable[[], None]:
        key = (handle, event)
        self._listeners[key].append(callback)

        def _unlisten() -> None:
            callbacks = self._listeners.get(key)
            if callbacks and callback in callbacks:
                callbacks.remove(callback)

        return _unlisten

    def to_resource(self, path: str) -> str:
        return QUrl.fromLocalFile(path).toString()
