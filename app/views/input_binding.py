"""Keyboard and wheel shortcuts bound to a widget for an explicit lifetime."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QEvent, QObject
from PySide6.QtWidgets import QWidget


class InputBinding(QObject):
    """Event filter mapping key presses and wheel steps to callbacks.

    `attach()` is idempotent, so a binding can never fire twice for one event;
    `detach()` must be called when the owning view is torn down.
    """

    def __init__(
        self,
        target: QWidget,
        key_handlers: dict[int, Callable[[], None]],
        on_wheel_next: Callable[[], None] | None = None,
        on_wheel_prev: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(target)
        self._target = target
        self._keys = {int(key): handler for key, handler in key_handlers.items()}
        self._wheel_next = on_wheel_next
        self._wheel_prev = on_wheel_prev
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        if self._attached:
            return
        self._target.installEventFilter(self)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        self._target.removeEventFilter(self)
        self._attached = False

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # type: ignore[override]
        if obj is self._target:
            if event.type() == QEvent.KeyPress:
                handler = self._keys.get(int(event.key()))
                if handler is not None:
                    handler()
                    return True
            elif event.type() == QEvent.Wheel and (self._wheel_next or self._wheel_prev):
                dy = event.angleDelta().y()
                # Scrolling down (negative delta) moves forward
                if dy < 0 and self._wheel_next:
                    self._wheel_next()
                elif dy > 0 and self._wheel_prev:
                    self._wheel_prev()
                return True
        return super().eventFilter(obj, event)
