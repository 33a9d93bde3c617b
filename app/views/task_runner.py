from __future__ import annotations

from collections.abc import Callable
import itertools
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool, QTimer, Signal
from loguru import logger


class _TaskBridge(QObject):
    """Lives on the UI thread; queued emissions hop results back onto it."""

    finished = Signal(int, object, object)  # job id, result, error


class _Task(QRunnable):
    """QRunnable for background service calls.

    Emits `bridge.finished(job_id, result, error)` upon completion.
    """

    def __init__(self, *, job_id: int, fn: Callable[[], Any], bridge: _TaskBridge) -> None:
        super().__init__()
        self._job_id = job_id
        self._fn = fn
        self._bridge = bridge

    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._fn()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            self._bridge.finished.emit(self._job_id, None, ex)
            return
        self._bridge.finished.emit(self._job_id, result, None)


class QtTaskRunner:
    """Dispatches blocking calls to the global thread pool.

    Callbacks always run on the UI thread, in completion order.
    """

    def __init__(self, pool: QThreadPool | None = None) -> None:
        self._pool = pool or QThreadPool.globalInstance()
        self._bridge = _TaskBridge()
        self._bridge.finished.connect(self._on_finished)
        self._ids = itertools.count(1)
        self._callbacks: dict[int, tuple[Callable[[Any], None], Callable[[Exception], None] | None]] = {}

    def submit(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        job_id = next(self._ids)
        self._callbacks[job_id] = (on_success, on_error)
        self._pool.start(_Task(job_id=job_id, fn=fn, bridge=self._bridge))

    def _on_finished(self, job_id: int, result: Any, error: Any) -> None:
        on_success, on_error = self._callbacks.pop(job_id, (None, None))
        if error is not None:
            if on_error is not None:
                on_error(error)
            else:
                logger.error("Background task failed: {}", error)
            return
        if on_success is not None:
            on_success(result)


class _QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        try:
            self._timer.stop()
            self._timer.deleteLater()
        except RuntimeError:
            # Timer already fired and was deleted
            pass


class QtScheduler:
    """`Scheduler` backed by single-shot QTimers."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        timer.timeout.connect(timer.deleteLater)
        timer.start(int(delay_ms))
        return _QtTimerHandle(timer)
