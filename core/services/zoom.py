"""Bounded multiplicative zoom factor."""

from __future__ import annotations

ZOOM_STEP = 1.1
ZOOM_MIN = 0.1
ZOOM_MAX = 3.0
ZOOM_DEFAULT = 1.0


class ZoomController:
    """Holds a zoom factor kept within [ZOOM_MIN, ZOOM_MAX]."""

    def __init__(self, factor: float = ZOOM_DEFAULT) -> None:
        self._factor = min(max(float(factor), ZOOM_MIN), ZOOM_MAX)

    @property
    def factor(self) -> float:
        return self._factor

    def zoom_in(self) -> float:
        self._factor = min(self._factor * ZOOM_STEP, ZOOM_MAX)
        return self._factor

    def zoom_out(self) -> float:
        self._factor = max(self._factor / ZOOM_STEP, ZOOM_MIN)
        return self._factor

    def reset(self) -> float:
        self._factor = ZOOM_DEFAULT
        return self._factor
