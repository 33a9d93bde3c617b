"""Single- versus double-click disambiguation for grid items.

Grid tiles only report raw presses. Each item keeps its own pending gesture:
every press bumps that item's counter and restarts its timer, and when the
timer fires the accumulated count is reported once.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.models import FileEntry
from core.services.interfaces import Scheduler, TimerHandle
from core.services.navigation import is_navigable_image

DEFAULT_CLICK_DELAY_MS = 200


class GridAction(Enum):
    NONE = "none"
    EXPAND = "expand"
    ENTER_DIRECTORY = "enter_directory"
    OPEN_WINDOW = "open_window"


def resolve_grid_action(entry: FileEntry, click_count: int) -> GridAction:
    """Map a resolved click count on `entry` to the action the grid should take."""
    if click_count <= 0:
        return GridAction.NONE
    if entry.is_dir:
        return GridAction.ENTER_DIRECTORY
    if click_count == 1:
        return GridAction.EXPAND if is_navigable_image(entry.name) else GridAction.NONE
    return GridAction.OPEN_WINDOW


@dataclass
class _PendingGesture:
    item: Any
    count: int = 0
    timer: TimerHandle | None = None


class ClickDisambiguator:
    """Collapses bursts of presses per item into one resolved click count."""

    def __init__(
        self,
        scheduler: Scheduler,
        on_resolved: Callable[[Any, int], None],
        delay_ms: int = DEFAULT_CLICK_DELAY_MS,
    ) -> None:
        self._scheduler = scheduler
        self._on_resolved = on_resolved
        self._delay_ms = int(delay_ms)
        self._pending: dict[Hashable, _PendingGesture] = {}

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def click(self, item_key: Hashable, item: Any) -> None:
        """Record one press on `item`; resolution happens `delay_ms` after the last press."""
        gesture = self._pending.get(item_key)
        if gesture is None:
            gesture = _PendingGesture(item=item)
            self._pending[item_key] = gesture
        gesture.item = item
        gesture.count += 1
        if gesture.timer is not None:
            gesture.timer.cancel()
        gesture.timer = self._scheduler.call_later(
            self._delay_ms, lambda: self._fire(item_key)
        )

    def pending_count(self, item_key: Hashable) -> int:
        gesture = self._pending.get(item_key)
        return gesture.count if gesture else 0

    def cancel_all(self) -> None:
        """Drop every pending gesture without reporting it."""
        for gesture in self._pending.values():
            if gesture.timer is not None:
                gesture.timer.cancel()
        self._pending.clear()

    def _fire(self, item_key: Hashable) -> None:
        gesture = self._pending.pop(item_key, None)
        if gesture is None or gesture.count == 0:
            return
        self._on_resolved(gesture.item, gesture.count)
