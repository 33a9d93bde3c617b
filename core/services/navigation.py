"""Navigation over image collections and mixed folder listings.

Two policies live here on purpose:

- `advance` walks a dedicated image collection and wraps around at both ends.
- `advance_in_grid` walks a folder listing inline, skipping folders and
  non-image files, and stops (leaving the index unchanged) at either bound.
"""

from __future__ import annotations

from collections.abc import Sequence

from core.models import FileEntry, NavigationState
from core.services.zoom import ZoomController

IMAGE_EXTENSIONS: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp")

NEXT = "next"
PREV = "prev"


def is_navigable_image(name: str) -> bool:
    """True if `name` ends with a supported image extension (case-insensitive)."""
    return name.lower().endswith(IMAGE_EXTENSIONS)


def _step(direction: str) -> int:
    return -1 if direction == PREV else 1


def set_collection(paths: Sequence[str], focus_path: str | None = None) -> NavigationState:
    """Build a state for `paths`, focused on `focus_path` when present."""
    collection = tuple(paths)
    if not collection:
        return NavigationState(collection=(), current_index=None)
    index = 0
    if focus_path is not None:
        try:
            index = collection.index(focus_path)
        except ValueError:
            index = 0
    return NavigationState(collection=collection, current_index=index)


def advance(state: NavigationState, direction: str) -> NavigationState:
    """Move one step with circular wraparound; no-op without a focused index."""
    if state.current_index is None or not state.collection:
        return state
    size = len(state.collection)
    new_index = state.current_index + _step(direction)
    if new_index < 0:
        new_index = size - 1
    elif new_index >= size:
        new_index = 0
    return NavigationState(collection=state.collection, current_index=new_index)


def advance_in_grid(
    entries: Sequence[FileEntry], index: int | None, direction: str
) -> int | None:
    """Move to the next navigable image in a folder listing without wrapping.

    Returns the unchanged `index` when no image exists in that direction.
    """
    if index is None:
        return None
    step = _step(direction)
    candidate = index + step
    while 0 <= candidate < len(entries):
        entry = entries[candidate]
        if not entry.is_dir and is_navigable_image(entry.name):
            return candidate
        candidate += step
    return index


class NavigationCursor:
    """Stateful wrapper over a wrapping collection; focus changes reset zoom."""

    def __init__(self, zoom: ZoomController | None = None) -> None:
        self.zoom = zoom or ZoomController()
        self._state = NavigationState()

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def current_path(self) -> str | None:
        return self._state.current_path

    @property
    def current_index(self) -> int | None:
        return self._state.current_index

    def set_collection(self, paths: Sequence[str], focus_path: str | None = None) -> NavigationState:
        self._state = set_collection(paths, focus_path)
        self.zoom.reset()
        return self._state

    def advance(self, direction: str) -> bool:
        """Advance in `direction`; returns True when the focus moved."""
        new_state = advance(self._state, direction)
        if new_state is self._state:
            return False
        self._state = new_state
        self.zoom.reset()
        return True

    def next(self) -> bool:
        return self.advance(NEXT)

    def prev(self) -> bool:
        return self.advance(PREV)


class GridCursor:
    """Expanded-image focus inside a mixed folder listing (non-wrapping)."""

    def __init__(self, zoom: ZoomController | None = None) -> None:
        self.zoom = zoom or ZoomController()
        self._entries: tuple[FileEntry, ...] = ()
        self._index: int | None = None

    @property
    def entries(self) -> tuple[FileEntry, ...]:
        return self._entries

    @property
    def expanded_index(self) -> int | None:
        return self._index

    @property
    def expanded_entry(self) -> FileEntry | None:
        if self._index is None:
            return None
        return self._entries[self._index]

    def set_entries(self, entries: Sequence[FileEntry]) -> None:
        """Replace the listing; a previously expanded path stays expanded if still present."""
        previous = self.expanded_entry
        self._entries = tuple(entries)
        self._index = None
        if previous is not None:
            for i, entry in enumerate(self._entries):
                if entry.path == previous.path:
                    self._index = i
                    break
        if self._index is None:
            self.zoom.reset()

    def expand(self, index: int) -> bool:
        """Focus `index` if it refers to a navigable image."""
        if not 0 <= index < len(self._entries):
            return False
        entry = self._entries[index]
        if entry.is_dir or not is_navigable_image(entry.name):
            return False
        self._index = index
        self.zoom.reset()
        return True

    def expand_path(self, path: str) -> bool:
        for i, entry in enumerate(self._entries):
            if entry.path == path:
                return self.expand(i)
        return False

    def close(self) -> None:
        self._index = None
        self.zoom.reset()

    def navigate(self, direction: str) -> bool:
        new_index = advance_in_grid(self._entries, self._index, direction)
        if new_index is None or new_index == self._index:
            return False
        self._index = new_index
        self.zoom.reset()
        return True
