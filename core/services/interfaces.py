"""Collaborator protocols shared by the core, view-models and Qt views.

Nothing in this module depends on a UI toolkit; the Qt layer and the tests each
provide their own implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from core.models import FileEntry, RootFolder, StartupInfo, WindowGeometry

INIT_EVENT = "init-image-viewer"


class DirectoryService(Protocol):
    """Directory and image-list access used by the session controllers."""

    def get_startup_info(self) -> StartupInfo:
        """Return the folder/file to open, raising `StartupInfoError` when none exists."""
        raise NotImplementedError

    def select_folder(self) -> str | None:
        """Ask the user for a folder; None when the picker is cancelled."""
        raise NotImplementedError

    def get_directory_contents(self, path: str) -> list[FileEntry]:
        raise NotImplementedError

    def get_full_image_list(self, path: str, sort_key: str, sort_order: str) -> list[str]:
        """Return every navigable image next to `path`, ordered per the sort pair."""
        raise NotImplementedError

    def get_root_folders(self) -> list[RootFolder]:
        raise NotImplementedError

    def save_last_folder(self, path: str) -> None:
        """Persist `path` best-effort; must never raise."""
        raise NotImplementedError

    def log_info(self, message: str, *args: Any) -> None:
        raise NotImplementedError

    def log_error(self, message: str, *args: Any) -> None:
        raise NotImplementedError


class TaskRunner(Protocol):
    """Runs blocking work off the UI thread and reports back on it."""

    def submit(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        raise NotImplementedError


class TimerHandle(Protocol):
    def cancel(self) -> None:
        raise NotImplementedError


class Scheduler(Protocol):
    """Single-shot deferred callbacks on the UI thread."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError


class WindowHost(Protocol):
    """Creates windows and routes named events to them."""

    def create_window(
        self,
        geometry: WindowGeometry,
        url: str,
        on_created: Callable[[str], None] | None = None,
    ) -> str:
        """Create a window and return its handle; `on_created` fires once it exists."""
        raise NotImplementedError

    def window_geometry(self, handle: str) -> WindowGeometry:
        raise NotImplementedError

    def emit(self, handle: str, event: str, payload: dict) -> None:
        raise NotImplementedError

    def listen(self, handle: str, event: str, callback: Callable[[dict], None]) -> Callable[[], None]:
        """Register `callback` for `event` on `handle`; returns an unlisten callable."""
        raise NotImplementedError

    def to_resource(self, path: str) -> str:
        raise NotImplementedError
