"""Shared fakes for the Qt-free view-model and service tests.

The fakes implement the `TaskRunner`, `Scheduler`, `WindowHost` and
`DirectoryService` protocols so tests can drive completions by hand.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from core.errors import StartupInfoError
from core.models import FileEntry, RootFolder, SortSpec, StartupInfo, WindowGeometry
from core.services.navigation import is_navigable_image
from core.services.sort_service import SortService


class ImmediateRunner:
    """Runs every submitted task synchronously."""

    def submit(self, fn, on_success, on_error) -> None:
        try:
            result = fn()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            on_error(ex)
            return
        on_success(result)


class DeferredRunner:
    """Queues tasks; tests complete them explicitly and in any order."""

    def __init__(self) -> None:
        self.pending: list[tuple[Callable, Callable, Callable]] = []

    def submit(self, fn, on_success, on_error) -> None:
        self.pending.append((fn, on_success, on_error))

    def run(self, index: int = 0) -> None:
        fn, on_success, on_error = self.pending.pop(index)
        try:
            result = fn()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            on_error(ex)
            return
        on_success(result)

    def run_all(self) -> None:
        while self.pending:
            self.run(0)


class _Handle:
    def __init__(self, scheduler: "ManualScheduler", due: int, callback: Callable[[], None]):
        self._scheduler = scheduler
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual clock; `advance(ms)` fires every timer that has come due."""

    def __init__(self) -> None:
        self.now = 0
        self.timers: list[_Handle] = []

    def call_later(self, ms: int, callback: Callable[[], None]) -> _Handle:
        handle = _Handle(self, self.now + ms, callback)
        self.timers.append(handle)
        return handle

    def advance(self, ms: int) -> None:
        self.now += ms
        due = [t for t in self.timers if not t.cancelled and t.due <= self.now]
        self.timers = [t for t in self.timers if t not in due and not t.cancelled]
        for timer in sorted(due, key=lambda t: t.due):
            timer.callback()


@dataclass
class FakeHost:
    """Records created windows and emitted events; creation confirmed on demand."""

    auto_confirm: bool = True
    geometry: WindowGeometry = field(default_factory=lambda: WindowGeometry(100, 100, 1024, 768))
    created: list[tuple[str, WindowGeometry, str]] = field(default_factory=list)
    emitted: list[tuple[str, str, dict]] = field(default_factory=list)
    listeners: dict[tuple[str, str], list[Callable[[dict], None]]] = field(default_factory=dict)
    _pending_confirm: list[tuple[str, Callable[[str], None]]] = field(default_factory=list)

    def create_window(self, geometry, url, on_created) -> str:
        handle = f"image-{len(self.created) + 1}"
        self.created.append((handle, geometry, url))
        if self.auto_confirm:
            on_created(handle)
        else:
            self._pending_confirm.append((handle, on_created))
        return handle

    def confirm_all(self) -> None:
        while self._pending_confirm:
            handle, on_created = self._pending_confirm.pop(0)
            on_created(handle)

    def window_geometry(self, handle: str) -> WindowGeometry:
        return self.geometry

    def emit(self, handle: str, event: str, payload: dict) -> None:
        self.emitted.append((handle, event, payload))
        for callback in list(self.listeners.get((handle, event), [])):
            callback(payload)

    def listen(self, handle: str, event: str, callback) -> Callable[[], None]:
        self.listeners.setdefault((handle, event), []).append(callback)

        def _unlisten() -> None:
            callbacks = self.listeners.get((handle, event), [])
            if callback in callbacks:
                callbacks.remove(callback)

        return _unlisten

    def to_resource(self, path: str) -> str:
        return f"file://{path}"


class FakeDirectoryService:
    """In-memory directory tree keyed by folder path."""

    def __init__(
        self,
        folders: dict[str, list[FileEntry]] | None = None,
        startup: StartupInfo | None = None,
        chooser_result: str | None = None,
    ) -> None:
        self.folders = folders or {}
        self.startup = startup
        self.chooser_result = chooser_result
        self.saved: list[str] = []
        self.list_requests: list[tuple[str, str, str]] = []
        self.content_requests: list[str] = []
        self.fail_full_list = False

    def get_startup_info(self) -> StartupInfo:
        if self.startup is None:
            raise StartupInfoError("No valid startup folder")
        return self.startup

    def select_folder(self) -> str | None:
        return self.chooser_result

    def get_directory_contents(self, path: str) -> list[FileEntry]:
        self.content_requests.append(path)
        if path not in self.folders:
            raise OSError(f"no such folder: {path}")
        return list(self.folders[path])

    def get_full_image_list(self, path: str, sort_key: str, sort_order: str) -> list[str]:
        self.list_requests.append((path, sort_key, sort_order))
        if self.fail_full_list:
            raise OSError("listing failed")
        folder = path if path in self.folders else path.rsplit("/", 1)[0]
        entries = [
            e
            for e in self.folders.get(folder, [])
            if not e.is_dir and is_navigable_image(e.name)
        ]
        return [e.path for e in SortService().sort(entries, SortSpec(sort_key, sort_order))]

    def get_root_folders(self) -> list[RootFolder]:
        return [RootFolder(id="root", name="Root", path="/")]

    def save_last_folder(self, path: str) -> None:
        self.saved.append(path)

    def log_info(self, message: str, *args: Any) -> None:
        pass

    def log_error(self, message: str, *args: Any) -> None:
        pass


def entry(path: str, is_dir: bool = False, modified_at: int = 0, size_bytes: int = 0) -> FileEntry:
    return FileEntry(
        name=path.rsplit("/", 1)[-1],
        path=path,
        is_dir=is_dir,
        modified_at=modified_at,
        size_bytes=size_bytes,
    )


@pytest.fixture(autouse=True)
def _clear_sort_cache():
    SortService.clear_cache()
    yield
    SortService.clear_cache()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()
