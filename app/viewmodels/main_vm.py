"""ViewModel for the browsing window: folder, sorted listing, grid focus and clone spawning."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.models import FileEntry, SortSpec, StartupInfo
from core.services.click_service import (
    DEFAULT_CLICK_DELAY_MS,
    ClickDisambiguator,
    GridAction,
    resolve_grid_action,
)
from core.services.interfaces import DirectoryService, Scheduler, TaskRunner, WindowHost
from core.services.navigation import NEXT, PREV, GridCursor
from core.services.sort_service import SortService
from core.services.window_sync import DEFAULT_CLONE_OFFSET, CloneHandoff, CloneSpawner, RequestSlots

# Change notifications delivered to subscribers
FOLDER_CHANGED = "folder"
FILES_CHANGED = "files"
SORT_CHANGED = "sort"
EXPANDED_CHANGED = "expanded"
ZOOM_CHANGED = "zoom"
ERROR = "error"

MAIN_WINDOW_HANDLE = "main"


class MainVM:
    """Main application view-model.

    Mediates between the directory service and the browsing window. All
    blocking calls go through the task runner; results are applied only when
    they belong to the last request issued for their slot.
    """

    def __init__(
        self,
        service: DirectoryService,
        runner: TaskRunner,
        scheduler: Scheduler,
        host: WindowHost,
        sorter: SortService | None = None,
        default_sort: SortSpec | None = None,
        click_delay_ms: int = DEFAULT_CLICK_DELAY_MS,
        clone_offset: tuple[int, int] = DEFAULT_CLONE_OFFSET,
        window_handle: str = MAIN_WINDOW_HANDLE,
    ) -> None:
        """Create a MainVM.

        Args:
            service: Directory/image-list provider.
            runner: Executes service calls off the UI thread.
            scheduler: Timer source for click disambiguation.
            host: Window host used to spawn clone viewers.
            sorter: Sorting service (defaults to `SortService`).
            default_sort: Initial sort key/order.
            click_delay_ms: Window within which presses form one gesture.
            clone_offset: Offset of a spawned clone relative to this window.
            window_handle: Handle of this window in `host`.
        """
        self._service = service
        self._runner = runner
        self._host = host
        self._sorter = sorter or SortService()
        self._handle = window_handle
        self._slots = RequestSlots()
        self._clicks = ClickDisambiguator(scheduler, self._on_click_resolved, click_delay_ms)
        self._spawner = CloneSpawner(host, offset=clone_offset)
        self._listeners: list[Callable[[str], None]] = []
        self._raw_entries: list[FileEntry] = []
        self._pending_focus: str | None = None

        self.sort_spec: SortSpec = default_sort or SortSpec()
        self.current_path: str | None = None
        self.files: list[FileEntry] = []
        self.grid = GridCursor()
        self.last_error: str | None = None

    # Observers

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register `callback(change)`; returns a callable that unsubscribes it."""
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def _notify(self, change: str) -> None:
        for callback in list(self._listeners):
            callback(change)

    def _report_error(self, message: str) -> None:
        self.last_error = message
        logger.error(message)
        self._notify(ERROR)

    # Startup / folder selection

    def initialize(self) -> None:
        """Resolve the previous session's folder (or launch argument) and open it."""
        token = self._slots.issue("startup")
        self._runner.submit(
            self._service.get_startup_info,
            lambda info: self._on_startup_info(token, info),
            lambda ex: self._on_startup_failed(token, ex),
        )

    def _on_startup_info(self, token: int, info: StartupInfo) -> None:
        if not self._slots.is_current("startup", token):
            return
        logger.info("Startup folder: {} (file: {})", info.folder, info.file)
        self.set_folder(info.folder, focus_path=info.file)

    def _on_startup_failed(self, token: int, ex: Exception) -> None:
        if not self._slots.is_current("startup", token):
            return
        logger.info("No startup folder ({}); asking the user", ex)
        self.select_folder()

    def select_folder(self) -> bool:
        """Open the folder picker; returns False when the user cancels."""
        try:
            path = self._service.select_folder()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            self._report_error(f"Error selecting folder: {ex}")
            return False
        if not path:
            logger.info("Folder selection cancelled")
            return False
        self.set_folder(path)
        return True

    def set_folder(self, path: str, focus_path: str | None = None) -> None:
        """Switch to `path`, fetch its listing and persist it as the last folder."""
        # A late startup result must not override a folder chosen since
        self._slots.invalidate("startup")
        self.current_path = path
        self._pending_focus = focus_path
        self._clicks.cancel_all()
        self.grid.close()
        self._notify(FOLDER_CHANGED)
        self.load_directory()
        self._runner.submit(
            lambda: self._service.save_last_folder(path),
            lambda _: None,
            lambda ex: logger.warning("save_last_folder failed: {}", ex),
        )

    def load_directory(self) -> None:
        """Fetch the current folder's listing; stale results are discarded."""
        if not self.current_path:
            return
        path = self.current_path
        token = self._slots.issue("directory")
        self._runner.submit(
            lambda: self._service.get_directory_contents(path),
            lambda entries: self._on_directory_loaded(token, path, entries),
            lambda ex: self._on_directory_failed(token, path, ex),
        )

    def _on_directory_loaded(self, token: int, path: str, entries: list[FileEntry]) -> None:
        if not self._slots.is_current("directory", token):
            logger.debug("Discarding stale listing for {}", path)
            return
        self._raw_entries = list(entries)
        self.files = self._sorter.sort(self._raw_entries, self.sort_spec)
        self.grid.set_entries(self.files)
        if self._pending_focus:
            self.grid.expand_path(self._pending_focus)
            self._pending_focus = None
        self._notify(FILES_CHANGED)
        self._notify(EXPANDED_CHANGED)

    def _on_directory_failed(self, token: int, path: str, ex: Exception) -> None:
        if not self._slots.is_current("directory", token):
            return
        self._report_error(f"Error loading directory {path}: {ex}")

    # Sorting

    def set_sort_key(self, key: str) -> None:
        if key == self.sort_spec.key:
            return
        self.sort_spec = self.sort_spec.with_key(key)
        self._notify(SORT_CHANGED)
        self.load_directory()

    def set_sort_order(self, order: str) -> None:
        if order == self.sort_spec.order:
            return
        self.sort_spec = self.sort_spec.with_order(order)
        self._notify(SORT_CHANGED)
        self.load_directory()

    def toggle_sort_order(self) -> None:
        self.set_sort_order(self.sort_spec.toggled_order().order)

    # Grid interaction

    def click_item(self, index: int) -> None:
        """Record a raw press on grid tile `index`."""
        if not 0 <= index < len(self.files):
            return
        entry = self.files[index]
        self._clicks.click(entry.path, entry)

    def _on_click_resolved(self, entry: FileEntry, count: int) -> None:
        action = resolve_grid_action(entry, count)
        logger.debug("Grid click on {} x{} -> {}", entry.name, count, action.value)
        if action is GridAction.EXPAND:
            if self.grid.expand_path(entry.path):
                self._notify(EXPANDED_CHANGED)
        elif action is GridAction.ENTER_DIRECTORY:
            self.set_folder(entry.path)
        elif action is GridAction.OPEN_WINDOW:
            self.open_in_window(entry.path)

    def close_expanded(self) -> None:
        if self.grid.expanded_index is None:
            return
        self.grid.close()
        self._notify(EXPANDED_CHANGED)

    def navigate_expanded(self, direction: str) -> bool:
        moved = self.grid.navigate(direction)
        if moved:
            self._notify(EXPANDED_CHANGED)
        return moved

    def next_image(self) -> bool:
        return self.navigate_expanded(NEXT)

    def prev_image(self) -> bool:
        return self.navigate_expanded(PREV)

    def zoom_in(self) -> float:
        factor = self.grid.zoom.zoom_in()
        self._notify(ZOOM_CHANGED)
        return factor

    def zoom_out(self) -> float:
        factor = self.grid.zoom.zoom_out()
        self._notify(ZOOM_CHANGED)
        return factor

    @property
    def zoom_factor(self) -> float:
        return self.grid.zoom.factor

    # Clone windows

    def open_in_window(self, path: str) -> CloneHandoff:
        """Resolve the full collection around `path`, then spawn a synchronized clone."""
        geometry = self._host.window_geometry(self._handle)
        spec = self.sort_spec
        handoff = self._spawner.request(path, spec, geometry)
        self._runner.submit(
            lambda: self._service.get_full_image_list(path, spec.key, spec.order),
            lambda images: self._spawner.launch(handoff, images),
            lambda ex: self._on_clone_list_failed(handoff, ex),
        )
        return handoff

    def _on_clone_list_failed(self, handoff: CloneHandoff, ex: Exception) -> None:
        logger.error("Error loading image list for {}: {}", handoff.request.origin_path, ex)
        self._spawner.launch(handoff, None)

    def teardown(self) -> None:
        """Drop pending gestures and observers when the window goes away."""
        self._clicks.cancel_all()
        self._listeners.clear()
