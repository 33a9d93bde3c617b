"""ViewModel for a clone viewer window.

The window bootstraps from its startup URL and fetches its own collection; an
``init-image-viewer`` event from the parent overrides whatever the bootstrap
produced. After that the window navigates on its own.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.models import InitPayload, LaunchParams, NavigationState, SortSpec
from core.services.interfaces import INIT_EVENT, DirectoryService, TaskRunner, WindowHost
from core.services.navigation import NavigationCursor
from core.services.window_sync import (
    SOURCE_BOOTSTRAP,
    ChildSync,
    HandoffPhase,
    RequestSlots,
    parse_startup_url,
)

IMAGE_CHANGED = "image"
ZOOM_CHANGED = "zoom"
ERROR = "error"


class ViewerVM:
    """Navigation and zoom for one independently running viewer window."""

    def __init__(
        self,
        service: DirectoryService,
        runner: TaskRunner,
        host: WindowHost,
        handle: str,
        params: LaunchParams,
    ) -> None:
        self._service = service
        self._runner = runner
        self._host = host
        self._handle = handle
        self._slots = RequestSlots()
        self._listeners: list[Callable[[str], None]] = []
        self._unlisten: Callable[[], None] | None = None

        self.params = params
        self.sort_spec: SortSpec = params.sort_spec
        self.cursor = NavigationCursor()
        self.sync = ChildSync()
        self.sync.listeners.append(self._on_synchronized)
        self.last_error: str | None = None

    @classmethod
    def from_url(
        cls,
        url: str,
        service: DirectoryService,
        runner: TaskRunner,
        host: WindowHost,
        handle: str,
    ) -> ViewerVM | None:
        """Build a ViewerVM from a clone startup URL; None if the URL is not a clone URL."""
        params = parse_startup_url(url)
        if params is None:
            logger.warning("Ignoring non-clone startup URL: {}", url)
            return None
        return cls(service, runner, host, handle, params)

    @property
    def handle(self) -> str:
        return self._handle

    @property
    def phase(self) -> HandoffPhase:
        return self.sync.phase

    @property
    def current_path(self) -> str | None:
        return self.cursor.current_path

    @property
    def current_resource(self) -> str | None:
        path = self.cursor.current_path
        return self._host.to_resource(path) if path else None

    @property
    def zoom_factor(self) -> float:
        return self.cursor.zoom.factor

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def _notify(self, change: str) -> None:
        for callback in list(self._listeners):
            callback(change)

    # Lifecycle

    def start(self) -> None:
        """Listen for the parent's init event, then run the bootstrap fetch."""
        if self._unlisten is None:
            self._unlisten = self._host.listen(self._handle, INIT_EVENT, self.on_init_event)
        path = self.params.image_path
        spec = self.params.sort_spec
        logger.info("Viewer {} bootstrapping from {} ({}, {})", self._handle, path, spec.key, spec.order)
        token = self._slots.issue("bootstrap")
        self._runner.submit(
            lambda: self._service.get_full_image_list(path, spec.key, spec.order),
            lambda images: self._on_bootstrap_loaded(token, images),
            lambda ex: self._on_bootstrap_failed(token, ex),
        )

    def close(self) -> None:
        """Detach the event listener and observers."""
        if self._unlisten is not None:
            self._unlisten()
            self._unlisten = None
        self._listeners.clear()

    def _on_bootstrap_loaded(self, token: int, images: list[str]) -> None:
        if not self._slots.is_current("bootstrap", token):
            return
        self.sync.offer(SOURCE_BOOTSTRAP, images, self.params.image_path)

    def _on_bootstrap_failed(self, token: int, ex: Exception) -> None:
        if not self._slots.is_current("bootstrap", token):
            return
        self.last_error = f"Error loading image list: {ex}"
        logger.error(self.last_error)
        self._notify(ERROR)

    def on_init_event(self, data: dict) -> None:
        """Adopt the parent's authoritative list and sort pair."""
        logger.info("Received {} on {}", INIT_EVENT, self._handle)
        payload = InitPayload.from_dict(data)
        self.sort_spec = payload.sort_spec
        self.sync.offer_payload(payload)

    def _on_synchronized(self, state: NavigationState) -> None:
        self.cursor.set_collection(state.collection, state.current_path)
        self._notify(IMAGE_CHANGED)

    # Navigation / zoom

    def next(self) -> bool:
        moved = self.cursor.next()
        if moved:
            self._notify(IMAGE_CHANGED)
        return moved

    def prev(self) -> bool:
        moved = self.cursor.prev()
        if moved:
            self._notify(IMAGE_CHANGED)
        return moved

    def zoom_in(self) -> float:
        factor = self.cursor.zoom.zoom_in()
        self._notify(ZOOM_CHANGED)
        return factor

    def zoom_out(self) -> float:
        factor = self.cursor.zoom.zoom_out()
        self._notify(ZOOM_CHANGED)
        return factor
