"""Handoff of navigation/sort state from a browsing window to a clone viewer.

Two channels deliver the state:

1. The startup URL (``?clone=true&imagePath=...&sortBy=...&sortOrder=...``),
   readable by the child before any event can reach it. The child fetches its
   own collection from these parameters.
2. An ``init-image-viewer`` event emitted to the child once the host confirms
   the window exists. It carries the list the parent already resolved.

The child merges both through `ChildSync`: each source carries a priority and
the event outranks the bootstrap regardless of arrival order. After the
handoff the windows are independent.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
import itertools
import os
from urllib.parse import parse_qs, quote, urlencode, urlsplit

from loguru import logger

from core.models import (
    ORDER_ASC,
    SORT_NAME,
    InitPayload,
    LaunchParams,
    NavigationState,
    SortSpec,
    WindowGeometry,
    WindowSpawnRequest,
)
from core.services.interfaces import INIT_EVENT, WindowHost
from core.services.navigation import set_collection

DEFAULT_VIEWER_URL = "photo-browser://viewer"
DEFAULT_CLONE_OFFSET = (50, 50)

SOURCE_BOOTSTRAP = 0
SOURCE_EVENT = 1


class HandoffPhase(Enum):
    REQUESTING = "requesting"
    CREATED = "created"
    SYNCHRONIZED = "synchronized"


def build_startup_url(request: WindowSpawnRequest, base_url: str = DEFAULT_VIEWER_URL) -> str:
    """Encode a spawn request as the clone window's startup URL."""
    query = urlencode(
        {
            "clone": "true",
            # Raw file-system bytes so undecodable names survive the round trip
            "imagePath": os.fsencode(request.origin_path),
            "sortBy": request.sort_spec.key,
            "sortOrder": request.sort_spec.order,
        },
        quote_via=quote,
    )
    return f"{base_url}?{query}"


def parse_startup_url(url: str) -> LaunchParams | None:
    """Decode a startup URL; None unless it describes a clone with an image path."""
    try:
        # Latin-1 maps each percent-decoded byte to one code point
        params = parse_qs(urlsplit(url).query, encoding="latin-1")
    except ValueError:
        return None

    def _first(name: str, default: str = "") -> str:
        values = params.get(name) or [default]
        return values[0]

    if _first("clone") != "true":
        return None
    image_path = os.fsdecode(_first("imagePath").encode("latin-1"))
    if not image_path:
        return None
    spec = SortSpec(key=_first("sortBy", SORT_NAME), order=_first("sortOrder", ORDER_ASC))
    return LaunchParams(image_path=image_path, sort_spec=spec)


def spawn_geometry(
    parent: WindowGeometry, offset: tuple[int, int] = DEFAULT_CLONE_OFFSET
) -> WindowGeometry:
    """Clone geometry: parent size, shifted so both windows stay visible."""
    dx, dy = offset
    return parent.offset(dx, dy)


class RequestSlots:
    """Monotonic tokens per logical slot; only the last issued token is current."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest: dict[str, int] = {}

    def issue(self, slot: str) -> int:
        token = next(self._counter)
        self._latest[slot] = token
        return token

    def is_current(self, slot: str, token: int) -> bool:
        return self._latest.get(slot) == token

    def invalidate(self, slot: str) -> None:
        self._latest.pop(slot, None)


@dataclass
class CloneHandoff:
    """Parent-side record of one clone spawn."""

    request: WindowSpawnRequest
    phase: HandoffPhase = HandoffPhase.REQUESTING
    handle: str | None = None
    image_list: tuple[str, ...] | None = None


class CloneSpawner:
    """Drives the parent side: Requesting -> Created (init event emitted)."""

    def __init__(
        self,
        host: WindowHost,
        offset: tuple[int, int] = DEFAULT_CLONE_OFFSET,
        base_url: str = DEFAULT_VIEWER_URL,
    ) -> None:
        self._host = host
        self._offset = offset
        self._base_url = base_url

    def request(
        self, origin_path: str, sort_spec: SortSpec, parent_geometry: WindowGeometry
    ) -> CloneHandoff:
        geometry = spawn_geometry(parent_geometry, self._offset)
        request = WindowSpawnRequest(origin_path=origin_path, sort_spec=sort_spec, geometry=geometry)
        return CloneHandoff(request=request)

    def launch(self, handoff: CloneHandoff, image_list: Sequence[str] | None) -> str:
        """Create the clone window; the init event follows once it exists.

        Args:
            handoff: Record returned by `request`.
            image_list: Resolved collection, or None when resolution failed. In
                that case no event is sent and the child relies on its own fetch.
        """
        handoff.image_list = tuple(image_list) if image_list is not None else None
        url = build_startup_url(handoff.request, self._base_url)
        handle = self._host.create_window(
            handoff.request.geometry, url, on_created=lambda h: self._on_created(handoff, h)
        )
        handoff.handle = handle
        logger.info("Clone window requested: {} -> {}", handoff.request.origin_path, handle)
        return handle

    def _on_created(self, handoff: CloneHandoff, handle: str) -> None:
        handoff.handle = handle
        handoff.phase = HandoffPhase.CREATED
        if handoff.image_list is None:
            logger.warning("Clone {} created without a resolved list; bootstrap only", handle)
            return
        spec = handoff.request.sort_spec
        payload = InitPayload(
            initial_path=handoff.request.origin_path,
            full_image_list=handoff.image_list,
            sort_by=spec.key,
            sort_order=spec.order,
        )
        self._host.emit(handle, INIT_EVENT, payload.to_dict())
        logger.info("Sent {} to {} ({} images)", INIT_EVENT, handle, len(handoff.image_list))


@dataclass
class ChildSync:
    """Child-side merge of bootstrap and event state (higher priority wins)."""

    phase: HandoffPhase = HandoffPhase.REQUESTING
    applied_priority: int = -1
    state: NavigationState = field(default_factory=NavigationState)
    listeners: list[Callable[[NavigationState], None]] = field(default_factory=list)

    def offer(self, source: int, paths: Sequence[str], focus_path: str | None) -> bool:
        """Apply a state from `source` unless a higher-priority source already applied."""
        if source < self.applied_priority:
            logger.debug("Discarding source {} (applied {})", source, self.applied_priority)
            return False
        self.applied_priority = source
        self.state = set_collection(paths, focus_path)
        self.phase = HandoffPhase.SYNCHRONIZED
        for listener in list(self.listeners):
            listener(self.state)
        return True

    def offer_payload(self, payload: InitPayload) -> bool:
        return self.offer(SOURCE_EVENT, payload.full_image_list, payload.initial_path)
