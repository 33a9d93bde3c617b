"""Core domain models for directory entries, sorting, navigation and window handoff."""

from __future__ import annotations

from dataclasses import dataclass, replace

SORT_NAME = "name"
SORT_TYPE = "type"
SORT_DATE = "date"
SORT_SIZE = "size"
SORT_KEYS: tuple[str, ...] = (SORT_NAME, SORT_TYPE, SORT_DATE, SORT_SIZE)

ORDER_ASC = "asc"
ORDER_DESC = "desc"
SORT_ORDERS: tuple[str, ...] = (ORDER_ASC, ORDER_DESC)


@dataclass(frozen=True)
class FileEntry:
    """A single directory entry as reported by the directory service.

    Snapshots are immutable; the UI only re-orders them.
    """

    name: str
    path: str
    is_dir: bool
    modified_at: int = 0
    size_bytes: int = 0


@dataclass(frozen=True)
class SortSpec:
    """Sort key/order pair threaded through every fetch and window spawn."""

    key: str = SORT_TYPE
    order: str = ORDER_ASC

    @property
    def ascending(self) -> bool:
        return self.order != ORDER_DESC

    def with_key(self, key: str) -> SortSpec:
        return replace(self, key=key)

    def with_order(self, order: str) -> SortSpec:
        return replace(self, order=order)

    def toggled_order(self) -> SortSpec:
        return replace(self, order=ORDER_DESC if self.ascending else ORDER_ASC)


@dataclass(frozen=True)
class NavigationState:
    """Ordered image collection plus the focused index (None when nothing is focused)."""

    collection: tuple[str, ...] = ()
    current_index: int | None = None

    @property
    def current_path(self) -> str | None:
        if self.current_index is None or not self.collection:
            return None
        return self.collection[self.current_index]

    def __len__(self) -> int:
        return len(self.collection)


@dataclass(frozen=True)
class WindowGeometry:
    x: int
    y: int
    width: int
    height: int

    def offset(self, dx: int, dy: int) -> WindowGeometry:
        return replace(self, x=self.x + dx, y=self.y + dy)


@dataclass(frozen=True)
class WindowSpawnRequest:
    """One-shot request to open a synchronized clone window."""

    origin_path: str
    sort_spec: SortSpec
    geometry: WindowGeometry


@dataclass(frozen=True)
class LaunchParams:
    """Parameters a clone window reads from its own startup URL."""

    image_path: str
    sort_spec: SortSpec


@dataclass(frozen=True)
class InitPayload:
    """Authoritative state pushed to a freshly created clone window."""

    initial_path: str
    full_image_list: tuple[str, ...]
    sort_by: str
    sort_order: str

    def to_dict(self) -> dict:
        return {
            "initialPath": self.initial_path,
            "fullImageList": list(self.full_image_list),
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
        }

    @classmethod
    def from_dict(cls, data: dict) -> InitPayload:
        return cls(
            initial_path=str(data.get("initialPath", "")),
            full_image_list=tuple(str(p) for p in data.get("fullImageList") or ()),
            sort_by=str(data.get("sortBy", SORT_NAME)),
            sort_order=str(data.get("sortOrder", ORDER_ASC)),
        )

    @property
    def sort_spec(self) -> SortSpec:
        return SortSpec(key=self.sort_by, order=self.sort_order)


@dataclass(frozen=True)
class StartupInfo:
    """Folder (and optional file) to open when the browsing window starts."""

    folder: str
    file: str | None = None


@dataclass(frozen=True)
class RootFolder:
    id: str
    name: str
    path: str
