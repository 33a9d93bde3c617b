"""Sorting service for directory listings and image collections.

Directories always precede files; only the comparison inside each partition
honours the sort order. Sorting is stable, so equal keys keep their input order
in both directions, and results are memoized on `(entries, spec)` so every view
that needs an ordered listing shares one engine.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import lru_cache
import os
from typing import Any

from core.models import SORT_DATE, SORT_NAME, SORT_SIZE, SORT_TYPE, FileEntry, SortSpec


def file_extension(name: str) -> str:
    """Return the text after the last dot, or "" when there is none.

    A leading dot (".bashrc") does not start an extension.
    """
    idx = name.rfind(".")
    if idx <= 0:
        return ""
    return name[idx + 1 :]


def _text_key(value: str) -> tuple[str, str]:
    # Case-insensitive collation with the raw text as tie-breaker
    return (value.casefold(), value)


def _entry_key(key: str) -> Callable[[FileEntry], Any] | None:
    if key == SORT_NAME:
        return lambda e: _text_key(e.name)
    if key == SORT_TYPE:
        return lambda e: _text_key(file_extension(e.name))
    if key == SORT_DATE:
        return lambda e: e.modified_at
    if key == SORT_SIZE:
        return lambda e: e.size_bytes
    return None


@lru_cache(maxsize=32)
def _sort_cached(entries: tuple[FileEntry, ...], spec: SortSpec) -> tuple[FileEntry, ...]:
    dirs = [e for e in entries if e.is_dir]
    files = [e for e in entries if not e.is_dir]
    key_fn = _entry_key(spec.key)
    if key_fn is not None:
        reverse = not spec.ascending
        dirs.sort(key=key_fn, reverse=reverse)
        files.sort(key=key_fn, reverse=reverse)
    return tuple(dirs + files)


class SortService:
    """Orders `FileEntry` listings and flat image-path collections."""

    def sort(self, entries: Iterable[FileEntry], spec: SortSpec) -> list[FileEntry]:
        """Return a new list ordered per `spec`, directories first.

        Args:
            entries: Listing to order; it is not mutated.
            spec: Sort key and order. Unknown keys keep input order.
        """
        return list(_sort_cached(tuple(entries), spec))

    def sort_paths(
        self,
        paths: Iterable[str],
        spec: SortSpec,
        stat: Callable[[str], tuple[int, int]],
    ) -> list[str]:
        """Order plain file paths with the same comparator as `sort`.

        Args:
            paths: File paths (no directories).
            spec: Sort key and order.
            stat: Returns `(modified_at, size_bytes)` for a path.
        """
        entries = []
        for p in paths:
            modified_at, size_bytes = stat(p)
            entries.append(
                FileEntry(
                    name=os.path.basename(p),
                    path=p,
                    is_dir=False,
                    modified_at=modified_at,
                    size_bytes=size_bytes,
                )
            )
        return [e.path for e in self.sort(entries, spec)]

    @staticmethod
    def clear_cache() -> None:
        _sort_cached.cache_clear()
