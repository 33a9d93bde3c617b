"""File-system backed directory and image-list service.

All listings are one level deep. Metadata failures on individual entries are
logged and the entry skipped; a failure to open the directory itself raises
`DirectoryReadError` so the caller can keep its prior state.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import os
from pathlib import Path
import string
from typing import Any

from loguru import logger

from core.errors import DirectoryReadError, StartupInfoError
from core.models import FileEntry, RootFolder, SortSpec, StartupInfo
from core.services.navigation import is_navigable_image
from core.services.sort_service import SortService
from infrastructure.settings import LastFolderStore


def _stat_entry(path: str) -> tuple[int, int]:
    st = os.stat(path)
    return int(st.st_mtime), int(st.st_size)


class FileSystemDirectoryService:
    """Implements the `DirectoryService` protocol on the local file system."""

    def __init__(
        self,
        store: LastFolderStore | None = None,
        argv: Sequence[str] | None = None,
        folder_chooser: Callable[[], str | None] | None = None,
        sorter: SortService | None = None,
    ) -> None:
        """Create the service.

        Args:
            store: Persisted last-folder store.
            argv: Positional launch arguments (file or folder to open).
            folder_chooser: Callable showing a folder picker; returns None on cancel.
            sorter: Sort engine used for full image lists.
        """
        self._store = store or LastFolderStore()
        self._argv = list(argv or [])
        self._chooser = folder_chooser
        self._sorter = sorter or SortService()

    def set_folder_chooser(self, chooser: Callable[[], str | None]) -> None:
        self._chooser = chooser

    def get_startup_info(self) -> StartupInfo:
        if self._argv:
            target = Path(self._argv[0])
            if target.is_file():
                return StartupInfo(folder=str(target.parent), file=str(target))
            if target.is_dir():
                return StartupInfo(folder=str(target), file=None)
            raise StartupInfoError(f"Invalid path: {target}")

        last = self._store.load()
        if last and Path(last).exists():
            return StartupInfo(folder=last, file=None)
        raise StartupInfoError("No valid startup folder")

    def select_folder(self) -> str | None:
        if self._chooser is None:
            return None
        selected = self._chooser()
        return selected or None

    def get_directory_contents(self, path: str) -> list[FileEntry]:
        try:
            names = os.listdir(path)
        except OSError as ex:
            logger.error("Failed to read directory {}: {}", path, ex)
            raise DirectoryReadError(path, str(ex)) from ex

        items: list[FileEntry] = []
        for name in names:
            full = os.path.join(path, name)
            try:
                st = os.stat(full)
            except OSError as ex:
                logger.debug("stat failed for {}: {}", full, ex)
                continue
            is_dir = os.path.isdir(full)
            items.append(
                FileEntry(
                    name=name,
                    path=full,
                    is_dir=is_dir,
                    modified_at=int(st.st_mtime),
                    size_bytes=0 if is_dir else int(st.st_size),
                )
            )
        return items

    def get_full_image_list(self, path: str, sort_key: str, sort_order: str) -> list[str]:
        logger.info("get_full_image_list: {} ({}, {})", path, sort_key, sort_order)
        folder = path if os.path.isdir(path) else os.path.dirname(path)
        try:
            names = os.listdir(folder)
        except OSError as ex:
            logger.error("Failed to read directory {}: {}", folder, ex)
            raise DirectoryReadError(folder, str(ex)) from ex

        images = []
        for name in names:
            full = os.path.join(folder, name)
            if os.path.isfile(full) and is_navigable_image(name):
                images.append(full)

        def _safe_stat(p: str) -> tuple[int, int]:
            try:
                return _stat_entry(p)
            except OSError as ex:
                logger.debug("stat failed for {}: {}", p, ex)
                return 0, 0

        ordered = self._sorter.sort_paths(images, SortSpec(sort_key, sort_order), _safe_stat)
        logger.info("Returning {} images", len(ordered))
        return ordered

    def get_root_folders(self) -> list[RootFolder]:
        roots = [
            RootFolder(id="home", name="Home", path=str(Path.home())),
            RootFolder(id="root", name="Root", path="/"),
        ]
        if os.name == "nt":
            for drive in string.ascii_uppercase:
                drive_path = f"{drive}:\\"
                if os.path.exists(drive_path):
                    roots.append(
                        RootFolder(id=f"drive-{drive}", name=f"Drive ({drive}:)", path=drive_path)
                    )
        return roots

    def save_last_folder(self, path: str) -> None:
        try:
            self._store.save(path)
        except OSError as ex:
            logger.warning("Failed to save last folder {}: {}", path, ex)

    def log_info(self, message: str, *args: Any) -> None:
        logger.info(message, *args)

    def log_error(self, message: str, *args: Any) -> None:
        logger.error(message, *args)
