from __future__ import annotations

import argparse
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication, QFileDialog
from loguru import logger

from app.viewmodels.main_vm import MAIN_WINDOW_HANDLE, MainVM
from app.viewmodels.viewer_vm import ViewerVM
from app.views.main_window import MainWindow
from app.views.task_runner import QtScheduler, QtTaskRunner
from app.views.viewer_window import ViewerWindow
from app.views.window_host import QtWindowHost
from core.models import ORDER_ASC, SORT_TYPE, SortSpec
from core.services.click_service import DEFAULT_CLICK_DELAY_MS
from core.services.window_sync import DEFAULT_CLONE_OFFSET
from infrastructure.directory_service import FileSystemDirectoryService
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings, LastFolderStore

BASE_DIR = Path(__file__).parent


def _parse_default_sort(settings: JsonSettings) -> SortSpec:
    key = str(settings.get("sorting.default_key", SORT_TYPE))
    order = str(settings.get("sorting.default_order", ORDER_ASC))
    return SortSpec(key=key, order=order)


def _parse_clone_offset(settings: JsonSettings) -> tuple[int, int]:
    raw = settings.get("window.clone_offset", list(DEFAULT_CLONE_OFFSET))
    if isinstance(raw, list) and len(raw) == 2:
        try:
            return int(raw[0]), int(raw[1])
        except (TypeError, ValueError):
            pass
    return DEFAULT_CLONE_OFFSET


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Folder-based image browser")
    parser.add_argument("path", nargs="?", help="Image file or folder to open")
    parser.add_argument("--clone-url", help="Start a stand-alone viewer from a startup URL")
    return parser.parse_args(argv)


def main() -> int:
    settings = JsonSettings.load_or_default(BASE_DIR / "settings.json")
    init_logging(
        level=str(settings.get("logging.level", "INFO")),
        console=bool(settings.get("logging.console", False)),
    )
    args = _parse_args(sys.argv[1:])

    app = QApplication(sys.argv[:1])

    service = FileSystemDirectoryService(
        store=LastFolderStore(),
        argv=[args.path] if args.path else [],
    )
    runner = QtTaskRunner()
    scheduler = QtScheduler(app)
    images = ImageService()
    host = QtWindowHost()
    viewers: dict[str, ViewerWindow] = {}

    def _make_viewer(handle: str, url: str) -> ViewerWindow:
        vm = ViewerVM.from_url(url, service, runner, host, handle)
        if vm is None:
            raise ValueError(f"Not a viewer startup URL: {url}")
        window = ViewerWindow(vm, runner, images, on_closed=_forget_viewer)
        viewers[handle] = window
        return window

    def _forget_viewer(handle: str) -> None:
        viewers.pop(handle, None)
        host.unregister(handle)

    host.set_window_factory(_make_viewer)

    if args.clone_url:
        handle = "viewer"
        window = _make_viewer(handle, args.clone_url)
        host.register(handle, window)
        window.show()
        logger.info("Stand-alone viewer started from {}", args.clone_url)
        return app.exec()

    vm = MainVM(
        service,
        runner,
        scheduler,
        host,
        default_sort=_parse_default_sort(settings),
        click_delay_ms=settings.get_int("interaction.double_click_ms", DEFAULT_CLICK_DELAY_MS),
        clone_offset=_parse_clone_offset(settings),
        window_handle=MAIN_WINDOW_HANDLE,
    )
    win = MainWindow(vm=vm, service=service, runner=runner, image_service=images, settings=settings)
    service.set_folder_chooser(
        lambda: QFileDialog.getExistingDirectory(win, "Select Folder") or None
    )
    host.register(MAIN_WINDOW_HANDLE, win)
    win.show()
    win.start()
    logger.info("Photo Browser started")

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
