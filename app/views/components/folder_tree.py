"""FolderTreeController: lazily expanding folder tree fed by the directory service."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QModelIndex, QPersistentModelIndex
from PySide6.QtGui import QStandardItem, QStandardItemModel
from PySide6.QtWidgets import QAbstractItemView, QTreeView
from loguru import logger

from app.views.constants import LOADED_ROLE, PATH_ROLE
from core.models import ORDER_ASC, SORT_NAME, FileEntry, RootFolder, SortSpec
from core.services.interfaces import DirectoryService, TaskRunner
from core.services.sort_service import SortService

_PLACEHOLDER = "…"


class FolderTreeController:
    """Manages the folder tree view and its model.

    Children of a folder are fetched the first time it is expanded; clicking a
    folder name reports its path to `on_folder_selected`.
    """

    def __init__(
        self,
        tree_view: QTreeView,
        service: DirectoryService,
        runner: TaskRunner,
        on_folder_selected: Callable[[str], None],
    ) -> None:
        """Initialize with a QTreeView instance.

        Args:
            tree_view: The QTreeView widget to manage
            service: Directory service used to list roots and sub-folders
            runner: Task runner for off-thread listing
            on_folder_selected: Callback receiving the clicked folder path
        """
        self.tree = tree_view
        self._service = service
        self._runner = runner
        self._on_folder_selected = on_folder_selected
        self._sorter = SortService()
        self.model = QStandardItemModel(self.tree)
        self.model.setHorizontalHeaderLabels(["Folders"])

    def setup_tree_properties(self) -> None:
        self.tree.setModel(self.model)
        self.tree.setHeaderHidden(False)
        self.tree.setUniformRowHeights(True)
        self.tree.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.tree.setSelectionMode(QAbstractItemView.SingleSelection)
        self.tree.expanded.connect(self._on_expanded)
        self.tree.clicked.connect(self._on_clicked)

    def load_roots(self) -> None:
        self._runner.submit(
            self._service.get_root_folders,
            self._populate_roots,
            lambda ex: logger.error("Error loading root folders: {}", ex),
        )

    def _populate_roots(self, roots: list[RootFolder]) -> None:
        self.model.removeRows(0, self.model.rowCount())
        for root in roots:
            self.model.appendRow(self._make_item(root.name, root.path))

    def _make_item(self, name: str, path: str) -> QStandardItem:
        item = QStandardItem(name)
        item.setEditable(False)
        item.setData(path, PATH_ROLE)
        item.setData(False, LOADED_ROLE)
        item.setToolTip(path)
        # Placeholder so the expand arrow shows before children are known
        item.appendRow(QStandardItem(_PLACEHOLDER))
        return item

    def _on_expanded(self, index: QModelIndex) -> None:
        item = self.model.itemFromIndex(index)
        if item is None or item.data(LOADED_ROLE):
            return
        path = item.data(PATH_ROLE)
        if not path:
            return
        item.setData(True, LOADED_ROLE)
        # The same folder can appear under several roots; reply to this node only
        target = QPersistentModelIndex(index)
        self._runner.submit(
            lambda: self._service.get_directory_contents(path),
            lambda entries: self._populate_children(target, entries),
            lambda ex: self._on_children_failed(target, path, ex),
        )

    def _find_item(self, path: str, parent: QStandardItem | None = None) -> QStandardItem | None:
        container = parent if parent is not None else self.model.invisibleRootItem()
        for row in range(container.rowCount()):
            child = container.child(row)
            if child is None:
                continue
            if child.data(PATH_ROLE) == path:
                return child
            if child.data(LOADED_ROLE):
                found = self._find_item(path, child)
                if found is not None:
                    return found
        return None

    def _item_at(self, target: QPersistentModelIndex) -> QStandardItem | None:
        if not target.isValid():
            return None
        index = self.model.index(target.row(), target.column(), target.parent())
        return self.model.itemFromIndex(index)

    def _populate_children(self, target: QPersistentModelIndex, entries: list[FileEntry]) -> None:
        item = self._item_at(target)
        if item is None:
            return
        item.removeRows(0, item.rowCount())
        ordered = self._sorter.sort(entries, SortSpec(SORT_NAME, ORDER_ASC))
        for entry in ordered:
            if entry.is_dir:
                item.appendRow(self._make_item(entry.name, entry.path))

    def _on_children_failed(self, target: QPersistentModelIndex, path: str, ex: Exception) -> None:
        logger.error("Error loading subfolder {}: {}", path, ex)
        item = self._item_at(target)
        if item is not None:
            # Allow a retry on the next expand
            item.setData(False, LOADED_ROLE)
            self.tree.collapse(item.index())

    def _on_clicked(self, index: QModelIndex) -> None:
        path = index.data(PATH_ROLE)
        if path:
            self._on_folder_selected(str(path))

    def highlight(self, path: str | None) -> None:
        """Select the tree item for `path` if it is already loaded."""
        if not path:
            self.tree.clearSelection()
            return
        item = self._find_item(path)
        if item is None:
            self.tree.clearSelection()
            return
        self.tree.setCurrentIndex(item.index())
