from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import QComboBox, QHBoxLayout, QPushButton, QWidget

from app.views.constants import ARROW_ASC, ARROW_DESC, SORT_CHOICES
from core.models import ORDER_ASC, ORDER_DESC, SortSpec


class SortControls(QWidget):
    """Sort key combo plus an ascending/descending toggle."""

    def __init__(
        self,
        on_key_changed: Callable[[str], None],
        on_order_changed: Callable[[str], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._on_key_changed = on_key_changed
        self._on_order_changed = on_order_changed
        self._order = ORDER_ASC

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.key_box = QComboBox()
        for label, key in SORT_CHOICES:
            self.key_box.addItem(label, key)
        self.key_box.currentIndexChanged.connect(self._emit_key)

        self.order_btn = QPushButton(ARROW_ASC)
        self.order_btn.setFixedWidth(36)
        self.order_btn.clicked.connect(self._toggle_order)

        layout.addWidget(self.key_box)
        layout.addWidget(self.order_btn)
        layout.addStretch(1)

    def set_spec(self, spec: SortSpec) -> None:
        """Reflect `spec` without re-emitting change callbacks."""
        self.key_box.blockSignals(True)
        idx = self.key_box.findData(spec.key)
        if idx >= 0:
            self.key_box.setCurrentIndex(idx)
        self.key_box.blockSignals(False)
        self._order = spec.order
        self.order_btn.setText(ARROW_ASC if spec.ascending else ARROW_DESC)

    def _emit_key(self, _index: int) -> None:
        key = self.key_box.currentData()
        if key:
            self._on_key_changed(str(key))

    def _toggle_order(self) -> None:
        self._order = ORDER_DESC if self._order == ORDER_ASC else ORDER_ASC
        self.order_btn.setText(ARROW_ASC if self._order == ORDER_ASC else ARROW_DESC)
        self._on_order_changed(self._order)
