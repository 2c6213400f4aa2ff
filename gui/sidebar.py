"""Library sidebar: read-status filter and tag list."""

from typing import List, Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from core.library_filter import ReadFilter

_ALL_TAGS = "All Tags"


class Sidebar(QWidget):
    """Status buttons plus a tag list; emits the user's choices."""

    read_filter_changed = Signal(object)  # ReadFilter
    tag_changed = Signal(object)  # Optional[str]

    def __init__(self) -> None:
        super().__init__()
        self.setMinimumWidth(180)
        layout = QVBoxLayout(self)

        layout.addWidget(QLabel("STATUS"))
        self._status_group = QButtonGroup(self)
        self._status_group.setExclusive(True)
        for read_filter in ReadFilter:
            btn = QPushButton(read_filter.value)
            btn.setCheckable(True)
            btn.setChecked(read_filter is ReadFilter.ALL)
            btn.clicked.connect(
                lambda _checked=False, f=read_filter: self.read_filter_changed.emit(f)
            )
            self._status_group.addButton(btn)
            layout.addWidget(btn)

        layout.addSpacing(12)
        layout.addWidget(QLabel("TAGS"))
        self._tag_list = QListWidget()
        self._tag_list.currentItemChanged.connect(self._on_tag_selected)
        layout.addWidget(self._tag_list, stretch=1)

        self.set_tags([], None)

    def set_tags(self, tags: List[str], selected: Optional[str]) -> None:
        """Replace the tag list, keeping selected highlighted if present."""
        self._tag_list.blockSignals(True)
        self._tag_list.clear()
        self._tag_list.addItem(QListWidgetItem(_ALL_TAGS))
        current_row = 0
        for row, tag in enumerate(tags, start=1):
            self._tag_list.addItem(QListWidgetItem(tag))
            if tag == selected:
                current_row = row
        self._tag_list.setCurrentRow(current_row)
        self._tag_list.blockSignals(False)

    def _on_tag_selected(self, current: Optional[QListWidgetItem], _previous) -> None:
        if current is None or self._tag_list.row(current) == 0:
            self.tag_changed.emit(None)
        else:
            self.tag_changed.emit(current.text())
