"""Filtered paper list with an unread marker."""

from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QListWidget, QListWidgetItem

from core.paper import Paper

_UNREAD_MARK = "● "  # filled circle
_READ_MARK = "   "


class PaperList(QListWidget):
    """One row per visible paper: title, filename below."""

    paper_selected = Signal(object)  # Optional[str] paper id

    def __init__(self) -> None:
        super().__init__()
        self.setMinimumWidth(260)
        self.currentItemChanged.connect(self._on_current_changed)

    def set_papers(self, papers: List[Paper], selected_id: Optional[str]) -> None:
        """Rebuild rows without re-emitting selection."""
        self.blockSignals(True)
        self.clear()
        for paper in papers:
            mark = _READ_MARK if paper.is_read else _UNREAD_MARK
            item = QListWidgetItem(f"{mark}{paper.title}\n    {paper.filename}")
            item.setData(Qt.ItemDataRole.UserRole, paper.id)
            item.setToolTip(paper.title)
            self.addItem(item)
            if paper.id == selected_id:
                self.setCurrentItem(item)
        self.blockSignals(False)

    def _on_current_changed(self, current: Optional[QListWidgetItem], _previous) -> None:
        paper_id = current.data(Qt.ItemDataRole.UserRole) if current else None
        self.paper_selected.emit(paper_id)
