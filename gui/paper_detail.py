"""Detail pane: metadata form, read toggle, markup tools and the PDF."""

import logging
from pathlib import Path
from typing import Dict, Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QStackedLayout,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from core.annotations import AnnotationError, AnnotationSession, MarkupType
from core.paper import Paper, format_comma_list, parse_comma_list
from core.paper_store import PaperNotFoundError, PaperStore, StoreWriteError
from gui.pdf_view import PdfView

logger = logging.getLogger(__name__)

_IDX_EMPTY = 0
_IDX_PAPER = 1


class PaperDetail(QWidget):
    """Edit one paper and annotate its PDF."""

    status_message = Signal(str)

    def __init__(self, store: PaperStore, render_dpi: int) -> None:
        super().__init__()
        self._store = store
        self._paper: Optional[Paper] = None
        self._session: Optional[AnnotationSession] = None
        self._active_tool: Optional[MarkupType] = None
        self._tool_buttons: Dict[MarkupType, QToolButton] = {}

        self._stack = QStackedLayout(self)
        self._placeholder = QLabel("Select a paper")
        self._stack.addWidget(self._placeholder)

        page = QWidget()
        layout = QVBoxLayout(page)
        self._setup_top_bar(layout)
        self._setup_metadata_form(layout)

        self._pdf_view = PdfView(dpi=render_dpi)
        self._pdf_view.markup_requested.connect(self._on_markup_requested)
        layout.addWidget(self._pdf_view, stretch=1)
        self._stack.addWidget(page)

    # ── UI Setup ────────────────────────────────────────────────────

    def _setup_top_bar(self, parent_layout: QVBoxLayout) -> None:
        """Title label, markup tools, undo/redo and read toggle."""
        bar = QHBoxLayout()

        self._title_label = QLabel()
        self._title_label.setStyleSheet("font-size: 18px; font-weight: bold;")
        bar.addWidget(self._title_label, stretch=1)

        self._tool_group = QButtonGroup(self)
        self._tool_group.setExclusive(False)
        for markup_type in MarkupType:
            btn = QToolButton()
            btn.setText(markup_type.label)
            btn.setToolTip(markup_type.label)
            btn.setCheckable(True)
            btn.toggled.connect(
                lambda checked, t=markup_type: self._on_tool_toggled(t, checked)
            )
            self._tool_group.addButton(btn)
            self._tool_buttons[markup_type] = btn
            bar.addWidget(btn)

        self._undo_btn = QPushButton("Undo")
        self._undo_btn.clicked.connect(self._on_undo)
        bar.addWidget(self._undo_btn)

        self._redo_btn = QPushButton("Redo")
        self._redo_btn.clicked.connect(self._on_redo)
        bar.addWidget(self._redo_btn)

        bar.addSpacing(16)

        self._read_btn = QPushButton()
        self._read_btn.clicked.connect(self._on_toggle_read)
        bar.addWidget(self._read_btn)

        parent_layout.addLayout(bar)

    def _setup_metadata_form(self, parent_layout: QVBoxLayout) -> None:
        """Title / authors / tags line edits with a Save button."""
        form = QFormLayout()
        self._title_edit = QLineEdit()
        self._authors_edit = QLineEdit()
        self._authors_edit.setPlaceholderText("Comma separated")
        self._tags_edit = QLineEdit()
        self._tags_edit.setPlaceholderText("Comma separated")
        form.addRow("Title:", self._title_edit)
        form.addRow("Authors:", self._authors_edit)
        form.addRow("Tags:", self._tags_edit)
        parent_layout.addLayout(form)

        row = QHBoxLayout()
        row.addStretch()
        self._save_btn = QPushButton("Save Metadata")
        self._save_btn.clicked.connect(self._on_save_metadata)
        row.addWidget(self._save_btn)
        parent_layout.addLayout(row)

    # ── Public API ──────────────────────────────────────────────────

    def show_paper(self, paper: Optional[Paper], pdf_path: Optional[Path]) -> None:
        """Display paper, or the placeholder when paper is None."""
        self._close_session()
        self._paper = paper
        if paper is None:
            self._pdf_view.clear()
            self._stack.setCurrentIndex(_IDX_EMPTY)
            return

        self._populate(paper)
        self._stack.setCurrentIndex(_IDX_PAPER)

        if pdf_path is None:
            self._pdf_view.clear("No folder selected")
        elif not pdf_path.is_file():
            self._pdf_view.clear(f"PDF not found: {paper.filename}")
        else:
            self._open_session(pdf_path)
            self._pdf_view.load(pdf_path)
        self._update_tool_states()

    def refresh(self) -> None:
        """Re-read the shown paper from the store (after external edits)."""
        if self._paper is None:
            return
        fresh = self._store.get(self._paper.id)
        if fresh is None:
            self.show_paper(None, None)
        else:
            self._paper = fresh
            self._populate(fresh)

    def shutdown(self) -> None:
        self._close_session()
        self._pdf_view.shutdown()

    # ── Populate ────────────────────────────────────────────────────

    def _populate(self, paper: Paper) -> None:
        self._title_label.setText(paper.title)
        self._title_edit.setText(paper.title)
        self._authors_edit.setText(format_comma_list(paper.authors))
        self._tags_edit.setText(format_comma_list(paper.tags))
        self._read_btn.setText("Mark Unread" if paper.is_read else "Mark Read")

    def _update_tool_states(self) -> None:
        has_session = self._session is not None
        for btn in self._tool_buttons.values():
            btn.setEnabled(has_session)
        self._undo_btn.setEnabled(has_session and self._session.can_undo)
        self._redo_btn.setEnabled(has_session and self._session.can_redo)

    # ── Store edits ─────────────────────────────────────────────────

    def _update_paper(self, **fields) -> None:
        if self._paper is None:
            return
        try:
            self._paper = self._store.update(self._paper.id, **fields)
        except (PaperNotFoundError, StoreWriteError) as exc:
            QMessageBox.warning(self, "Save Error", f"Could not save changes:\n{exc}")
            return
        self._populate(self._paper)

    def _on_save_metadata(self) -> None:
        self._update_paper(
            title=self._title_edit.text().strip() or self._paper.title,
            authors=parse_comma_list(self._authors_edit.text()),
            tags=parse_comma_list(self._tags_edit.text()),
        )
        self.status_message.emit("Metadata saved")

    def _on_toggle_read(self) -> None:
        if self._paper is not None:
            self._update_paper(is_read=not self._paper.is_read)

    # ── Markup ──────────────────────────────────────────────────────

    def _open_session(self, pdf_path: Path) -> None:
        try:
            self._session = AnnotationSession(pdf_path)
        except AnnotationError as exc:
            logger.warning("Annotations unavailable for %s: %s", pdf_path.name, exc)
            self._session = None

    def _close_session(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def _on_tool_toggled(self, markup_type: MarkupType, checked: bool) -> None:
        """Tool buttons act as an optional radio group: click again to turn off."""
        if checked:
            self._active_tool = markup_type
            for other, btn in self._tool_buttons.items():
                if other is not markup_type and btn.isChecked():
                    btn.setChecked(False)
        elif self._active_tool is markup_type:
            self._active_tool = None
        self._pdf_view.set_selection_enabled(self._active_tool is not None)

    def _on_markup_requested(self, page_index: int, rect: object) -> None:
        if self._session is None or self._active_tool is None:
            return
        self._run_markup_action(
            lambda: self._session.add_markup(page_index, rect, self._active_tool)
        )

    def _on_undo(self) -> None:
        if self._session is not None:
            self._run_markup_action(self._session.undo)

    def _on_redo(self) -> None:
        if self._session is not None:
            self._run_markup_action(self._session.redo)

    def _run_markup_action(self, action) -> None:
        """Apply a markup change, then re-render the saved file."""
        try:
            changed = action()
        except AnnotationError as exc:
            QMessageBox.critical(self, "Save Error", f"Failed to save PDF:\n{exc}")
            return

        if changed:
            self._pdf_view.reload()
        else:
            self.status_message.emit("No text under selection")
        self._update_tool_states()
