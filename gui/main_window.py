"""Main application window: onboarding or the three-pane library.

Wires the folder watcher to the import queue and keeps the list, the
sidebar and the detail pane in sync with the store and AppState.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QStackedLayout,
    QToolBar,
    QWidget,
)

from core.app_state import AppState
from core.config import Config, save_config
from core.config_validator import ConfigValidator
from core.importer import PaperImporter
from core.library_filter import ReadFilter, collect_tags
from core.paper_store import PaperStore, StoreWriteError
from gui.folder_watcher import FolderWatcher, watch_folder
from gui.import_coordinator import ImportCoordinator
from gui.onboarding import OnboardingScreen
from gui.paper_detail import PaperDetail
from gui.paper_list import PaperList
from gui.sidebar import Sidebar

logger = logging.getLogger(__name__)

_IDX_ONBOARDING = 0
_IDX_LIBRARY = 1


class MainWindow(QMainWindow):
    """Top-level window with toolbar, status bar, and stacked central area.

    Responsibilities:
    - UI setup and layout
    - Folder watcher lifetime
    - Signal routing between store, state and widgets
    """

    def __init__(self, config: Config, store: PaperStore, state: AppState) -> None:
        super().__init__()
        self._config = config
        self._store = store
        self._state = state
        self._watcher: Optional[FolderWatcher] = None

        self._importer = PaperImporter(store)
        self._coordinator = ImportCoordinator(self._importer, parent=self)
        self._coordinator.status_updated.connect(self._set_status)
        self._coordinator.queue_drained.connect(
            lambda: self._set_status("Library up to date")
        )

        self.setWindowTitle("Lectern")
        self._restore_geometry()

        self._setup_central_widget()
        self._setup_toolbar()
        self._setup_status_bar()

        self._unsubscribe_store = store.subscribe(self._on_store_changed)
        self._unsubscribe_state = state.subscribe(self._refresh_list)

        self._apply_folder()

    # ── Central widget ──────────────────────────────────────────────

    def _setup_central_widget(self) -> None:
        """Onboarding page and the sidebar | list | detail splitter."""
        self._central = QWidget()
        self._stack = QStackedLayout(self._central)

        self._onboarding = OnboardingScreen()
        self._onboarding.folder_requested.connect(self._on_choose_folder)
        self._stack.addWidget(self._onboarding)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.setChildrenCollapsible(False)

        self._sidebar = Sidebar()
        self._sidebar.read_filter_changed.connect(self._on_read_filter_changed)
        self._sidebar.tag_changed.connect(self._state.select_tag)
        splitter.addWidget(self._sidebar)

        self._paper_list = PaperList()
        self._paper_list.paper_selected.connect(self._on_paper_selected)
        splitter.addWidget(self._paper_list)

        self._detail = PaperDetail(self._store, render_dpi=self._config.render_dpi)
        self._detail.status_message.connect(self._set_status)
        splitter.addWidget(self._detail)

        splitter.setSizes([200, 320, 880])
        self._stack.addWidget(splitter)

        self.setCentralWidget(self._central)

    # ── Toolbar ─────────────────────────────────────────────────────

    def _setup_toolbar(self) -> None:
        """Choose Folder, Import Folder, Clear Library."""
        toolbar = QToolBar("Main")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self._action_folder = toolbar.addAction("Choose Folder")
        self._action_folder.triggered.connect(self._on_choose_folder)

        self._action_import = toolbar.addAction("Import Folder")
        self._action_import.setToolTip("Import the PDFs of another folder once")
        self._action_import.triggered.connect(self._on_import_folder)

        toolbar.addSeparator()

        self._action_clear = toolbar.addAction("Clear Library")
        self._action_clear.triggered.connect(self._on_clear_library)

    # ── Status bar ──────────────────────────────────────────────────

    def _setup_status_bar(self) -> None:
        """Add persistent status label."""
        self._status_label = QLabel("Ready")
        self.statusBar().addPermanentWidget(self._status_label)

    def _set_status(self, text: str) -> None:
        """Update the persistent status label."""
        self._status_label.setText(text)

    # ── Folder watching ─────────────────────────────────────────────

    def _apply_folder(self) -> None:
        """Show onboarding or start watching the chosen folder."""
        self._stop_watcher()

        folder = self._state.folder
        if folder is None:
            is_valid, error_msg = ConfigValidator.validate_folder(self._config)
            if not is_valid and self._config.papers_folder:
                self._set_status(error_msg)
            self._stack.setCurrentIndex(_IDX_ONBOARDING)
            return

        self._stack.setCurrentIndex(_IDX_LIBRARY)
        self._refresh_list()
        self._watcher = watch_folder(
            folder,
            self._coordinator.queue_pdf,
            poll_interval_ms=self._config.poll_interval_ms,
            parent=self,
        )
        self._set_status(f"Watching {folder}")

    def _stop_watcher(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher.deleteLater()
            self._watcher = None

    # ── User actions ────────────────────────────────────────────────

    def _on_choose_folder(self) -> None:
        """Pick the watched papers folder."""
        folder = QFileDialog.getExistingDirectory(
            self, "Choose Your Papers Folder"
        )
        if not folder:
            return
        self._state.set_folder(Path(folder))
        if self._state.folder is None:
            QMessageBox.warning(self, "Folder", f"Cannot read {folder}")
        self._apply_folder()

    def _on_import_folder(self) -> None:
        """One-shot import of every PDF in a chosen folder."""
        folder = QFileDialog.getExistingDirectory(self, "Import Papers")
        if folder:
            self._coordinator.import_folder(Path(folder))

    def _on_clear_library(self) -> None:
        answer = QMessageBox.question(
            self, "Clear Library",
            "Remove every paper from the library? PDF files are not deleted.",
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        try:
            removed = self._store.clear()
        except StoreWriteError as exc:
            QMessageBox.critical(self, "Clear Library", f"Could not clear library:\n{exc}")
            return
        self._state.select_paper(None)
        self._detail.show_paper(None, None)
        self._set_status(f"Removed {removed} paper(s)")

    def _on_read_filter_changed(self, read_filter: ReadFilter) -> None:
        self._state.set_read_filter(read_filter)

    def _on_paper_selected(self, paper_id: Optional[str]) -> None:
        self._state.select_paper(paper_id)
        paper = self._store.get(paper_id) if paper_id else None
        pdf_path = self._state.pdf_path_for(paper) if paper else None
        self._detail.show_paper(paper, pdf_path)

    # ── Refresh ─────────────────────────────────────────────────────

    def _on_store_changed(self) -> None:
        self._refresh_list()
        self._detail.refresh()

    def _refresh_list(self) -> None:
        papers = self._store.all()
        self._sidebar.set_tags(collect_tags(papers), self._state.selected_tag)
        self._paper_list.set_papers(
            self._state.visible_papers(papers), self._state.selected_paper_id
        )

    # ── Window lifecycle ────────────────────────────────────────────

    def _restore_geometry(self) -> None:
        self.resize(self._config.window_width, self._config.window_height)
        if self._config.window_x >= 0 and self._config.window_y >= 0:
            self.move(self._config.window_x, self._config.window_y)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Stop watching, let imports finish, remember window geometry."""
        self._stop_watcher()
        self._coordinator.shutdown()
        self._detail.shutdown()
        self._unsubscribe_store()
        self._unsubscribe_state()

        self._config.window_width = self.width()
        self._config.window_height = self.height()
        self._config.window_x = self.x()
        self._config.window_y = self.y()
        save_config(self._config, self._state.config_path)
        super().closeEvent(event)
