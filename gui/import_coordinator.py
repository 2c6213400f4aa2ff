"""Single-writer import queue between the folder watcher and the store.

Claims and commits happen on the UI thread; title extraction runs in a
TitleWorker. Only one worker runs at a time.
"""

import logging
from collections import deque
from pathlib import Path
from typing import Deque, Optional

from PySide6.QtCore import QObject, Signal

from core.folder_scanner import FolderScanner
from core.importer import PaperImporter
from gui.workers import TitleWorker

logger = logging.getLogger(__name__)


class ImportCoordinator(QObject):
    """Queue detected PDFs and import them in the background."""

    # Signals
    queue_drained = Signal()
    status_updated = Signal(str)  # status message

    def __init__(self, importer: PaperImporter, parent: Optional[QObject] = None) -> None:
        """Initialize import coordinator.

        Args:
            importer: Importer bound to the library store
            parent: Optional parent QObject
        """
        super().__init__(parent)
        self._importer = importer
        self._scanner = FolderScanner()
        self._queue: Deque[Path] = deque()
        self._worker: Optional[TitleWorker] = None

    def queue_pdf(self, pdf_path: Path) -> None:
        """Claim and enqueue a detected PDF; already-known files are ignored.

        Args:
            pdf_path: Path to PDF file
        """
        path = Path(str(pdf_path))
        if not self._importer.claim(path):
            return

        self._queue.append(path)
        logger.info("Import queued: %s (%d pending)", path.name, len(self._queue))
        self._start_next_batch()

    def import_folder(self, folder: Path) -> int:
        """One-shot bulk import of folder. Returns how many PDFs were queued."""
        before = len(self._queue)
        for pdf_path in self._scanner.scan(folder):
            path = Path(pdf_path)
            if self._importer.claim(path):
                self._queue.append(path)
        queued = len(self._queue) - before

        self.status_updated.emit(f"Importing {queued} paper(s) from {folder.name}")
        self._start_next_batch()
        return queued

    def shutdown(self) -> None:
        """Wait for the running worker so it isn't destroyed mid-run."""
        if self._worker is not None:
            self._worker.wait()

    # ── Internal ────────────────────────────────────────────────────

    def _start_next_batch(self) -> None:
        if self._worker is not None or not self._queue:
            return

        batch = list(self._queue)
        self._queue.clear()

        self._worker = TitleWorker(self._importer, batch)
        self._worker.paper_built.connect(self._on_paper_built)
        self._worker.paper_failed.connect(self._on_paper_failed)
        self._worker.finished.connect(self._on_worker_finished)
        self._worker.start()

    def _on_paper_built(self, paper: object) -> None:
        """Commit a built paper on the UI thread."""
        if self._importer.commit(paper):
            self.status_updated.emit(f"Imported: {paper.title}")

    def _on_paper_failed(self, filename: str, error_msg: str) -> None:
        self._importer.release(filename)
        self.status_updated.emit(f"Import failed: {filename} ({error_msg})")

    def _on_worker_finished(self) -> None:
        """Runs after every paper_built from the worker has been delivered."""
        self._worker.wait()
        self._worker = None
        if self._queue:
            self._start_next_batch()
        else:
            self.queue_drained.emit()
