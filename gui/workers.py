"""QThread workers for background PDF work.

TitleWorker: first-page text → Paper (store untouched, UI thread commits).
RenderWorker: PDF pages → PNG images in the render cache.
"""

import logging
from pathlib import Path
from typing import List

from PySide6.QtCore import QThread, Signal

from core.importer import PaperImporter
from core.page_cache import (
    cache_dir_for_pdf,
    page_image_path,
    purge_stale_caches,
    render_single_page,
)
from core.pdf_processor import PDFProcessor

logger = logging.getLogger(__name__)


class TitleWorker(QThread):
    """Build Papers for claimed PDFs, one at a time.

    Emits each Paper back to the UI thread; the receiver commits it.
    Never reads or writes the store.
    """

    paper_built = Signal(object)        # Paper
    paper_failed = Signal(str, str)     # filename, error_msg

    def __init__(self, importer: PaperImporter, pdf_paths: List[Path]) -> None:
        super().__init__()
        self._importer = importer
        self._pdf_paths = list(pdf_paths)

    def run(self) -> None:
        """Extract a title for each queued PDF."""
        for pdf_path in self._pdf_paths:
            try:
                paper = self._importer.build_paper(pdf_path)
            except Exception as exc:
                logger.error("Title extraction failed for %s: %s", pdf_path.name, exc)
                self.paper_failed.emit(pdf_path.name, str(exc))
                continue
            self.paper_built.emit(paper)


class RenderWorker(QThread):
    """Render all pages of a PDF to the cache folder.

    Skips pages that already exist on disk.
    """

    page_rendered = Signal(int, int)        # page_num, total
    render_finished = Signal(str, int)      # cache_dir path, total pages
    render_failed = Signal(str)             # error_msg

    def __init__(self, pdf_path: Path, dpi: int) -> None:
        super().__init__()
        self._pdf_path = pdf_path
        self._dpi = dpi
        self._cancelled = False

    def cancel(self) -> None:
        """Request cooperative cancellation."""
        self._cancelled = True

    def run(self) -> None:
        """Render each page to the cache folder."""
        try:
            cache_dir = cache_dir_for_pdf(self._pdf_path)
            purge_stale_caches(self._pdf_path)
            total = PDFProcessor(dpi=self._dpi).get_page_count(self._pdf_path)
        except Exception as exc:
            logger.error("Cannot render %s: %s", self._pdf_path.name, exc)
            self.render_failed.emit(str(exc))
            return

        for page_num in range(1, total + 1):
            if self._cancelled:
                logger.info("Rendering cancelled at page %d", page_num)
                return

            output = page_image_path(cache_dir, page_num)
            try:
                render_single_page(self._pdf_path, page_num, output, dpi=self._dpi)
            except Exception as exc:
                logger.error("Rendering page %d of %s failed: %s", page_num, self._pdf_path.name, exc)
                self.render_failed.emit(str(exc))
                return
            self.page_rendered.emit(page_num, total)

        self.render_finished.emit(str(cache_dir), total)
