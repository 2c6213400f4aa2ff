"""Continuous-scroll PDF viewer built on cached page renders."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from PySide6.QtCore import QRectF, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QGraphicsScene,
    QHBoxLayout,
    QLabel,
    QVBoxLayout,
    QWidget,
)

from core.page_cache import list_cached_pages
from core.pdf_text import page_sizes
from gui.workers import RenderWorker
from gui.zoomable_view import ZoomableGraphicsView

logger = logging.getLogger(__name__)

_PAGE_GAP = 16  # px between pages in the scene


class PdfView(QWidget):
    """Show every page of a PDF stacked vertically.

    When selection is enabled, a dragged rectangle is translated to
    PDF points on the page under it and emitted as markup_requested.
    """

    markup_requested = Signal(int, object)  # page_index, (x0, y0, x1, y1) in points

    def __init__(self, dpi: int = 110) -> None:
        super().__init__()
        self._dpi = dpi
        self._pdf_path: Optional[Path] = None
        self._worker: Optional[RenderWorker] = None
        self._page_sizes: List[Tuple[float, float]] = []
        # (top y, height, width) in scene pixels, per page
        self._page_boxes: List[Tuple[float, float, float]] = []

        self._setup_ui()

    # ── UI Setup ────────────────────────────────────────────────────

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._scene = QGraphicsScene()
        self._view = ZoomableGraphicsView()
        self._view.setScene(self._scene)
        self._view.area_selected.connect(self._on_area_selected)
        layout.addWidget(self._view)

        info = QHBoxLayout()
        self._status = QLabel("")
        info.addWidget(self._status)
        info.addStretch()
        layout.addLayout(info)

    # ── Public API ──────────────────────────────────────────────────

    def load(self, pdf_path: Path) -> None:
        """Render pdf_path in the background and show it when ready."""
        self._cancel_worker()
        self._pdf_path = pdf_path
        self._scene.clear()
        self._page_boxes = []
        self._page_sizes = page_sizes(pdf_path)
        self._status.setText("Loading PDF…")

        self._worker = RenderWorker(pdf_path, dpi=self._dpi)
        self._worker.page_rendered.connect(self._on_page_rendered)
        self._worker.render_finished.connect(self._on_render_finished)
        self._worker.render_failed.connect(self._on_render_failed)
        self._worker.start()

    def reload(self) -> None:
        """Re-render the current PDF, e.g. after it was annotated."""
        if self._pdf_path is not None:
            self.load(self._pdf_path)

    def clear(self, message: str = "") -> None:
        self._cancel_worker()
        self._pdf_path = None
        self._scene.clear()
        self._page_boxes = []
        self._status.setText(message)

    def set_selection_enabled(self, enabled: bool) -> None:
        self._view.set_selection_mode(enabled)

    def shutdown(self) -> None:
        self._cancel_worker()

    # ── Rendering ───────────────────────────────────────────────────

    def _cancel_worker(self) -> None:
        if self._worker is not None:
            self._worker.cancel()
            self._worker.wait()
            self._worker = None

    def _on_page_rendered(self, page_num: int, total: int) -> None:
        self._status.setText(f"Rendering page {page_num}/{total}")

    def _on_render_failed(self, error_msg: str) -> None:
        logger.warning("Viewer could not render %s: %s", self._pdf_path, error_msg)
        self._status.setText(f"Could not display PDF: {error_msg}")

    def _on_render_finished(self, cache_dir: str, total: int) -> None:
        """Stack cached page images into the scene."""
        self._scene.clear()
        self._page_boxes = []
        y = 0.0
        for image_path in list_cached_pages(Path(cache_dir)):
            pixmap = QPixmap(str(image_path))
            item = self._scene.addPixmap(pixmap)
            item.setPos(0, y)
            self._page_boxes.append((y, float(pixmap.height()), float(pixmap.width())))
            y += pixmap.height() + _PAGE_GAP

        self._view.fit_to_width()
        self._status.setText(f"{total} page(s)")

    # ── Selection → PDF coordinates ─────────────────────────────────

    def _on_area_selected(self, rect: QRectF) -> None:
        hit = self._page_at(rect.center().y())
        if hit is None:
            return

        page_index, (top, _height, width) = hit
        if page_index >= len(self._page_sizes) or width <= 0:
            return

        scale = self._page_sizes[page_index][0] / width
        points = (
            rect.left() * scale,
            (rect.top() - top) * scale,
            rect.right() * scale,
            (rect.bottom() - top) * scale,
        )
        self.markup_requested.emit(page_index, points)

    def _page_at(self, y: float) -> Optional[Tuple[int, Tuple[float, float, float]]]:
        for index, box in enumerate(self._page_boxes):
            top, height, _ = box
            if top <= y <= top + height:
                return index, box
        return None

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        if self._page_boxes:
            self._view.fit_to_width()
