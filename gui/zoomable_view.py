"""QGraphicsView subclass with Ctrl+scroll zoom, drag-pan and area selection."""

from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QMouseEvent, QWheelEvent
from PySide6.QtWidgets import QGraphicsView

_ZOOM_IN_FACTOR = 1.15
_ZOOM_OUT_FACTOR = 1.0 / _ZOOM_IN_FACTOR


class ZoomableGraphicsView(QGraphicsView):
    """Graphics view with Ctrl+scroll zoom.

    Drag pans by default. In selection mode a drag draws a rubber band
    and emits area_selected with the rectangle in scene coordinates.
    """

    area_selected = Signal(QRectF)

    def __init__(self) -> None:
        super().__init__()
        self._band_start: Optional[QPointF] = None
        self._band_end: Optional[QPointF] = None
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setRenderHints(
            self.renderHints()
            | self.renderHints().SmoothPixmapTransform
        )
        self.rubberBandChanged.connect(self._on_rubber_band_changed)

    def set_selection_mode(self, enabled: bool) -> None:
        """Switch between rubber-band selection and hand panning."""
        mode = (
            QGraphicsView.DragMode.RubberBandDrag if enabled
            else QGraphicsView.DragMode.ScrollHandDrag
        )
        self.setDragMode(mode)

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Zoom on Ctrl+scroll, normal scroll otherwise."""
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            factor = _ZOOM_IN_FACTOR if event.angleDelta().y() > 0 else _ZOOM_OUT_FACTOR
            self.scale(factor, factor)
            event.accept()
        else:
            super().wheelEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Finish a rubber-band selection."""
        super().mouseReleaseEvent(event)
        if self._band_start is not None and self._band_end is not None:
            rect = QRectF(self._band_start, self._band_end).normalized()
            if rect.width() > 1 and rect.height() > 1:
                self.area_selected.emit(rect)
        self._band_start = None
        self._band_end = None

    def fit_to_width(self) -> None:
        """Scale view so the scene fits the viewport width."""
        scene = self.scene()
        if scene is None:
            return
        rect = scene.itemsBoundingRect()
        if rect.width() <= 0:
            return
        self.resetTransform()
        factor = self.viewport().width() / rect.width()
        self.scale(factor, factor)

    def _on_rubber_band_changed(self, viewport_rect, from_scene: QPointF, to_scene: QPointF) -> None:
        # Qt reports a null rect with null points when the drag ends
        if viewport_rect.isNull():
            return
        self._band_start = QPointF(from_scene)
        self._band_end = QPointF(to_scene)
