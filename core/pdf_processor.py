"""PDF page rendering for the viewer using pdf2image (poppler)."""

import logging
from pathlib import Path

from pdf2image import convert_from_path, pdfinfo_from_path
from PIL import Image

logger = logging.getLogger(__name__)


class PDFProcessor:
    """Render single PDF pages as PIL Images."""

    def __init__(self, dpi: int = 110) -> None:
        self._dpi = dpi

    @property
    def dpi(self) -> int:
        return self._dpi

    def get_page_count(self, pdf_path: Path) -> int:
        """Return total page count using poppler's pdfinfo."""
        self._validate_path(pdf_path)
        info = pdfinfo_from_path(str(pdf_path))
        count: int = info.get("Pages", 0)
        logger.debug("PDF %s has %d pages", pdf_path.name, count)
        return count

    def render_page(self, pdf_path: Path, page_num: int) -> Image.Image:
        """Render a single page as a PIL Image. Pages are 1-indexed."""
        images = convert_from_path(
            str(pdf_path),
            first_page=page_num,
            last_page=page_num,
            fmt="png",
            dpi=self._dpi,
        )
        if not images:
            raise ValueError(f"No image returned for page {page_num}")
        return images[0]

    @staticmethod
    def _validate_path(pdf_path: Path) -> None:
        """Raise FileNotFoundError if path doesn't exist."""
        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF not found: {pdf_path}")
