"""First-page text extraction using PyMuPDF."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

# FileDataError and EmptyFileError both derive from RuntimeError
_OPEN_ERRORS = (RuntimeError, OSError, ValueError)


def first_page_text(pdf_path: Path) -> Optional[str]:
    """Return plain text of page 1, or None if unavailable.

    Missing files, non-PDF bytes, encrypted and empty documents all
    come back as None; callers fall back to the filename.
    """
    try:
        with fitz.open(pdf_path) as doc:
            if doc.needs_pass or doc.page_count == 0:
                logger.debug("No readable first page in %s", pdf_path.name)
                return None
            text = doc[0].get_text("text")
    except _OPEN_ERRORS as exc:
        logger.debug("Text extraction failed for %s: %s", pdf_path, exc)
        return None

    return text or None


def page_sizes(pdf_path: Path) -> List[Tuple[float, float]]:
    """Return (width, height) in PDF points for every page."""
    try:
        with fitz.open(pdf_path) as doc:
            return [(page.rect.width, page.rect.height) for page in doc]
    except _OPEN_ERRORS as exc:
        logger.debug("Could not open %s: %s", pdf_path, exc)
        return []
