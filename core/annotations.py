"""Text markup (highlight / underline / strikeout) written into the PDF.

Every change is saved back to the file in place, incrementally when
PyMuPDF allows it. Undo and redo replay against the saved file, so the
PDF on disk always matches what the viewer shows.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

RectTuple = Tuple[float, float, float, float]


class AnnotationError(Exception):
    """The PDF could not be opened or saved with annotations."""


class MarkupType(Enum):
    HIGHLIGHT = "highlight"
    UNDERLINE = "underline"
    STRIKEOUT = "strikeout"

    @property
    def label(self) -> str:
        return {
            MarkupType.HIGHLIGHT: "Highlight",
            MarkupType.UNDERLINE: "Underline",
            MarkupType.STRIKEOUT: "Strike-through",
        }[self]


_PDF_ANNOT_TYPES = {
    MarkupType.HIGHLIGHT: fitz.PDF_ANNOT_HIGHLIGHT,
    MarkupType.UNDERLINE: fitz.PDF_ANNOT_UNDERLINE,
    MarkupType.STRIKEOUT: fitz.PDF_ANNOT_STRIKE_OUT,
}


@dataclass
class _MarkupRecord:
    """One applied markup, enough to delete or re-create it."""

    page_index: int
    word_rects: List[RectTuple]
    markup_type: MarkupType
    xref: int


def _add_annot(page: "fitz.Page", markup_type: MarkupType, quads: list) -> "fitz.Annot":
    if markup_type is MarkupType.HIGHLIGHT:
        annot = page.add_highlight_annot(quads)
    elif markup_type is MarkupType.UNDERLINE:
        annot = page.add_underline_annot(quads)
    else:
        annot = page.add_strikeout_annot(quads)
    annot.update()
    return annot


class AnnotationSession:
    """Editable view of one PDF's text markup with an undo stack."""

    def __init__(self, pdf_path: Path) -> None:
        self._path = Path(pdf_path)
        self._doc = self._open()
        self._undo: List[_MarkupRecord] = []
        self._redo: List[_MarkupRecord] = []

    def __enter__(self) -> "AnnotationSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def close(self) -> None:
        """Release the document. Safe to call more than once."""
        if self._doc is not None:
            self._doc.close()
            self._doc = None

    # ── Markup ──────────────────────────────────────────────────────

    def add_markup(
        self, page_index: int, rect: Sequence[float], markup_type: MarkupType
    ) -> Optional[int]:
        """Mark every word intersecting rect (PDF points, top-left origin).

        Returns the new annotation's xref, or None when rect covers no text.
        """
        page = self._page(page_index)
        area = fitz.Rect(rect)
        word_rects = [
            tuple(word[:4]) for word in page.get_text("words")
            if fitz.Rect(word[:4]).intersects(area)
        ]
        if not word_rects:
            logger.debug("No words under %s on page %d", area, page_index + 1)
            return None

        record = _MarkupRecord(page_index, word_rects, markup_type, xref=0)
        self._apply(record)
        self._save()

        self._undo.append(record)
        self._redo.clear()
        logger.info(
            "%s on page %d of %s (%d words)",
            markup_type.label, page_index + 1, self._path.name, len(word_rects),
        )
        return record.xref

    def undo(self) -> bool:
        """Remove the most recent markup. False if there is nothing to undo."""
        if not self._undo:
            return False

        record = self._undo[-1]
        page = self._page(record.page_index)
        annot = page.load_annot(record.xref)
        if annot is None:
            logger.warning("Markup %d already gone from %s", record.xref, self._path.name)
        else:
            page.delete_annot(annot)
            self._save()

        self._redo.append(self._undo.pop())
        return True

    def redo(self) -> bool:
        """Re-apply the most recently undone markup."""
        if not self._redo:
            return False

        record = self._redo[-1]
        self._apply(record)
        self._save()
        self._undo.append(self._redo.pop())
        return True

    def markups(self, page_index: int) -> List[Tuple[MarkupType, RectTuple]]:
        """Text markups currently on a page, as (type, bounding rect)."""
        by_pdf_type = {v: k for k, v in _PDF_ANNOT_TYPES.items()}
        found = []
        for annot in self._page(page_index).annots(types=list(by_pdf_type)):
            found.append((by_pdf_type[annot.type[0]], tuple(annot.rect)))
        return found

    # ── Internal ────────────────────────────────────────────────────

    def _open(self) -> "fitz.Document":
        try:
            doc = fitz.open(self._path)
        except (RuntimeError, OSError, ValueError) as exc:
            raise AnnotationError(f"Cannot open {self._path}: {exc}") from exc
        if doc.needs_pass:
            doc.close()
            raise AnnotationError(f"{self._path.name} is encrypted")
        return doc

    def _page(self, page_index: int) -> "fitz.Page":
        if self._doc is None:
            raise AnnotationError("Annotation session is closed")
        if not 0 <= page_index < self._doc.page_count:
            raise IndexError(f"Page {page_index} out of range")
        return self._doc[page_index]

    def _apply(self, record: _MarkupRecord) -> None:
        page = self._page(record.page_index)
        quads = [fitz.Rect(r).quad for r in record.word_rects]
        annot = _add_annot(page, record.markup_type, quads)
        record.xref = annot.xref

    def _save(self) -> None:
        """Write changes into the original file.

        On failure the document is reloaded from disk, dropping the
        unsaved change, so memory and file stay in step.
        """
        try:
            if self._doc.can_save_incrementally():
                self._doc.saveIncr()
            else:
                self._save_by_replace()
        except (RuntimeError, OSError, ValueError) as exc:
            logger.error("Failed to save annotations to %s: %s", self._path, exc)
            self._reload()
            raise AnnotationError(f"Could not save {self._path.name}: {exc}") from exc

    def _reload(self) -> None:
        if self._doc is not None and not self._doc.is_closed:
            self._doc.close()
        self._doc = self._open()

    def _save_by_replace(self) -> None:
        """Full rewrite via a temp file, then reopen the result."""
        fd, tmp_name = tempfile.mkstemp(suffix=".pdf", dir=self._path.parent)
        os.close(fd)
        try:
            self._doc.save(tmp_name)
            self._doc.close()
            os.replace(tmp_name, self._path)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
        self._doc = self._open()
