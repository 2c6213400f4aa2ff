"""Import PDFs into the paper library, one Paper per filename.

Bulk folder import and watch-triggered import share import_pdf().
The work is split into claim / build_paper / commit so the GUI can run
text extraction on a worker thread while keeping every store access on
the UI thread. A claimed filename stays reserved until its commit, so a
second scan that arrives while the first import is still extracting
text is a no-op instead of a duplicate insert.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, Set

from core.folder_scanner import FolderScanner
from core.paper import Paper
from core.paper_store import PaperStore, StoreWriteError
from core.pdf_text import first_page_text
from core.title_heuristic import extract_title

logger = logging.getLogger(__name__)

TextExtractor = Callable[[Path], Optional[str]]


class PaperImporter:
    """Ensure exactly one Paper exists for each PDF filename."""

    def __init__(
        self,
        store: PaperStore,
        text_extractor: TextExtractor = first_page_text,
        scanner: Optional[FolderScanner] = None,
    ) -> None:
        self._store = store
        self._extract_text = text_extractor
        self._scanner = scanner or FolderScanner()
        self._in_flight: Set[str] = set()
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> Set[str]:
        """Filenames claimed but not yet committed."""
        with self._lock:
            return set(self._in_flight)

    # ── One-shot API ────────────────────────────────────────────────

    def import_pdf(self, pdf_path: Path) -> Optional[Paper]:
        """Import one PDF. Returns the new Paper, or None if already present."""
        if not self.claim(pdf_path):
            return None

        try:
            paper = self.build_paper(pdf_path)
        except Exception:
            self.release(pdf_path.name)
            raise

        return paper if self.commit(paper) else None

    def import_folder(self, folder: Path) -> List[Paper]:
        """Import every PDF directly inside folder. Returns the new Papers."""
        imported = []
        for pdf_path in self._scanner.scan(folder):
            paper = self.import_pdf(pdf_path)
            if paper is not None:
                imported.append(paper)

        logger.info("Imported %d new paper(s) from %s", len(imported), folder)
        return imported

    # ── Split phases ────────────────────────────────────────────────

    def claim(self, pdf_path: Path) -> bool:
        """Reserve pdf_path's filename for import.

        False if the library already has it or another import holds it.
        """
        filename = pdf_path.name
        with self._lock:
            if filename in self._in_flight:
                logger.debug("Import already in flight: %s", filename)
                return False
            if self._store.contains_filename(filename):
                return False
            self._in_flight.add(filename)
        return True

    def build_paper(self, pdf_path: Path) -> Paper:
        """Extract first-page text and build an unsaved Paper.

        Safe to call off the UI thread: it never touches the store.
        """
        text = self._extract_text(pdf_path)
        title = extract_title(text, pdf_path.name)
        return Paper(title=title, filename=pdf_path.name)

    def commit(self, paper: Paper) -> bool:
        """Insert a built Paper and release its claim.

        A failed write is logged and the claim dropped, so a later scan
        can try again.
        """
        try:
            return self._store.insert(paper)
        except StoreWriteError as exc:
            logger.error("Could not save %s: %s", paper.filename, exc)
            return False
        finally:
            self.release(paper.filename)

    def release(self, filename: str) -> None:
        """Drop a claim without inserting."""
        with self._lock:
            self._in_flight.discard(filename)
