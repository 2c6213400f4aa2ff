"""Pure-logic folder scanner: lists the PDF files directly inside a folder.

No Qt imports. The GUI adapter (gui/folder_watcher.py) wraps this
with QFileSystemWatcher for event-driven rescans.
"""

import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

_PDF_SUFFIX = ".pdf"


def is_pdf(path: Path) -> bool:
    """Case-insensitive check for a .pdf extension."""
    return path.suffix.lower() == _PDF_SUFFIX


class FolderScanner:
    """Enumerate PDF files in a directory, non-recursively.

    Keeps no state between scans: every call returns every PDF present.
    Deciding what is new is the importer's job.
    """

    def scan(self, folder: Path) -> List[Path]:
        """Return PDF files directly inside folder, in directory order.

        An unreadable or missing folder yields an empty list.
        """
        try:
            # Files only: a directory named "x.pdf" is not a paper, although
            # a bare extension check on directory entries would accept it.
            with os.scandir(folder) as entries:
                found = [
                    Path(entry.path) for entry in entries
                    if entry.is_file() and is_pdf(Path(entry.name))
                ]
        except OSError as exc:
            logger.warning("Could not read folder %s: %s", folder, exc)
            return []

        logger.debug("Scanned %s: %d PDF(s)", folder, len(found))
        return found
