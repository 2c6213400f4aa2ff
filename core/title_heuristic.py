"""Guess a paper title from the plain text of its first page.

Pure function, no I/O. Academic PDFs usually put the title on the first
substantial line, often below a venue or arXiv banner, so banner-like
lines and short noise lines are filtered out first.
"""

from pathlib import PurePath
from typing import List, Optional

_MIN_TITLE_LENGTH = 11

_BANNER_PREFIXES = ("arxiv:", "doi:", "published in")
_BANNER_FRAGMENTS = ("preprint", "submitted", "received", "accepted")


def filename_stem(filename: str) -> str:
    """Return filename without its extension, or filename if that is empty."""
    stem = PurePath(filename).stem
    return stem or filename


def is_banner_line(line: str) -> bool:
    """True for venue/arXiv/DOI banners and submission-history lines.

    Fragments match anywhere in the line, so a title containing
    "accepted" is discarded too.
    """
    lower = line.lower()
    if lower.startswith(_BANNER_PREFIXES):
        return True
    return any(fragment in lower for fragment in _BANNER_FRAGMENTS)


def candidate_lines(text: str) -> List[str]:
    """Stripped, non-empty, non-banner lines of at least 11 characters."""
    lines = (line.strip() for line in text.splitlines())
    return [
        line for line in lines
        if line
        and not is_banner_line(line)
        and len(line) >= _MIN_TITLE_LENGTH
    ]


def extract_title(text: Optional[str], filename: str) -> str:
    """Return the best-guess title, falling back to the filename stem."""
    if not text or not text.strip():
        return filename_stem(filename)

    candidates = candidate_lines(text)
    if candidates:
        return candidates[0]
    return filename_stem(filename)
