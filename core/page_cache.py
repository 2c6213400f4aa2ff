"""Cache folder management for rendered PDF page images.

Cache folders are keyed by the PDF's stem and modification time, so a
file rewritten with new annotations gets fresh renders.
"""

import logging
import re
import shutil
from pathlib import Path
from typing import List, Optional

from core.image_utils import encode_to_png, fit_within
from core.pdf_processor import PDFProcessor

logger = logging.getLogger(__name__)

_CACHE_ROOT = Path(__file__).resolve().parent.parent / "cache"
_PAGE_PATTERN = re.compile(r"^page_(\d{3})\.png$")
_MAX_PAGE_PIXELS = 12_000_000


def cache_dir_for_pdf(pdf_path: Path, cache_root: Optional[Path] = None) -> Path:
    """Return cache/{stem}-{mtime_ns}/ for the given PDF."""
    root = cache_root or _CACHE_ROOT
    mtime = pdf_path.stat().st_mtime_ns
    return root / f"{pdf_path.stem}-{mtime}"


def page_image_path(cache_dir: Path, page_num: int) -> Path:
    """Return path for page_NNN.png (1-indexed, zero-padded to 3 digits)."""
    return cache_dir / f"page_{page_num:03d}.png"


def get_page_number(filename: str) -> int:
    """Page number encoded in a cache filename, -1 if it doesn't match."""
    match = _PAGE_PATTERN.match(filename)
    return int(match.group(1)) if match else -1


def list_cached_pages(cache_dir: Path) -> List[Path]:
    """Return sorted list of page_NNN.png files in cache dir."""
    if not cache_dir.is_dir():
        return []

    return [
        p for p in sorted(cache_dir.iterdir())
        if _PAGE_PATTERN.match(p.name)
    ]


def purge_stale_caches(pdf_path: Path, cache_root: Optional[Path] = None) -> int:
    """Delete cache folders for older versions of pdf_path. Returns count."""
    root = cache_root or _CACHE_ROOT
    if not root.is_dir():
        return 0

    current = cache_dir_for_pdf(pdf_path, root)
    stale_pattern = re.compile(rf"^{re.escape(pdf_path.stem)}-\d+$")
    removed = 0
    for candidate in root.iterdir():
        if candidate != current and candidate.is_dir() and stale_pattern.match(candidate.name):
            shutil.rmtree(candidate, ignore_errors=True)
            removed += 1

    if removed:
        logger.debug("Removed %d stale render cache(s) for %s", removed, pdf_path.name)
    return removed


def render_single_page(
    pdf_path: Path,
    page_num: int,
    output_path: Path,
    dpi: int,
) -> None:
    """Render one page from PDF and save as PNG.

    Skips if output_path already exists.
    """
    if output_path.exists():
        logger.debug("Page %d already cached at %s", page_num, output_path)
        return

    processor = PDFProcessor(dpi=dpi)
    image = fit_within(processor.render_page(pdf_path, page_num), _MAX_PAGE_PIXELS)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(encode_to_png(image))
    logger.debug("Cached page %d to %s", page_num, output_path)
