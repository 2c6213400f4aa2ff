"""Shared fixtures: generated PDFs and a Qt application object."""

from pathlib import Path
from typing import Callable, List

import fitz  # PyMuPDF
import pytest


def write_pdf(path: Path, lines: List[str]) -> Path:
    """Create a one-page PDF with each line drawn below the previous one."""
    doc = fitz.open()
    page = doc.new_page()
    y = 72
    for line in lines:
        page.insert_text((72, y), line, fontsize=12)
        y += 24
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    def _make(name: str, lines: List[str] = ("Placeholder body text line",)) -> Path:
        return write_pdf(tmp_path / name, list(lines))

    return _make


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
