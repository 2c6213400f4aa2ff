import threading
from pathlib import Path

import pytest

from core.importer import PaperImporter
from core.paper_store import PaperStore


def _touch(path: Path) -> Path:
    path.write_bytes(b"not really a pdf")
    return path


def _importer(store, text=None):
    return PaperImporter(store, text_extractor=lambda _path: text)


def test_new_pdf_becomes_paper(tmp_path):
    store = PaperStore()
    pdf = _touch(tmp_path / "widgets.pdf")
    importer = _importer(store, "arXiv:2301.00001\nA Study of Widget Robustness\nJohn Doe")

    paper = importer.import_pdf(pdf)

    assert paper.title == "A Study of Widget Robustness"
    assert paper.filename == "widgets.pdf"
    assert paper.authors == []
    assert paper.tags == []
    assert paper.is_read is False
    assert store.get_by_filename("widgets.pdf").id == paper.id


def test_import_is_idempotent(tmp_path):
    store = PaperStore()
    pdf = _touch(tmp_path / "x.pdf")
    importer = _importer(store, "Some Reasonably Long Title")

    assert importer.import_pdf(pdf) is not None
    assert importer.import_pdf(pdf) is None
    assert len(store) == 1


def test_unreadable_pdf_uses_filename(tmp_path):
    store = PaperStore()
    pdf = _touch(tmp_path / "paper1.pdf")

    paper = PaperImporter(store).import_pdf(pdf)

    assert paper.title == "paper1"


def test_same_filename_in_other_folder_is_a_duplicate(tmp_path):
    store = PaperStore()
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    importer = _importer(store)

    importer.import_pdf(_touch(tmp_path / "a" / "same.pdf"))
    importer.import_pdf(_touch(tmp_path / "b" / "same.pdf"))

    assert len(store) == 1


def test_claim_blocks_second_import_while_first_is_in_flight(tmp_path):
    store = PaperStore()
    pdf = _touch(tmp_path / "x.pdf")
    importer = _importer(store)

    assert importer.claim(pdf)
    assert not importer.claim(pdf)
    assert importer.import_pdf(pdf) is None

    paper = importer.build_paper(pdf)
    assert importer.commit(paper)
    assert importer.in_flight == set()
    assert not importer.claim(pdf)
    assert len([p for p in store.all() if p.filename == "x.pdf"]) == 1


def test_concurrent_imports_of_same_file_create_one_paper(tmp_path):
    store = PaperStore()
    pdf = _touch(tmp_path / "x.pdf")
    started = threading.Event()
    release = threading.Event()

    def slow_extract(_path):
        started.set()
        release.wait(timeout=5)
        return "A Slowly Extracted Title"

    importer = PaperImporter(store, text_extractor=slow_extract)
    results = []
    first = threading.Thread(target=lambda: results.append(importer.import_pdf(pdf)))
    first.start()
    assert started.wait(timeout=5)

    results.append(importer.import_pdf(pdf))
    release.set()
    first.join(timeout=5)

    assert sum(r is not None for r in results) == 1
    assert len(store) == 1


def test_failed_commit_releases_claim(tmp_path, monkeypatch):
    store = PaperStore(tmp_path / "library.json")
    pdf = _touch(tmp_path / "x.pdf")
    importer = _importer(store)

    def fail():
        raise OSError("read-only")

    monkeypatch.setattr(store, "_write", fail)
    assert importer.import_pdf(pdf) is None
    assert importer.in_flight == set()

    monkeypatch.undo()
    assert importer.import_pdf(pdf) is not None


def test_extractor_error_releases_claim(tmp_path):
    store = PaperStore()
    pdf = _touch(tmp_path / "x.pdf")

    def broken(_path):
        raise RuntimeError("boom")

    importer = PaperImporter(store, text_extractor=broken)
    with pytest.raises(RuntimeError):
        importer.import_pdf(pdf)
    assert importer.in_flight == set()


def test_import_folder_uses_same_routine(tmp_path):
    store = PaperStore()
    _touch(tmp_path / "A.pdf")
    _touch(tmp_path / "B.PDF")
    (tmp_path / "notes.txt").write_text("skip me")
    importer = _importer(store)

    imported = importer.import_folder(tmp_path)

    assert {p.filename for p in imported} == {"A.pdf", "B.PDF"}
    assert importer.import_folder(tmp_path) == []
    assert len(store) == 2


def test_real_pdf_title(make_pdf):
    store = PaperStore()
    pdf = make_pdf("real.pdf", ["arXiv:2301.00001", "A Study of Widget Robustness", "John Doe"])

    paper = PaperImporter(store).import_pdf(pdf)

    assert paper.title == "A Study of Widget Robustness"
