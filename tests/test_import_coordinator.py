import time
from pathlib import Path

from core.importer import PaperImporter
from core.paper_store import PaperStore
from gui.import_coordinator import ImportCoordinator


def _touch(path: Path) -> Path:
    path.write_bytes(b"not really a pdf")
    return path


def _run_until_drained(qapp, coordinator, timeout=5.0):
    drained = []
    coordinator.queue_drained.connect(lambda: drained.append(True))
    deadline = time.monotonic() + timeout
    while not drained and time.monotonic() < deadline:
        qapp.processEvents()
        time.sleep(0.01)
    coordinator.shutdown()
    return bool(drained)


def test_repeated_detection_imports_once(qapp, tmp_path):
    store = PaperStore()
    pdf = _touch(tmp_path / "widgets.pdf")
    importer = PaperImporter(store, text_extractor=lambda _p: "A Study of Widget Robustness")
    coordinator = ImportCoordinator(importer)
    messages = []
    coordinator.status_updated.connect(lambda text: messages.append(text))

    coordinator.queue_pdf(pdf)
    coordinator.queue_pdf(pdf)
    assert coordinator.import_folder(tmp_path) == 0

    assert _run_until_drained(qapp, coordinator)
    assert [p.filename for p in store.all()] == ["widgets.pdf"]
    assert store.all()[0].title == "A Study of Widget Robustness"
    assert importer.in_flight == set()
    assert "Imported: A Study of Widget Robustness" in messages


def test_import_folder_queues_every_new_pdf(qapp, tmp_path):
    store = PaperStore()
    _touch(tmp_path / "A.pdf")
    _touch(tmp_path / "B.PDF")
    importer = PaperImporter(store, text_extractor=lambda _p: None)
    coordinator = ImportCoordinator(importer)

    assert coordinator.import_folder(tmp_path) == 2

    assert _run_until_drained(qapp, coordinator)
    assert {p.title for p in store.all()} == {"A", "B"}


def test_extraction_error_releases_claim(qapp, tmp_path):
    store = PaperStore()
    pdf = _touch(tmp_path / "broken.pdf")

    def broken(_path):
        raise RuntimeError("boom")

    importer = PaperImporter(store, text_extractor=broken)
    coordinator = ImportCoordinator(importer)
    messages = []
    coordinator.status_updated.connect(lambda text: messages.append(text))

    coordinator.queue_pdf(pdf)

    assert _run_until_drained(qapp, coordinator)
    assert len(store) == 0
    assert importer.in_flight == set()
    assert any(m.startswith("Import failed: broken.pdf") for m in messages)
    assert importer.claim(pdf)
