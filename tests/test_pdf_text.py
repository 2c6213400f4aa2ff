from core.pdf_text import first_page_text, page_sizes


def test_first_page_text(make_pdf):
    pdf = make_pdf("t.pdf", ["Robust Widgets in Practice", "Jane Roe"])

    text = first_page_text(pdf)

    assert "Robust Widgets in Practice" in text
    assert "Jane Roe" in text


def test_not_a_pdf(tmp_path):
    fake = tmp_path / "fake.pdf"
    fake.write_bytes(b"plain text pretending to be a pdf")

    assert first_page_text(fake) is None
    assert page_sizes(fake) == []


def test_missing_file(tmp_path):
    assert first_page_text(tmp_path / "missing.pdf") is None


def test_blank_page_is_unavailable(make_pdf):
    assert first_page_text(make_pdf("blank.pdf", [])) is None


def test_page_geometry(make_pdf):
    pdf = make_pdf("g.pdf")

    (width, height), = page_sizes(pdf)
    assert width > 0 and height > width
