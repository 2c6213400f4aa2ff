from core.title_heuristic import (
    candidate_lines,
    extract_title,
    filename_stem,
    is_banner_line,
)


def test_skips_arxiv_banner():
    text = "arXiv:2301.00001\nA Study of Widget Robustness\nJohn Doe"
    assert extract_title(text, "x.pdf") == "A Study of Widget Robustness"


def test_all_short_lines_fall_back_to_filename():
    assert extract_title("Hi\nOK\n", "paper1.pdf") == "paper1"


def test_no_text_falls_back_to_filename():
    assert extract_title(None, "deep-learning.pdf") == "deep-learning"
    assert extract_title("", "deep-learning.pdf") == "deep-learning"
    assert extract_title("   \n\t\n", "deep-learning.pdf") == "deep-learning"


def test_eleven_characters_is_long_enough():
    assert extract_title("Ten chars!\nEleven char", "f.pdf") == "Eleven char"


def test_ten_characters_is_noise():
    assert extract_title("0123456789", "fallback.pdf") == "fallback"


def test_lines_are_trimmed():
    assert extract_title("   \n   Graph Neural Nets Revisited   \n", "g.pdf") == (
        "Graph Neural Nets Revisited"
    )


def test_banner_signatures_are_case_insensitive():
    text = "\n".join([
        "DOI: 10.1000/xyz123",
        "Published in Nature Physics 2021",
        "This is a PREPRINT under review",
        "Submitted to ICML 2024",
        "Received 3 March 2020",
        "Quantum Error Correction at Scale",
    ])
    assert extract_title(text, "q.pdf") == "Quantum Error Correction at Scale"


def test_accepted_substring_discards_real_title():
    text = "Unaccepted Truths About Sorting\nAnother Candidate Line"
    assert extract_title(text, "s.pdf") == "Another Candidate Line"


def test_crlf_line_endings():
    text = "arXiv:1234.5678\r\nLearning to Rank at Scale\r\n"
    assert extract_title(text, "r.pdf") == "Learning to Rank at Scale"


def test_never_returns_short_line_when_long_one_exists():
    lines = candidate_lines("1\nabstract\nA Much Longer Line Here\nshort")
    assert lines == ["A Much Longer Line Here"]


def test_result_never_empty():
    for text in (None, "", "x", "preprint preprint preprint", "\n\n"):
        assert extract_title(text, "name.pdf")


def test_is_banner_line():
    assert is_banner_line("arxiv:2301.1")
    assert is_banner_line("Accepted at NeurIPS")
    assert not is_banner_line("Attention Is All You Need")


def test_filename_stem():
    assert filename_stem("paper.final.pdf") == "paper.final"
    assert filename_stem("noext") == "noext"
