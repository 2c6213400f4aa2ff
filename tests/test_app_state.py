from core.app_state import AppState
from core.config import Config, load_config
from core.folder_reference import FolderReference
from core.library_filter import ReadFilter, collect_tags, filter_papers
from core.paper import Paper, format_comma_list, parse_comma_list


def _papers():
    return [
        Paper(title="Read ML paper", filename="a.pdf", tags=["ml"], is_read=True),
        Paper(title="Unread ML paper", filename="b.pdf", tags=["ml", "Vision"]),
        Paper(title="Untagged paper", filename="c.pdf"),
    ]


def test_folder_restored_from_config(tmp_path):
    state = AppState(Config(papers_folder=str(tmp_path)), tmp_path / "settings.json")

    assert state.folder == tmp_path


def test_vanished_folder_means_none_chosen(tmp_path):
    state = AppState(Config(papers_folder=str(tmp_path / "gone")), tmp_path / "settings.json")

    assert state.folder is None


def test_set_folder_persists_reference(tmp_path):
    settings = tmp_path / "settings.json"
    papers = tmp_path / "papers"
    papers.mkdir()
    state = AppState(Config(), settings)

    state.set_folder(papers)

    assert state.folder == papers
    assert AppState(load_config(settings), settings).folder == papers

    state.clear_folder()
    assert load_config(settings).papers_folder == ""


def test_pdf_path_joins_folder_and_filename(tmp_path):
    state = AppState(Config(papers_folder=str(tmp_path)), tmp_path / "settings.json")
    paper = Paper(title="Joined", filename="x.pdf")

    assert state.pdf_path_for(paper) == tmp_path / "x.pdf"
    assert AppState(Config(), tmp_path / "s.json").pdf_path_for(paper) is None


def test_visible_papers_combines_filters(tmp_path):
    state = AppState(Config(), tmp_path / "settings.json")
    state.select_tag("ml")
    state.set_read_filter(ReadFilter.UNREAD)

    assert [p.filename for p in state.visible_papers(_papers())] == ["b.pdf"]


def test_listeners(tmp_path):
    state = AppState(Config(), tmp_path / "settings.json")
    calls = []
    unsubscribe = state.subscribe(lambda: calls.append(state.selected_paper_id))

    state.select_paper("abc")
    unsubscribe()
    state.select_paper(None)

    assert calls == ["abc"]


def test_filter_papers():
    papers = _papers()

    assert len(filter_papers(papers)) == 3
    assert [p.filename for p in filter_papers(papers, read_filter=ReadFilter.READ)] == ["a.pdf"]
    assert [p.filename for p in filter_papers(papers, tag="Vision")] == ["b.pdf"]
    assert filter_papers(papers, tag="vision") == []


def test_collect_tags():
    assert collect_tags(_papers()) == ["ml", "Vision"]


def test_comma_lists():
    assert parse_comma_list(" Ada Lovelace ,Alan Turing,, ") == ["Ada Lovelace", "Alan Turing"]
    assert parse_comma_list("") == []
    assert format_comma_list(["a", "b"]) == "a, b"


def test_paper_dict_round_trip():
    paper = Paper(title="Serialized", filename="s.pdf", authors=["A"], tags=["t"], is_read=True)

    restored = Paper.from_dict({**paper.to_dict(), "legacy": "ignored"})

    assert restored == paper


def test_folder_reference(tmp_path):
    ref = FolderReference(tmp_path)

    assert FolderReference.from_string(ref.to_string()) == ref
    assert ref.resolve() == tmp_path
    assert FolderReference.from_string("  ") is None
    assert FolderReference(tmp_path / "nope").resolve() is None
