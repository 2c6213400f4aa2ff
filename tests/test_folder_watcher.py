import time
from pathlib import Path

import pytest

from gui.folder_watcher import FolderWatcher, WatcherStateError, WatchState, watch_folder


def _touch(path: Path) -> Path:
    path.write_bytes(b"%PDF-1.4\n")
    return path


def test_initial_scan_happens_before_start_returns(qapp, tmp_path):
    _touch(tmp_path / "A.pdf")
    (tmp_path / "notes.txt").write_text("x")
    _touch(tmp_path / "B.PDF")
    seen = []

    watcher = watch_folder(tmp_path, lambda p: seen.append(p))

    assert {p.name for p in seen} == {"A.pdf", "B.PDF"}
    assert watcher.state is WatchState.WATCHING
    assert watcher.is_subscribed
    watcher.stop()


def test_change_event_rescans_everything(qapp, tmp_path):
    _touch(tmp_path / "old.pdf")
    seen = []
    watcher = watch_folder(tmp_path, lambda p: seen.append(p))
    _touch(tmp_path / "new.pdf")

    watcher._on_directory_changed(str(tmp_path))

    names = [p.name for p in seen]
    assert names.count("old.pdf") == 2
    assert names.count("new.pdf") == 1
    watcher.stop()


def test_state_machine(qapp, tmp_path):
    watcher = FolderWatcher()
    assert watcher.state is WatchState.IDLE

    watcher.start(tmp_path)
    assert watcher.state is WatchState.WATCHING

    watcher.stop()
    assert watcher.state is WatchState.STOPPED
    assert not watcher.is_subscribed

    with pytest.raises(WatcherStateError):
        watcher.start(tmp_path)


def test_double_start_is_rejected(qapp, tmp_path):
    watcher = FolderWatcher().start(tmp_path)

    with pytest.raises(WatcherStateError):
        watcher.start(tmp_path)
    watcher.stop()


def test_stop_is_idempotent(qapp, tmp_path):
    watcher = watch_folder(tmp_path, lambda _p: None)

    watcher.stop()
    watcher.cancel()
    watcher.stop()

    assert watcher.state is WatchState.STOPPED


def test_stop_before_start(qapp):
    watcher = FolderWatcher()
    watcher.stop()
    assert watcher.state is WatchState.STOPPED


def test_no_emission_after_stop(qapp, tmp_path):
    seen = []
    watcher = watch_folder(tmp_path, lambda p: seen.append(p))
    watcher.stop()
    _touch(tmp_path / "late.pdf")

    watcher._on_directory_changed(str(tmp_path))
    watcher._on_poll()

    assert seen == []


def test_missing_folder_emits_nothing(qapp, tmp_path):
    seen = []
    watcher = watch_folder(tmp_path / "gone", lambda p: seen.append(p))

    assert seen == []
    assert not watcher.is_subscribed
    assert watcher.state is WatchState.WATCHING
    watcher.stop()


def test_scan_failure_keeps_watcher_alive(qapp, tmp_path):
    folder = tmp_path / "papers"
    folder.mkdir()
    seen = []
    watcher = watch_folder(folder, lambda p: seen.append(p))

    folder.rmdir()
    watcher._on_directory_changed(str(folder))
    assert watcher.state is WatchState.WATCHING

    folder.mkdir()
    _touch(folder / "back.pdf")
    watcher._on_poll()

    assert [p.name for p in seen] == ["back.pdf"]
    watcher.stop()


def test_context_manager_stops(qapp, tmp_path):
    with watch_folder(tmp_path, lambda _p: None) as watcher:
        assert watcher.state is WatchState.WATCHING
    assert watcher.state is WatchState.STOPPED


def test_poll_timer_runs_only_when_configured(qapp, tmp_path):
    polling = FolderWatcher(poll_interval_ms=1000).start(tmp_path)
    quiet = FolderWatcher().start(tmp_path)

    assert polling._timer.isActive()
    assert not quiet._timer.isActive()

    polling.stop()
    quiet.stop()
    assert not polling._timer.isActive()


def test_new_file_is_picked_up_from_a_real_change_event(qapp, tmp_path):
    seen = []
    watcher = watch_folder(tmp_path, lambda p: seen.append(p.name))
    _touch(tmp_path / "late.pdf")

    deadline = time.monotonic() + 3.0
    while "late.pdf" not in seen and time.monotonic() < deadline:
        qapp.processEvents()
        time.sleep(0.02)

    assert "late.pdf" in seen
    watcher.stop()
