"""QFileSystemWatcher adapter for the papers folder.

Watches one directory and re-emits every PDF in it whenever the
directory changes. Also runs a fallback QTimer poll for network drives
where inotify doesn't deliver events.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QFileSystemWatcher, QObject, QTimer, Signal

from core.folder_scanner import FolderScanner

logger = logging.getLogger(__name__)

PdfCallback = Callable[[Path], None]


class WatcherStateError(RuntimeError):
    """start() called on a watcher that is already running or stopped."""


class WatchState(Enum):
    IDLE = "idle"
    WATCHING = "watching"
    STOPPED = "stopped"


class FolderWatcher(QObject):
    """Watch a folder and emit a signal for each PDF found on every scan.

    Lifecycle is Idle → Watching → Stopped. Stopped is final; build a
    new watcher to watch again. The watcher is its own subscription
    handle: cancel() / stop() end it, as does leaving a with-block.

    Signals:
        pdf_detected(Path): Emitted once per PDF per scan.
    """

    pdf_detected = Signal(object)  # Path (Signal doesn't support Path directly)

    def __init__(
        self,
        on_pdf: Optional[PdfCallback] = None,
        poll_interval_ms: int = 0,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._scanner = FolderScanner()
        self._folder: Optional[Path] = None
        self._state = WatchState.IDLE
        self._poll_interval_ms = poll_interval_ms

        if on_pdf is not None:
            self.pdf_detected.connect(on_pdf)

        self._watcher = QFileSystemWatcher(self)
        self._watcher.directoryChanged.connect(self._on_directory_changed)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_poll)

    def __enter__(self) -> "FolderWatcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def is_subscribed(self) -> bool:
        """Whether the OS-level change subscription is live."""
        return bool(self._folder and str(self._folder) in self._watcher.directories())

    def start(self, folder: Path) -> "FolderWatcher":
        """Begin watching folder and scan it once before returning.

        A folder that cannot be watched is logged and never scanned;
        the watcher does not retry.
        """
        if self._state is not WatchState.IDLE:
            raise WatcherStateError(f"Cannot start a watcher that is {self._state.value}")

        self._folder = Path(folder)
        self._state = WatchState.WATCHING

        if not self._folder.is_dir():
            logger.warning("FolderWatcher: directory does not exist: %s", self._folder)
            return self

        if not self._watcher.addPath(str(self._folder)):
            logger.warning("FolderWatcher: could not watch %s", self._folder)
            return self

        if self._poll_interval_ms > 0:
            self._timer.start(self._poll_interval_ms)

        logger.info("FolderWatcher started: %s", self._folder)

        # Initial scan to pick up files already present
        self._emit_pdfs()
        return self

    def stop(self) -> None:
        """Stop watching. Idempotent; in-flight imports are not affected."""
        if self._state is WatchState.STOPPED:
            return

        if self.is_subscribed:
            self._watcher.removePath(str(self._folder))
        self._timer.stop()

        was_watching = self._state is WatchState.WATCHING
        self._state = WatchState.STOPPED
        if was_watching:
            logger.info("FolderWatcher stopped: %s", self._folder)

    cancel = stop

    # ── Internal ─────────────────────────────────────────────────────

    def _on_directory_changed(self, _path: str) -> None:
        """QFileSystemWatcher callback: directory contents changed."""
        self._emit_pdfs()

    def _on_poll(self) -> None:
        """Fallback timer poll for network drives."""
        self._emit_pdfs()

    def _emit_pdfs(self) -> None:
        """Scan and emit signal for every PDF currently present."""
        if self._state is not WatchState.WATCHING or not self._folder:
            return

        for pdf_path in self._scanner.scan(self._folder):
            logger.debug("PDF detected: %s", pdf_path.name)
            self.pdf_detected.emit(pdf_path)


def watch_folder(
    folder: Path,
    on_pdf: PdfCallback,
    poll_interval_ms: int = 0,
    parent: Optional[QObject] = None,
) -> FolderWatcher:
    """Subscribe on_pdf to folder. Returns the running watcher as handle."""
    watcher = FolderWatcher(on_pdf=on_pdf, poll_interval_ms=poll_interval_ms, parent=parent)
    return watcher.start(folder)
