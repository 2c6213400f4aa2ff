"""Process-wide UI state, passed explicitly to whoever needs it.

Only the folder reference is persisted (via Config); selection and
filters live for the session.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from core.config import CONFIG_PATH, Config, save_config
from core.folder_reference import FolderReference
from core.library_filter import ReadFilter, filter_papers
from core.paper import Paper

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class AppState:
    """Selected folder, paper, tag and read filter for one session."""

    def __init__(self, config: Config, config_path: Path = CONFIG_PATH) -> None:
        self._config = config
        self._config_path = config_path
        self._listeners: List[Listener] = []

        self.selected_paper_id: Optional[str] = None
        self.selected_tag: Optional[str] = None
        self.read_filter: ReadFilter = ReadFilter.ALL

        reference = FolderReference.from_string(config.papers_folder)
        self._folder: Optional[Path] = reference.resolve() if reference else None

    @property
    def config_path(self) -> Path:
        return self._config_path

    @property
    def folder(self) -> Optional[Path]:
        """The watched folder, or None if none is chosen or it vanished."""
        return self._folder

    def set_folder(self, path: Path) -> None:
        """Choose a new watched folder and persist the reference."""
        reference = FolderReference(path)
        self._folder = reference.resolve()
        self._config.papers_folder = reference.to_string()
        save_config(self._config, self._config_path)
        logger.info("Papers folder set to %s", reference.to_string())
        self._notify()

    def clear_folder(self) -> None:
        """Forget the watched folder."""
        self._folder = None
        self._config.papers_folder = ""
        save_config(self._config, self._config_path)
        self._notify()

    def select_paper(self, paper_id: Optional[str]) -> None:
        self.selected_paper_id = paper_id
        self._notify()

    def select_tag(self, tag: Optional[str]) -> None:
        self.selected_tag = tag
        self._notify()

    def set_read_filter(self, read_filter: ReadFilter) -> None:
        self.read_filter = read_filter
        self._notify()

    def visible_papers(self, papers: Iterable[Paper]) -> List[Paper]:
        """Apply the current tag and read filters."""
        return filter_papers(papers, self.selected_tag, self.read_filter)

    def pdf_path_for(self, paper: Paper) -> Optional[Path]:
        """Join the watched folder with paper.filename, None without a folder."""
        if self._folder is None:
            return None
        return self._folder / paper.filename

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change callback. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
