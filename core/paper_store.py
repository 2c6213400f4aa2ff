"""JSON-backed paper library.

The store owns the one-paper-per-filename rule: insert() checks and
inserts under a single lock, so concurrent importers cannot create
duplicates. Listeners get an explicit "list changed" callback after
every mutation; nothing is implicitly reactive.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from core.paper import EDITABLE_FIELDS, Paper

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class StoreWriteError(Exception):
    """The library file could not be written."""


class PaperNotFoundError(KeyError):
    """No paper with the requested id."""


class PaperStore:
    """Ordered collection of Paper records, optionally persisted to path."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._lock = threading.RLock()
        self._papers: Dict[str, Paper] = {}
        self._listeners: List[Listener] = []
        if path is not None:
            self._load()

    @property
    def path(self) -> Optional[Path]:
        """Backing file, or None for an in-memory store."""
        return self._path

    def __len__(self) -> int:
        with self._lock:
            return len(self._papers)

    # ── Queries ─────────────────────────────────────────────────────

    def all(self) -> List[Paper]:
        """Return copies of every paper in insertion order."""
        with self._lock:
            return [copy.deepcopy(p) for p in self._papers.values()]

    def get(self, paper_id: str) -> Optional[Paper]:
        """Return a copy of the paper with this id, or None."""
        with self._lock:
            paper = self._papers.get(paper_id)
            return copy.deepcopy(paper) if paper else None

    def get_by_filename(self, filename: str) -> Optional[Paper]:
        """Return a copy of the paper with this exact filename, or None."""
        with self._lock:
            paper = self._find_by_filename(filename)
            return copy.deepcopy(paper) if paper else None

    def contains_filename(self, filename: str) -> bool:
        with self._lock:
            return self._find_by_filename(filename) is not None

    # ── Mutations ───────────────────────────────────────────────────

    def insert(self, paper: Paper) -> bool:
        """Insert paper unless its filename is already present.

        Returns False for a duplicate filename or id.
        """
        with self._lock:
            if paper.id in self._papers or self._find_by_filename(paper.filename):
                logger.debug("Skipping duplicate paper %s", paper.filename)
                return False
            self._papers[paper.id] = copy.deepcopy(paper)
            self._commit(rollback=lambda: self._papers.pop(paper.id, None))

        logger.info("Added paper %r (%s)", paper.title, paper.filename)
        self._notify()
        return True

    def update(self, paper_id: str, **fields: Any) -> Paper:
        """Change editable fields of a paper and return the updated copy."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")

        with self._lock:
            paper = self._papers.get(paper_id)
            if paper is None:
                raise PaperNotFoundError(paper_id)

            previous = copy.deepcopy(paper)
            for name, value in fields.items():
                setattr(paper, name, list(value) if name in ("authors", "tags") else value)
            self._commit(rollback=lambda: self._papers.__setitem__(paper_id, previous))
            updated = copy.deepcopy(paper)

        self._notify()
        return updated

    def delete(self, paper_id: str) -> bool:
        """Remove one paper. Returns False if it was not present."""
        with self._lock:
            paper = self._papers.pop(paper_id, None)
            if paper is None:
                return False
            self._commit(rollback=lambda: self._restore(paper))

        logger.info("Deleted paper %s", paper.filename)
        self._notify()
        return True

    def clear(self) -> int:
        """Remove every paper. Returns how many were removed."""
        with self._lock:
            removed = dict(self._papers)
            if not removed:
                return 0
            self._papers.clear()
            self._commit(rollback=lambda: self._papers.update(removed))

        logger.info("Cleared library (%d papers)", len(removed))
        self._notify()
        return len(removed)

    # ── Change notification ─────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a "list changed" callback. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # ── Internal ────────────────────────────────────────────────────

    def _find_by_filename(self, filename: str) -> Optional[Paper]:
        for paper in self._papers.values():
            if paper.filename == filename:
                return paper
        return None

    def _restore(self, paper: Paper) -> None:
        self._papers[paper.id] = paper

    def _commit(self, rollback: Callable[[], Any]) -> None:
        """Persist current state; undo the in-memory change if writing fails."""
        if self._path is None:
            return
        try:
            self._write()
        except OSError as exc:
            rollback()
            logger.error("Failed to write library %s: %s", self._path, exc)
            raise StoreWriteError(str(exc)) from exc

    def _write(self) -> None:
        """Atomic write: temp file in the same folder, then os.replace."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(
            {"papers": [p.to_dict() for p in self._papers.values()]},
            indent=2,
            ensure_ascii=False,
        )
        fd, tmp_name = tempfile.mkstemp(
            suffix=".json", prefix=".library-", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _load(self) -> None:
        """Read the library file. Missing or corrupt files give an empty store."""
        if not self._path.exists():
            logger.info("No library file at %s, starting empty", self._path)
            return

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            papers = [Paper.from_dict(item) for item in raw.get("papers", [])]
        except (OSError, json.JSONDecodeError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Corrupt library at %s: %s, starting empty", self._path, exc)
            return

        for paper in papers:
            if paper.id in self._papers or self._find_by_filename(paper.filename):
                logger.warning("Dropping duplicate entry for %s", paper.filename)
                continue
            self._papers[paper.id] = paper
        logger.info("Loaded %d paper(s) from %s", len(self._papers), self._path)
