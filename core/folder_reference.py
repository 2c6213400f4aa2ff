"""Persistable reference to the watched folder."""

import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class FolderReference:
    """Opaque stored form of a folder that can be resolved after a restart.

    On this platform the stored form is the absolute, user-expanded path.
    resolve() only hands back folders that still exist and are readable.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser().absolute()

    @classmethod
    def from_string(cls, stored: str) -> Optional["FolderReference"]:
        """Rebuild a reference from its stored form. Empty input gives None."""
        if not stored or not stored.strip():
            return None
        return cls(Path(stored.strip()))

    def to_string(self) -> str:
        return str(self._path)

    def resolve(self) -> Optional[Path]:
        """Return the folder path if accessible, else None (no folder yet)."""
        if not self._path.is_dir():
            logger.info("Saved folder no longer exists: %s", self._path)
            return None
        if not os.access(self._path, os.R_OK | os.X_OK):
            logger.info("Saved folder is not readable: %s", self._path)
            return None
        return self._path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FolderReference):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"FolderReference({str(self._path)!r})"
