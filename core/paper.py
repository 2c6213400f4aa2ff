"""Paper record: one imported PDF and its user-editable metadata."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

EDITABLE_FIELDS = frozenset({"title", "authors", "tags", "is_read"})


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


def parse_comma_list(text: str) -> List[str]:
    """Split comma-separated input into trimmed, non-empty entries."""
    return [part.strip() for part in text.split(",") if part.strip()]


def format_comma_list(items: Iterable[str]) -> str:
    """Inverse of parse_comma_list for display in a line edit."""
    return ", ".join(items)


@dataclass
class Paper:
    """A library entry. filename is the dedup key within the watched folder."""

    title: str
    filename: str
    authors: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    is_read: bool = False
    added_date: datetime = field(default_factory=_now)
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-safe primitives."""
        return {
            "id": self.id,
            "title": self.title,
            "filename": self.filename,
            "authors": list(self.authors),
            "tags": list(self.tags),
            "is_read": self.is_read,
            "added_date": self.added_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Paper":
        """Create Paper from dict, ignoring unknown keys."""
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known_fields}
        if isinstance(filtered.get("added_date"), str):
            filtered["added_date"] = datetime.fromisoformat(filtered["added_date"])
        filtered["authors"] = list(filtered.get("authors") or [])
        filtered["tags"] = list(filtered.get("tags") or [])
        return cls(**filtered)
