"""Read-status and tag filtering for the paper list."""

from enum import Enum
from typing import Iterable, List, Optional

from core.paper import Paper


class ReadFilter(Enum):
    ALL = "All"
    READ = "Read"
    UNREAD = "Unread"

    def accepts(self, paper: Paper) -> bool:
        if self is ReadFilter.READ:
            return paper.is_read
        if self is ReadFilter.UNREAD:
            return not paper.is_read
        return True


def filter_papers(
    papers: Iterable[Paper],
    tag: Optional[str] = None,
    read_filter: ReadFilter = ReadFilter.ALL,
) -> List[Paper]:
    """Keep papers carrying tag (if given) that pass read_filter. Order kept."""
    return [
        p for p in papers
        if (tag is None or tag in p.tags) and read_filter.accepts(p)
    ]


def collect_tags(papers: Iterable[Paper]) -> List[str]:
    """Every distinct tag across papers, sorted case-insensitively."""
    tags = {tag for p in papers for tag in p.tags}
    return sorted(tags, key=lambda t: (t.lower(), t))
