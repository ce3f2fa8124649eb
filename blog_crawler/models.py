"""Crawl state and result records."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple


class UniqueURLSet:
    """Accepted URLs found so far in a crawl. Only ever grows."""

    def __init__(self, urls: Iterable[str] = ()):
        self._urls: Set[str] = set(urls)

    def add_all(self, urls: Iterable[str]) -> int:
        """Merge *urls* in and return how many were new."""
        before = len(self._urls)
        self._urls.update(urls)
        return len(self._urls) - before

    def to_list(self) -> List[str]:
        return list(self._urls)

    def __len__(self) -> int:
        return len(self._urls)

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __iter__(self):
        return iter(self._urls)


@dataclass(frozen=True)
class CrawlResult:
    """Final record of a crawl.

    The URL order is arbitrary. ``total_count`` always equals
    ``len(blog_urls)``; build instances with :meth:`from_urls`.
    """
    base_url: str
    blog_urls: Tuple[str, ...]
    total_count: int
    crawled_at: str

    def __post_init__(self):
        if self.total_count != len(self.blog_urls):
            raise ValueError(
                f"total_count {self.total_count} does not match "
                f"{len(self.blog_urls)} URLs"
            )

    @classmethod
    def from_urls(cls, base_url: str, urls: Iterable[str],
                  crawled_at: Optional[datetime] = None) -> "CrawlResult":
        blog_urls = tuple(urls)
        if crawled_at is None:
            crawled_at = datetime.now(timezone.utc).astimezone()
        return cls(
            base_url=base_url,
            blog_urls=blog_urls,
            total_count=len(blog_urls),
            crawled_at=crawled_at.isoformat(timespec="seconds"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "blog_urls": list(self.blog_urls),
            "total_count": self.total_count,
            "crawled_at": self.crawled_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrawlResult":
        return cls(
            base_url=data["base_url"],
            blog_urls=tuple(data["blog_urls"]),
            total_count=data["total_count"],
            crawled_at=data["crawled_at"],
        )
