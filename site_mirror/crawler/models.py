# site_mirror/crawler/models.py
"""
Data models for the SiteMirror crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class PageData:
    """Holds the requested URL and raw body of a fetched page."""

    url: str
    status: int
    content: bytes
    content_type: str = ""


@dataclass(frozen=True, slots=True)
class CrawlJob:
    """Immutable description of one mirroring run."""

    seed_url: str
    max_depth: int
    destination: Path

    @property
    def unbounded(self) -> bool:
        return self.max_depth <= 0

    def allows_children(self, depth: int) -> bool:
        """Whether links found on a page at *depth* may be followed."""
        return self.unbounded or depth < self.max_depth


@dataclass(frozen=True, slots=True)
class CrawlTask:
    """Unit of work in the crawl queue; depth is the distance from the seed."""

    url: str
    depth: int
