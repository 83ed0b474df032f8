# site_mirror/crawler/frontier.py
"""
Frontier: every discovered URL with its visited flag and discovery depth.

Entries live in an insertion-ordered dict, so enumeration is deterministic.
All mutating methods are synchronous and never await, which makes each of
them atomic with respect to the asyncio workers sharing one instance.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from site_mirror.crawler.urls import frontier_key

__all__ = ("FrontierEntry", "Frontier")


@dataclass(slots=True)
class FrontierEntry:
    url: str
    depth: int
    visited: bool = False


class Frontier:
    """Set of discovered same-site URLs and whether each has been fetched."""

    def __init__(self, merge_schemes: bool = False) -> None:
        self.merge_schemes = merge_schemes
        self._entries: Dict[str, FrontierEntry] = {}

    def _key(self, url: str) -> str:
        return frontier_key(url, self.merge_schemes)

    def register(self, url: str, depth: int = 0) -> bool:
        """
        Insert *url* as unvisited unless it is already known.

        Returns True only for a new entry; an existing entry (visited or not)
        is left untouched.
        """
        key = self._key(url)
        if key in self._entries:
            return False
        self._entries[key] = FrontierEntry(url=url, depth=depth)
        return True

    def mark_visited(self, url: str) -> None:
        entry = self._entries.get(self._key(url))
        if entry is not None:
            entry.visited = True

    def claim(self, url: str) -> bool:
        """Mark a registered, unvisited URL visited; False if that is impossible."""
        entry = self._entries.get(self._key(url))
        if entry is None or entry.visited:
            return False
        entry.visited = True
        return True

    def is_visited(self, url: str) -> bool:
        entry = self._entries.get(self._key(url))
        return entry is not None and entry.visited

    def depth_of(self, url: str) -> Optional[int]:
        entry = self._entries.get(self._key(url))
        return None if entry is None else entry.depth

    def next_unvisited(self) -> Iterator[str]:
        """Lazily yield unvisited URLs in registration order."""
        for entry in list(self._entries.values()):
            if not entry.visited:
                yield entry.url

    def is_exhausted(self) -> bool:
        return all(entry.visited for entry in self._entries.values())

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self._key(url) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
