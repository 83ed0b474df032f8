"""site_mirror.errors: иерархия исключений зеркалирования."""

from __future__ import annotations

from typing import Optional

__all__ = ["MirrorError", "FetchError", "PersistenceError", "ConfigError"]


class MirrorError(Exception):
    """Base class for every error raised by SiteMirror."""


class FetchError(MirrorError):
    """Transport failure or non-2xx status for a single URL.

    Aborts only the branch rooted at :attr:`url`; the crawl goes on.
    """

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class PersistenceError(MirrorError):
    """Directory or file could not be created or written."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(MirrorError):
    """Fatal configuration problem detected before crawling starts."""
