# site_mirror/crawler/persister.py
"""
Persister: maps a page URL onto the destination tree and writes its bytes.

Layout::

    <dest>/<seed without scheme>/index.html      # the seed page
    <dest>/<host>/<dir>/.../<last segment>        # every other page

``&`` and ``?`` in the file name become ``_``. Writes go through a temporary
file in the target directory followed by :func:`os.replace`, so a page is
either fully written or absent.
"""
from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, Union

from site_mirror.crawler.urls import normalize_url, strip_scheme
from site_mirror.errors import PersistenceError
from site_mirror.logger import logger

__all__ = ("INDEX_NAME", "DIR_MODE", "FILE_MODE", "map_to_path", "write_page", "Persister")

INDEX_NAME = "index.html"
DIR_MODE = 0o755
FILE_MODE = 0o644

_UNSAFE_CHARS = ("&", "?")

MoveCallback = Callable[[Path, Path], None]


def _safe_name(name: str) -> str:
    for ch in _UNSAFE_CHARS:
        name = name.replace(ch, "_")
    return name


def map_to_path(url: str, destination: Union[str, Path], seed_url: str) -> Path:
    """
    Compute where *url* is stored under *destination*.

    The seed, and its other-scheme twin, always lands in ``index.html``.
    Raises :class:`PersistenceError` when the path would escape *destination*
    (flat href resolution keeps ``..`` segments).
    """
    dest = Path(destination)
    stripped = strip_scheme(normalize_url(url))
    seed_stripped = strip_scheme(normalize_url(seed_url))

    if stripped == seed_stripped:
        path = dest / _safe_name(seed_stripped) / INDEX_NAME
    else:
        folders, _, file_name = stripped.rpartition("/")
        path = dest / folders / _safe_name(file_name)

    root = Path(os.path.normpath(dest))
    target = Path(os.path.normpath(path))
    if root not in target.parents:
        raise PersistenceError(str(path), f"Path {path} escapes destination {dest}")
    return target


def _promote_to_index(file_path: Path) -> Path:
    """Turn page file ``x`` into ``x/index.html`` so ``x`` can hold children."""
    parked = file_path.with_name(f".{file_path.name}.promote")
    file_path.rename(parked)
    file_path.mkdir(mode=DIR_MODE)
    parked.rename(file_path / INDEX_NAME)
    logger.debug("Moved %s to %s", file_path, file_path / INDEX_NAME)
    return file_path / INDEX_NAME


def _make_dirs(directory: Path, root: Path, on_move: Optional[MoveCallback] = None) -> None:
    root.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    current = root
    for part in directory.relative_to(root).parts:
        current = current / part
        if current.is_file():
            moved = _promote_to_index(current)
            if on_move is not None:
                on_move(current, moved)
        current.mkdir(mode=DIR_MODE, exist_ok=True)


def write_page(path: Union[str, Path], content: bytes) -> Path:
    """Atomically write *content* to *path*; returns the final file path."""
    path = Path(path)
    if path.is_dir():
        path = path / INDEX_NAME
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
    except OSError as exc:
        raise PersistenceError(str(path), f"Could not write {path}: {exc}") from exc
    return path


class Persister:
    """Stores fetched pages of one crawl job under its destination root."""

    def __init__(
        self,
        destination: Union[str, Path],
        seed_url: str,
        on_move: Optional[MoveCallback] = None,
    ) -> None:
        self.destination = Path(destination)
        self.seed_url = seed_url
        # called with (old, new) when a saved page is moved into a directory
        self.on_move = on_move

    def path_for(self, url: str) -> Path:
        return map_to_path(url, self.destination, self.seed_url)

    def save(self, url: str, content: bytes) -> Path:
        """Map, create directories and write. Raises PersistenceError."""
        path = self.path_for(url)
        root = Path(os.path.normpath(self.destination))
        try:
            _make_dirs(path.parent, root, self.on_move)
        except OSError as exc:
            raise PersistenceError(str(path.parent), f"Could not create {path.parent}: {exc}") from exc
        return write_page(path, content)
