# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pytest
from aiohttp import web

from site_mirror.config import MirrorConfig
from site_mirror.crawler.models import PageData
from site_mirror.errors import FetchError
from site_mirror.logger import configure

SEED = "http://example.com"

_PageEntry = Union[Tuple[int, str], Tuple[int, str, str]]


class FakeFetcher:
    """
    In-memory fetcher: maps URL -> (status, body[, content_type]).
    Unknown URLs answer 404. Every call is recorded in ``calls``; URLs listed
    in ``delays`` answer after that many seconds.
    """

    def __init__(self, pages: Dict[str, _PageEntry], delays: Optional[Dict[str, float]] = None) -> None:
        self.pages = pages
        self.delays = delays or {}
        self.calls: List[str] = []

    async def fetch(self, url: str) -> PageData:
        self.calls.append(url)
        if url in self.delays:
            await asyncio.sleep(self.delays[url])
        entry = self.pages.get(url, (404, ""))
        status, body = entry[0], entry[1]
        ctype = entry[2] if len(entry) > 2 else "text/html; charset=utf-8"
        if not 200 <= status < 300:
            raise FetchError(url, f"Bad status code {status} getting web page from url {url}", status)
        return PageData(url, status, body.encode("utf-8"), ctype)


def links(*hrefs: str) -> str:
    return "<html><body>" + "".join(f'<a href="{h}">{h}</a>' for h in hrefs) + "</body></html>"


@pytest.fixture(autouse=True)
def _reset_logging():
    """CliRunner swaps sys.stderr; rebuild handlers after every test."""
    yield
    configure(level="WARNING")


@pytest.fixture()
def dest(tmp_path) -> Path:
    return tmp_path / "downloads"


@pytest.fixture()
def make_config(dest):
    """Factory for MirrorConfig with a temporary destination."""

    def _make(**kwargs) -> MirrorConfig:
        params = {"seed_url": SEED, "destination": dest, "concurrency": 1}
        params.update(kwargs)
        return MirrorConfig(**params)

    return _make


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()
