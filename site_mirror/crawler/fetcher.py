# site_mirror/crawler/fetcher.py
"""
Fetcher module: downloads one URL over HTTP with optional retry/backoff.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol, Sequence

from aiohttp import ClientError, ClientSession

from site_mirror.crawler.models import PageData
from site_mirror.errors import FetchError
from site_mirror.logger import logger

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


class PageFetcher(Protocol):
    """Anything the crawler can pull pages through."""

    async def fetch(self, url: str) -> PageData: ...


class Fetcher:
    """Handles HTTP fetching with retries/backoff on top of an aiohttp session."""

    def __init__(
        self,
        session: ClientSession,
        retry_times: int = 0,
        retry_backoff: float = 1.0,
        retry_status: Optional[Sequence[int]] = None,
    ) -> None:
        self.session = session
        self.retry_times = retry_times
        self.retry_backoff = retry_backoff
        self._retry_status = RETRY_STATUS if retry_status is None else retry_status

    async def fetch(self, url: str) -> PageData:
        """
        GET *url* and return its body.

        Raises FetchError on transport failure, timeout or any non-2xx status
        left after the retries are spent.
        """
        attempts = 0
        while True:
            try:
                async with self.session.get(url, raise_for_status=False) as resp:
                    status = resp.status
                    if status in self._retry_status and attempts < self.retry_times:
                        raise ClientError(f"Retryable status {status}")
                    if not 200 <= status < 300:
                        raise FetchError(
                            url, f"Bad status code {status} getting web page from url {url}", status
                        )
                    body = await resp.read()
                    return PageData(url, status, body, resp.headers.get("Content-Type", ""))
            except asyncio.TimeoutError as exc:
                # no retry on timeout
                raise FetchError(url, f"Timed out getting web page from url {url}") from exc
            except ClientError as exc:
                attempts += 1
                if attempts > self.retry_times:
                    raise FetchError(url, f"Error making web request to {url}: {exc}") from exc
                backoff = min(self.retry_backoff * 2 ** (attempts - 1), 60)
                logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.retry_times, url, backoff)
                await asyncio.sleep(backoff)
