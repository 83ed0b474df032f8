from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Iterator, List, Optional

from aiohttp import ClientSession, ClientTimeout

from site_mirror.aggregator import CrawlReport
from site_mirror.config import MirrorConfig
from site_mirror.crawler.fetcher import Fetcher, PageFetcher
from site_mirror.crawler.frontier import Frontier
from site_mirror.crawler.link_extractor import extract_hrefs, is_followable, is_html
from site_mirror.crawler.models import CrawlTask, PageData
from site_mirror.crawler.persister import Persister
from site_mirror.crawler.urls import is_same_site, normalize_url, resolve_href
from site_mirror.errors import FetchError, PersistenceError
from site_mirror.logger import LOGGER_NAME

__all__ = ("MirrorCrawler",)


class MirrorCrawler:
    """
    Асинхронный обходчик одного сайта с сохранением страниц на диск.

    Work is drained one depth level at a time: a FIFO queue of ``(url, depth)``
    tasks for level ``d`` is worked by ``config.concurrency`` workers, and level
    ``d + 1`` starts only after all of them finish. A URL is therefore first
    registered at its shortest distance from the seed, whatever the order in
    which workers complete. Links found on a page at depth ``d`` are registered
    at ``d + 1`` only while ``max_depth <= 0`` or ``d < max_depth``. Each URL is
    registered once, enqueued once and claimed (marked visited) right before
    its single fetch.
    """

    def __init__(
        self,
        config: MirrorConfig,
        fetcher: Optional[PageFetcher] = None,
        persister: Optional[Persister] = None,
    ) -> None:
        self.config = config
        self.job = config.job()
        self.seed = self.job.seed_url
        self.frontier = Frontier(merge_schemes=config.merge_schemes)
        self.persister = persister or Persister(self.job.destination, self.seed)
        self.fetcher = fetcher
        self.session: Optional[ClientSession] = None
        self.report = CrawlReport(seed_url=self.seed)
        self.persister.on_move = self.report.move_page
        self.logger = logging.getLogger(LOGGER_NAME)
        self._started = 0

    async def __aenter__(self) -> MirrorCrawler:
        if self.fetcher is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self.fetcher = Fetcher(
                self.session,
                retry_times=self.config.retry_times,
                retry_backoff=self.config.retry_backoff,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlReport:
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized, use 'async with MirrorCrawler(...)'")
        self.logger.info("Старт обхода: %s (max_depth=%s)", self.seed, self.job.max_depth)
        start = time.monotonic()
        self.report.started_at = datetime.now()

        self.frontier.register(self.seed, 0)
        level = [CrawlTask(self.seed, 0)]
        try:
            while level:
                level = await self._drain_level(level)
        finally:
            self.report.finished_at = datetime.now()

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц сохранено, %d ошибок за %.2f с",
            len(self.report.pages), len(self.report.failures), duration,
        )
        return self.report

    async def _drain_level(self, tasks: List[CrawlTask]) -> List[CrawlTask]:
        """Process one depth level; returns the tasks discovered for the next one."""
        queue: asyncio.Queue[CrawlTask] = asyncio.Queue()
        for task in tasks:
            queue.put_nowait(task)
        next_level: List[CrawlTask] = []
        workers = [
            asyncio.create_task(self._worker(queue, next_level))
            for _ in range(min(self.config.concurrency, len(tasks)))
        ]
        try:
            await queue.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
        return next_level

    async def _worker(self, queue: asyncio.Queue[CrawlTask], next_level: List[CrawlTask]) -> None:
        while True:
            task = await queue.get()
            try:
                await self._process(task, next_level)
            except Exception as exc:
                self.logger.exception("Unexpected error while processing %s", task.url)
                self.report.add_failure(task.url, "internal", str(exc))
            finally:
                queue.task_done()

    async def _process(self, task: CrawlTask, next_level: List[CrawlTask]) -> None:
        if self.config.max_pages is not None and self._started >= self.config.max_pages:
            self.logger.debug("Page limit reached, skipping %s", task.url)
            return
        if not self.frontier.claim(task.url):
            return
        self._started += 1
        self.report.fetched.append(task.url)

        self.logger.info("Fetching [depth %d] %s", task.depth, task.url)
        try:
            page = await self.fetcher.fetch(task.url)  # type: ignore[union-attr]
        except FetchError as exc:
            self.logger.warning("Failed %s: %s", task.url, exc)
            self.report.add_failure(task.url, "fetch", str(exc), exc.status)
            return

        try:
            path = self.persister.save(task.url, page.content)
        except PersistenceError as exc:
            self.logger.error("Could not save %s: %s", task.url, exc)
            self.report.add_failure(task.url, "persist", str(exc))
        else:
            self.logger.debug("Saved %s -> %s", task.url, path)
            self.report.add_page(task.url, path, task.depth, len(page.content))

        if not self.job.allows_children(task.depth):
            return
        child_depth = task.depth + 1
        for link in self._discover(page):
            if self.frontier.register(link, child_depth):
                next_level.append(CrawlTask(link, child_depth))

    def _discover(self, page: PageData) -> Iterator[str]:
        """Yield normalized same-site links of *page* in document order."""
        if not is_html(page.content_type):
            return
        # flat resolution is anchored at the site root, rfc3986 at the page itself
        base = self.seed if self.config.resolver == "flat" else page.url
        for href in extract_hrefs(page.content):
            if not is_followable(href):
                continue
            link = normalize_url(resolve_href(base, href, self.config.resolver))
            if is_same_site(self.seed, link, strict=self.config.strict_host):
                yield link
            else:
                self.logger.debug("Skipping off-site link %s", link)
