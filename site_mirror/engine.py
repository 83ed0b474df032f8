# File: site_mirror/engine.py
"""site_mirror.engine: Orchestration layer для запуска зеркалирования."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from site_mirror.aggregator import CrawlReport
from site_mirror.config import MirrorConfig
from site_mirror.crawler.crawler import MirrorCrawler
from site_mirror.crawler.persister import DIR_MODE
from site_mirror.errors import ConfigError
from site_mirror.logger import logger

__all__ = ["Engine", "prepare_destination", "start_mirror"]


def prepare_destination(destination: Path) -> Path:
    """Создаёт корневую папку назначения (0755). Ошибка – ConfigError."""
    try:
        destination.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        os.chmod(destination, DIR_MODE)
    except OSError as exc:
        raise ConfigError(f"Could not create destination directory {destination}: {exc}") from exc
    return destination


async def start_mirror(cfg: MirrorConfig) -> CrawlReport:
    """Запускает MirrorCrawler в контексте и возвращает CrawlReport."""
    async with MirrorCrawler(cfg) as crawler:
        return await crawler.crawl()


class Engine:
    """Фасад для CLI и тестов: подготовка папки, запуск обхода с таймаутом."""

    def __init__(self, config: MirrorConfig) -> None:
        self.config = config

    def run(self) -> CrawlReport:
        """Синхронно выполняет обход; crawl_timeout ограничивает весь обход."""
        prepare_destination(self.config.destination)
        logger.info("Starting mirror of %s into %s", self.config.seed_url, self.config.destination)
        try:
            return asyncio.run(asyncio.wait_for(start_mirror(self.config), timeout=self.config.crawl_timeout))
        except asyncio.TimeoutError:
            logger.error("Mirroring did not finish within %s seconds", self.config.crawl_timeout)
            raise
