"""Crawl core: URL normalizer, frontier, persister and traversal engine."""
