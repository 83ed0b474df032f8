# site_mirror/crawler/link_extractor.py
"""
Anchor extraction for SiteMirror.
"""
from __future__ import annotations

from typing import List, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_mirror.crawler.urls import has_any_scheme, has_http_scheme

__all__ = ("extract_hrefs", "is_followable", "is_html")


def extract_hrefs(content: Union[str, bytes]) -> List[str]:
    """Return raw ``href`` values of every ``<a>`` in document order."""
    soup = BeautifulSoup(content, "html.parser")
    hrefs: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            hrefs.append(href_val.strip())
    return hrefs


def is_followable(href: str) -> bool:
    """
    Filter out hrefs that can never name a page of the site:
    empty or fragment-only links and non-http schemes (mailto:, javascript:, tel:, ...).
    """
    if not href or href.startswith("#"):
        return False
    if has_http_scheme(href) or href.startswith("//"):
        return True
    return not has_any_scheme(href)


def is_html(content_type: str) -> bool:
    """Missing Content-Type is treated as HTML."""
    mime = content_type.split(";", 1)[0].strip().lower()
    return not mime or "html" in mime
