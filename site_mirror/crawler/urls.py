# site_mirror/crawler/urls.py
"""
URL normalization and same-site membership utilities for SiteMirror.

All helpers here are pure string functions. Two of them are deliberately
textual heuristics and have a stricter counterpart selected by a flag:

* :func:`is_same_site` – prefix test on scheme-stripped strings
  (``strict=True`` compares host components instead).
* :func:`resolve_href` – flat concatenation against the site root without
  ``.``/``..`` segment handling (``mode="rfc3986"`` uses :func:`urllib.parse.urljoin`).
"""
from __future__ import annotations

import re
from typing import Final, Literal
from urllib.parse import urljoin, urlsplit

__all__ = (
    "HTTP_PREFIX",
    "HTTPS_PREFIX",
    "ResolverMode",
    "ensure_scheme",
    "strip_scheme",
    "has_http_scheme",
    "has_any_scheme",
    "normalize_url",
    "frontier_key",
    "is_same_site",
    "resolve_href",
)

HTTP_PREFIX: Final[str] = "http://"
HTTPS_PREFIX: Final[str] = "https://"

ResolverMode = Literal["flat", "rfc3986"]

_ANY_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_HOST_END_RE = re.compile(r"[/?#:@]")


def has_http_scheme(url: str) -> bool:
    """True if *url* starts with ``http://`` or ``https://``."""
    return url.startswith((HTTP_PREFIX, HTTPS_PREFIX))


def has_any_scheme(url: str) -> bool:
    return bool(_ANY_SCHEME_RE.match(url))


def ensure_scheme(url: str) -> str:
    """Prefix ``http://`` unless the URL already carries an http(s) scheme."""
    if has_http_scheme(url):
        return url
    return HTTP_PREFIX + url


def strip_scheme(url: str) -> str:
    """Remove a leading ``https://`` or ``http://``; identity otherwise."""
    if url.startswith(HTTPS_PREFIX):
        return url[len(HTTPS_PREFIX):]
    if url.startswith(HTTP_PREFIX):
        return url[len(HTTP_PREFIX):]
    return url


def normalize_url(url: str) -> str:
    """
    Produce the canonical SiteURL form: scheme ensured, fragment dropped,
    trailing slashes trimmed.
    """
    url = url.strip().split("#", 1)[0]
    return ensure_scheme(url).rstrip("/")


def frontier_key(url: str, merge_schemes: bool = False) -> str:
    """Key under which *url* is stored in the frontier."""
    norm = normalize_url(url)
    return strip_scheme(norm) if merge_schemes else norm


def is_same_site(site_root: str, candidate: str, strict: bool = False) -> bool:
    """
    Decide whether *candidate* belongs to the site rooted at *site_root*.

    Heuristic mode (default): the scheme-stripped candidate must start with
    the scheme-stripped root, either directly or after dropping leading host
    labels. So ``passport.yandex.ru`` is accepted for ``yandex.ru`` while
    ``notyandex.ru`` is rejected. Being a textual prefix test it also accepts
    look-alikes such as ``yandex.ru.evil.com``; use ``strict=True`` when that
    matters.
    """
    if strict:
        return _is_same_host(site_root, candidate)

    root = strip_scheme(site_root).rstrip("/")
    if not root:
        return False
    rest = strip_scheme(candidate)
    while True:
        if rest.startswith(root):
            return True
        # only labels of the host part may be dropped
        dot = rest.find(".")
        if dot < 0 or dot > _host_end(rest):
            return False
        rest = rest[dot + 1:]


def _host_end(text: str) -> int:
    match = _HOST_END_RE.search(text)
    return match.start() if match else len(text)


def _is_same_host(site_root: str, candidate: str) -> bool:
    root = urlsplit(ensure_scheme(site_root))
    cand = urlsplit(ensure_scheme(candidate))
    root_host = (root.hostname or "").lower()
    cand_host = (cand.hostname or "").lower()
    if not root_host or not cand_host:
        return False
    if cand_host != root_host and not cand_host.endswith("." + root_host):
        return False
    try:
        if root.port is not None and cand.port != root.port:
            return False
    except ValueError:
        return False
    root_path = root.path.rstrip("/")
    if not root_path:
        return True
    return cand.path == root_path or cand.path.startswith(root_path + "/")


def resolve_href(base_url: str, href: str, mode: ResolverMode = "flat") -> str:
    """
    Turn a raw ``href`` into an absolute URL.

    ``flat``: http(s) hrefs are returned untouched; anything else has its
    leading slashes trimmed and, unless it already mentions the base's
    scheme-stripped form (protocol-relative links and the like), is appended
    to *base_url* with a single ``/``. Path segments such as ``..`` are kept
    verbatim; callers pass the site root as *base_url*.

    ``rfc3986``: standard relative reference resolution against the page URL.
    """
    href = href.strip()
    if mode == "rfc3986":
        return urljoin(ensure_scheme(base_url), href)
    if mode != "flat":
        raise ValueError(f"unknown resolver mode: {mode!r}")

    if has_http_scheme(href):
        return href
    trimmed = href.lstrip("/")
    if trimmed and strip_scheme(base_url).rstrip("/") in trimmed:
        return ensure_scheme(trimmed)
    return ensure_scheme(base_url).rstrip("/") + "/" + trimmed
