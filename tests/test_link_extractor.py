# File: tests/test_link_extractor.py
import pytest

from site_mirror.crawler.link_extractor import extract_hrefs, is_followable, is_html


def test_extract_hrefs_document_order():
    html = (
        b'<html><body><a href="/b">B</a><p><a href=" /a ">A</a></p>'
        b'<a name="anchor">no href</a><a href="http://external.com">X</a></body></html>'
    )
    assert extract_hrefs(html) == ["/b", "/a", "http://external.com"]


def test_extract_hrefs_accepts_text():
    assert extract_hrefs('<a href="page">p</a>') == ["page"]


def test_extract_hrefs_no_anchors():
    assert extract_hrefs(b"<html><body><h1>Nothing</h1></body></html>") == []


@pytest.mark.parametrize(
    "href,expected",
    [
        ("/about", True),
        ("about", True),
        ("https://example.com/x", True),
        ("//example.com/x", True),
        ("?page=2", True),
        ("", False),
        ("#top", False),
        ("mailto:me@example.com", False),
        ("javascript:void(0)", False),
        ("tel:+123", False),
        ("ftp://example.com/file", False),
    ],
)
def test_is_followable(href, expected):
    assert is_followable(href) is expected


@pytest.mark.parametrize(
    "ctype,expected",
    [
        ("text/html; charset=utf-8", True),
        ("application/xhtml+xml", True),
        ("", True),
        ("image/png", False),
        ("application/json", False),
    ],
)
def test_is_html(ctype, expected):
    assert is_html(ctype) is expected
