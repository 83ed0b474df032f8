# File: tests/test_frontier.py
from site_mirror.crawler.frontier import Frontier


def test_register_is_idempotent():
    frontier = Frontier()
    assert frontier.register("http://example.com/a", 1) is True
    assert frontier.register("http://example.com/a", 5) is False
    assert frontier.register("http://example.com/a/", 5) is False
    assert len(frontier) == 1
    assert frontier.depth_of("http://example.com/a") == 1


def test_register_never_resets_visited():
    frontier = Frontier()
    frontier.register("http://example.com/a")
    frontier.mark_visited("http://example.com/a")
    frontier.register("http://example.com/a")
    assert frontier.is_visited("http://example.com/a")
    assert list(frontier.next_unvisited()) == []


def test_mark_visited_unknown_is_noop():
    frontier = Frontier()
    frontier.mark_visited("http://example.com/missing")
    assert len(frontier) == 0
    assert "http://example.com/missing" not in frontier


def test_claim_only_once():
    frontier = Frontier()
    frontier.register("http://example.com")
    assert frontier.claim("http://example.com") is True
    assert frontier.claim("http://example.com") is False
    assert frontier.claim("http://example.com/unregistered") is False


def test_next_unvisited_insertion_order_and_exhaustion():
    frontier = Frontier()
    urls = ["http://example.com", "http://example.com/b", "http://example.com/a"]
    for url in urls:
        frontier.register(url)
    assert list(frontier.next_unvisited()) == urls
    assert not frontier.is_exhausted()

    frontier.mark_visited("http://example.com/b")
    assert list(frontier.next_unvisited()) == ["http://example.com", "http://example.com/a"]

    for url in urls:
        frontier.mark_visited(url)
    assert frontier.is_exhausted()


def test_next_unvisited_is_lazy():
    frontier = Frontier()
    frontier.register("http://example.com/1")
    frontier.register("http://example.com/2")
    pending = frontier.next_unvisited()
    assert next(pending) == "http://example.com/1"
    frontier.mark_visited("http://example.com/2")
    assert list(pending) == []


def test_empty_frontier_is_exhausted():
    assert Frontier().is_exhausted()


def test_scheme_variants_are_distinct_by_default():
    frontier = Frontier()
    assert frontier.register("http://example.com/a")
    assert frontier.register("https://example.com/a")
    assert len(frontier) == 2


def test_merge_schemes_collapses_variants():
    frontier = Frontier(merge_schemes=True)
    assert frontier.register("http://example.com/a")
    assert not frontier.register("https://example.com/a")
    frontier.mark_visited("https://example.com/a")
    assert frontier.is_visited("http://example.com/a")
