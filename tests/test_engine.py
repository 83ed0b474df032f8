# File: tests/test_engine.py
import json

import pytest

import site_mirror.engine as engine_module
from site_mirror.aggregator import CrawlReport
from site_mirror.config import MirrorConfig
from site_mirror.engine import Engine, prepare_destination
from site_mirror.errors import ConfigError, MirrorError
from site_mirror.report import render_json


def test_prepare_destination_creates_tree(tmp_path):
    target = tmp_path / "a" / "b"
    assert prepare_destination(target) == target
    assert target.is_dir()
    # existing directory is fine
    prepare_destination(target)


def test_prepare_destination_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(ConfigError) as exc_info:
        prepare_destination(blocker / "sub")
    assert isinstance(exc_info.value, MirrorError)


def test_engine_run(tmp_path, monkeypatch):
    async def fake(cfg):
        return CrawlReport(seed_url=cfg.seed_url)

    monkeypatch.setattr(engine_module, "start_mirror", fake)
    cfg = MirrorConfig(seed_url="http://example.com", destination=tmp_path / "d")
    report = Engine(cfg).run()
    assert report.seed_url == "http://example.com"
    assert (tmp_path / "d").is_dir()


def test_engine_run_timeout(tmp_path, monkeypatch):
    import asyncio

    async def slow(cfg):
        await asyncio.sleep(2)

    monkeypatch.setattr(engine_module, "start_mirror", slow)
    cfg = MirrorConfig(seed_url="http://example.com", destination=tmp_path / "d", crawl_timeout=0.05)
    with pytest.raises(asyncio.TimeoutError):
        Engine(cfg).run()


def test_render_json_report(tmp_path):
    report = CrawlReport(seed_url="http://example.com")
    report.add_page("http://example.com", tmp_path / "index.html", 0, 42)
    report.add_failure("http://example.com/x", "fetch", "Bad status code 404", 404)

    path = render_json(report, tmp_path / "reports" / "crawl.json")
    data = json.loads(path.read_text(encoding="utf-8"))

    assert data["pages"][0]["size"] == 42
    assert data["failures"][0]["kind"] == "fetch"
    assert data["failures"][0]["status"] == 404
    assert data["started_at"] is None
    assert data["duration"] == 0.0
    assert json.loads(report.json())["seed_url"] == "http://example.com"
