# -*- coding: utf-8 -*-
import json
import datetime as dt

import pytest
import requests

from scripts import fetch_marathi_readings as fmr
from scripts.liturgical_calendar import reading_url
from scripts.readings_store import FileReadingsStore, resume_cursor
from tests.conftest import make_response

D = dt.date

class FakeBlog:
    """Serves `html` for the dates in `published`, 404 for everything else."""

    def __init__(self, html, published=(), always=False, fail=None):
        self.html = html
        self.published = {reading_url(d) for d in published}
        self.always = always
        self.fail = fail
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        if self.fail:
            raise self.fail
        if self.always or url in self.published:
            return self.html
        raise fmr.NotFound(url)

class FakeThrottle(fmr.Throttle):
    def __init__(self):
        self.sleeps = []
        super().__init__(1.0, sleep=self.sleeps.append, clock=lambda: 0.0)

@pytest.fixture(autouse=True)
def quiet(monkeypatch):
    monkeypatch.setenv("VERBOSE", "0")

def saved_files(base):
    return sorted(p.name for p in base.rglob("*.json"))

def test_saves_until_404(tmp_path, post_html):
    blog = FakeBlog(post_html, published=[D(2026, 1, 13), D(2026, 1, 14)])
    throttle = FakeThrottle()
    n = fmr.run(FileReadingsStore(tmp_path), D(2026, 1, 13), fetch=blog, max_days=30, throttle=throttle)
    assert n == 2
    assert saved_files(tmp_path) == ["2026-01-13.json", "2026-01-14.json"]
    assert blog.calls == [reading_url(D(2026, 1, d)) for d in (13, 14, 15)]
    # one pause before each follow-up request, none after the 404
    assert throttle.sleeps == [1.0, 1.0]

    record = json.loads((tmp_path / "2026" / "01" / "2026-01-14.json").read_text(encoding="utf-8"))
    assert record["date"] == "2026-01-14"
    assert record["url"] == reading_url(D(2026, 1, 14))
    assert len(record["readings"]) == 4

def test_immediate_404_writes_nothing(tmp_path, post_html):
    blog = FakeBlog(post_html)
    assert fmr.run(FileReadingsStore(tmp_path), D(2026, 1, 13), fetch=blog, throttle=FakeThrottle()) == 0
    assert len(blog.calls) == 1
    assert saved_files(tmp_path) == []

def test_never_more_than_max_days(tmp_path, post_html):
    blog = FakeBlog(post_html, always=True)
    n = fmr.run(FileReadingsStore(tmp_path), D(2026, 1, 1), fetch=blog, max_days=30, throttle=FakeThrottle())
    assert n == 30
    assert len(blog.calls) == 30
    assert len(saved_files(tmp_path)) == 30

def test_max_days_cannot_raise_the_hard_limit(tmp_path, post_html):
    blog = FakeBlog(post_html, always=True)
    n = fmr.run(FileReadingsStore(tmp_path), D(2026, 1, 1), fetch=blog, max_days=40, throttle=FakeThrottle())
    assert n == fmr.HARD_LIMIT == 30
    assert len(blog.calls) == 30
    assert len(saved_files(tmp_path)) == 30

def test_max_days_can_lower_the_limit(tmp_path, post_html):
    blog = FakeBlog(post_html, always=True)
    assert fmr.run(FileReadingsStore(tmp_path), D(2026, 1, 1), fetch=blog, max_days=3, throttle=FakeThrottle()) == 3

@pytest.mark.parametrize("error", [
    fmr.FetchError("GET failed: 503"),
    RuntimeError("boom"),
])
def test_other_errors_stop_the_loop(tmp_path, post_html, error):
    blog = FakeBlog(post_html, fail=error)
    assert fmr.run(FileReadingsStore(tmp_path), D(2026, 1, 13), fetch=blog, throttle=FakeThrottle()) == 0
    assert len(blog.calls) == 1
    assert saved_files(tmp_path) == []

def test_page_without_post_body_stops(tmp_path):
    blog = FakeBlog("<html><body><p>पहिले वाचन</p></body></html>", always=True)
    assert fmr.run(FileReadingsStore(tmp_path), D(2026, 1, 13), fetch=blog, throttle=FakeThrottle()) == 0
    assert saved_files(tmp_path) == []

def test_rerun_when_up_to_date_writes_nothing(tmp_path, post_html):
    store = FileReadingsStore(tmp_path)
    blog = FakeBlog(post_html, published=[D(2026, 1, 13), D(2026, 1, 14)])
    fmr.run(store, D(2026, 1, 13), fetch=blog, throttle=FakeThrottle())
    before = {p: p.stat().st_mtime_ns for p in tmp_path.rglob("*.json")}

    blog.calls.clear()
    start = resume_cursor(store, D(2026, 3, 1))
    assert start == D(2026, 1, 15)
    assert fmr.run(store, start, fetch=blog, throttle=FakeThrottle()) == 0
    assert blog.calls == [reading_url(D(2026, 1, 15))]
    assert {p: p.stat().st_mtime_ns for p in tmp_path.rglob("*.json")} == before

def test_dry_run_writes_nothing(tmp_path, post_html, capsys):
    blog = FakeBlog(post_html, published=[D(2026, 1, 13)])
    n = fmr.run(FileReadingsStore(tmp_path), D(2026, 1, 13), fetch=blog, throttle=FakeThrottle(), dry_run=True)
    assert n == 1
    assert saved_files(tmp_path) == []
    assert '"date": "2026-01-13"' in capsys.readouterr().out

def test_throttle_only_sleeps_for_the_remainder():
    now = [100.0]
    sleeps = []
    t = fmr.Throttle(1.0, sleep=sleeps.append, clock=lambda: now[0])
    t.wait()
    now[0] += 0.25
    t.wait()
    now[0] += 5
    t.wait()
    assert sleeps == [0.75]

# ===== fetch_html =====
def test_fetch_html_ok(monkeypatch):
    monkeypatch.setattr(fmr.requests, "get", lambda url, **kw: make_response(200, "<p>ठीक</p>", url))
    assert fmr.fetch_html("https://example.test/a.html") == "<p>ठीक</p>"

def test_fetch_html_404(monkeypatch):
    monkeypatch.setattr(fmr.requests, "get", lambda url, **kw: make_response(404, "", url))
    with pytest.raises(fmr.NotFound):
        fmr.fetch_html("https://example.test/a.html")

def test_fetch_html_server_error(monkeypatch):
    monkeypatch.setattr(fmr.requests, "get", lambda url, **kw: make_response(500, "", url))
    with pytest.raises(fmr.FetchError):
        fmr.fetch_html("https://example.test/a.html")

def test_fetch_html_network_error(monkeypatch):
    def boom(url, **kw):
        raise requests.ConnectionError("refused")
    monkeypatch.setattr(fmr.requests, "get", boom)
    with pytest.raises(fmr.FetchError):
        fmr.fetch_html("https://example.test/a.html")

# ===== CLI =====
def test_main_resumes_from_content_dir(tmp_path, monkeypatch, post_html):
    touch = tmp_path / "2026" / "01" / "2026-01-14.json"
    touch.parent.mkdir(parents=True)
    touch.write_text("{}", encoding="utf-8")

    published = {reading_url(D(2026, 1, 15))}
    calls = []

    def fake_get(url, **kw):
        calls.append(url)
        if url in published:
            return make_response(200, post_html, url)
        return make_response(404, "", url)

    monkeypatch.setattr(fmr.requests, "get", fake_get)
    assert fmr.main(["--content-dir", str(tmp_path), "--delay", "0"]) == 0
    assert calls == [reading_url(D(2026, 1, 15)), reading_url(D(2026, 1, 16))]
    assert (tmp_path / "2026" / "01" / "2026-01-15.json").is_file()
