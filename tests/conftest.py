"""Pytest configuration and shared fixtures."""

import sqlite3
from pathlib import Path

import pytest


class MemorySeriesSet:
    """In-memory stand-in for a persisted allow/deny set."""

    def __init__(self, urls=()):
        self.urls = set(urls)
        self.inserts = []

    def contains(self, url):
        return url in self.urls

    def insert(self, url):
        self.inserts.append(url)
        self.urls.add(url)

    def list_all(self):
        return sorted(self.urls)


class MemoryStore:
    def __init__(self, allowed=(), denied=()):
        self.allowed = MemorySeriesSet(allowed)
        self.denied = MemorySeriesSet(denied)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def make_places_db(tmp_path):
    """Build a minimal Firefox places.sqlite containing the given URLs."""

    def _make(urls, path: Path = None) -> Path:
        db_path = path or tmp_path / "places.sqlite"
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path)
        try:
            conn.execute("CREATE TABLE moz_places (id INTEGER PRIMARY KEY, url LONGVARCHAR)")
            conn.executemany("INSERT INTO moz_places(url) VALUES (?)", [(url,) for url in urls])
            conn.commit()
        finally:
            conn.close()
        return db_path

    return _make


SERIES_PAGE_HTML = """
<html><body>
<div class="tab-content">
  <div class="tab-pane">
    <ul class="list-group">
      <li><span><a href="https://mangahub.io/chapter/one-piece/chapter-1100">Chapter 1100</a></span></li>
      <li><span><a href="https://mangahub.io/chapter/one-piece/chapter-1099">Chapter 1099</a></span></li>
    </ul>
  </div>
</div>
</body></html>
"""


@pytest.fixture
def series_page_html():
    return SERIES_PAGE_HTML
