"""Tests for the SQLite allow/deny store."""

import sqlite3

import pytest

from mangatracker.errors import StoreError
from mangatracker.store import SeriesStore

URL = "https://mangahub.io/chapter/one-piece/"


@pytest.fixture
def store(tmp_path):
    return SeriesStore(tmp_path / "data" / "db")


class TestSeriesStore:
    def test_creates_database_and_tables(self, tmp_path):
        db_path = tmp_path / "nested" / "db"
        SeriesStore(db_path)
        assert db_path.is_file()
        conn = sqlite3.connect(db_path)
        try:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        finally:
            conn.close()
        assert {"Whitelist", "Blacklist"} <= tables

    def test_insert_and_contains(self, store):
        assert not store.allowed.contains(URL)
        store.allowed.insert(URL)
        assert store.allowed.contains(URL)
        assert URL in store.allowed
        assert not store.denied.contains(URL)

    def test_insert_is_idempotent(self, store):
        store.denied.insert(URL)
        store.denied.insert(URL)
        assert store.denied.list_all() == [URL]

    def test_list_all_is_sorted(self, store):
        for url in ["https://b/", "https://a/", "https://c/"]:
            store.allowed.insert(url)
        assert store.allowed.list_all() == ["https://a/", "https://b/", "https://c/"]

    def test_persists_across_instances(self, tmp_path):
        db_path = tmp_path / "db"
        SeriesStore(db_path).denied.insert(URL)
        assert SeriesStore(db_path).denied.list_all() == [URL]

    def test_database_errors_become_store_errors(self, tmp_path):
        db_path = tmp_path / "db"
        db_path.write_bytes(b"this is not a sqlite database, just some bytes " * 4)
        with pytest.raises(StoreError):
            SeriesStore(db_path)
