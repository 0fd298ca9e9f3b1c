from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .errors import StoreError

DEFAULT_DB_PATH = Path.home() / ".manga_tracker" / "db"

ALLOWED_TABLE = "Whitelist"
DENIED_TABLE = "Blacklist"


class SeriesStore:
    """SQLite database holding the allowed and denied series URLs.

    Example:
        store = SeriesStore("~/.manga_tracker/db")
        store.denied.insert("https://mangahub.io/chapter/some-series/")
        store.denied.contains("https://mangahub.io/chapter/some-series/")
    """

    def __init__(self, db_path: Path | str = DEFAULT_DB_PATH) -> None:
        self.db_path = Path(db_path).expanduser()
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Cannot create database directory {self.db_path.parent}: {exc}") from exc
        self._init_db()
        self.allowed = SeriesSet(self, ALLOWED_TABLE)
        self.denied = SeriesSet(self, DENIED_TABLE)

    def _init_db(self) -> None:
        with self.connection() as conn:
            conn.executescript(
                f"""
                CREATE TABLE IF NOT EXISTS {ALLOWED_TABLE}(url LONGVARCHAR PRIMARY KEY);
                CREATE TABLE IF NOT EXISTS {DENIED_TABLE}(url LONGVARCHAR PRIMARY KEY);
                """
            )

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0, isolation_level=None)
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open database {self.db_path}: {exc}") from exc
        try:
            yield conn
        except sqlite3.Error as exc:
            raise StoreError(f"Database error in {self.db_path}: {exc}") from exc
        finally:
            conn.close()


class SeriesSet:
    """One persisted set of series URLs (a table with a single key column)."""

    def __init__(self, store: SeriesStore, table: str) -> None:
        self._store = store
        self.table = table

    def contains(self, url: str) -> bool:
        with self._store.connection() as conn:
            row = conn.execute(f"SELECT 1 FROM {self.table} WHERE url = ?", (url,)).fetchone()
        return row is not None

    def insert(self, url: str) -> None:
        with self._store.connection() as conn:
            conn.execute(f"INSERT OR IGNORE INTO {self.table}(url) VALUES(?)", (url,))

    def list_all(self) -> list[str]:
        with self._store.connection() as conn:
            rows = conn.execute(f"SELECT url FROM {self.table} ORDER BY url").fetchall()
        return [row[0] for row in rows]

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.contains(url)

    def __repr__(self) -> str:
        return f"SeriesSet(table={self.table!r}, db={str(self._store.db_path)!r})"
