from __future__ import annotations

import os
import shutil
import sqlite3
import sys
import tempfile
from pathlib import Path
from typing import Optional

from .errors import HistoryError

HISTORY_URL_PATTERN = "https://mangahub.io/chapter/%/chapter-%"

_HISTORY_QUERY = "SELECT url FROM moz_places WHERE url LIKE ? ORDER BY url DESC"


def default_profiles_root() -> Path:
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Firefox" / "Profiles"
    if os.name == "nt":
        appdata = os.getenv("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / "Mozilla" / "Firefox" / "Profiles"
    return Path.home() / ".mozilla" / "firefox"


def find_places_database(profile_root: Optional[Path] = None) -> Path:
    """Locate ``places.sqlite`` of the default Firefox profile."""
    root = profile_root or default_profiles_root()
    if not root.is_dir():
        raise HistoryError(f"Firefox profile directory not found: {root}")

    for suffix in ("*.default-release", "*.default"):
        for profile in sorted(root.glob(suffix)):
            candidate = profile / "places.sqlite"
            if candidate.is_file():
                return candidate

    raise HistoryError(f"No Firefox profile with places.sqlite under {root}. Use --places to point at it.")


def load_history_urls(places_path: Path, pattern: str = HISTORY_URL_PATTERN) -> list[str]:
    """Return the visited URLs matching ``pattern``, newest URL string first.

    Firefox keeps the live database locked, so a copy is queried instead.
    """
    if not places_path.is_file():
        raise HistoryError(f"History database not found: {places_path}")

    with tempfile.TemporaryDirectory(prefix="manga_tracker_") as temp_dir:
        snapshot = Path(temp_dir) / "places.sqlite"
        try:
            shutil.copyfile(places_path, snapshot)
        except OSError as exc:
            raise HistoryError(f"Couldn't copy {places_path} to a temporary file: {exc}") from exc

        try:
            conn = sqlite3.connect(snapshot)
        except sqlite3.Error as exc:
            raise HistoryError(f"Couldn't open history snapshot: {exc}") from exc
        try:
            rows = conn.execute(_HISTORY_QUERY, (pattern,)).fetchall()
        except sqlite3.Error as exc:
            raise HistoryError(f"Failed to execute query: {_HISTORY_QUERY} ({exc})") from exc
        finally:
            conn.close()

    return [row[0] for row in rows]
