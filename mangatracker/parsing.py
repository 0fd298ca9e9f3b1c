from __future__ import annotations

import time
from typing import Optional, TYPE_CHECKING
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from .errors import FetchError, MalformedIdentifier
from .http_utils import perform_request
from .models import ChapterNumber, parse_identifier

if TYPE_CHECKING:
    from .ui import ConsoleUI

# Chapter list on a series page, newest chapter first.
LAST_CHAPTER_SELECTOR = "div.tab-content > div > ul > li > span > a"


def extract_last_chapter_url(html: str, page_url: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    link = soup.select_one(LAST_CHAPTER_SELECTOR)
    if link is None:
        raise FetchError(page_url, "Couldn't grab last chapter")
    href = (link.get("href") or "").strip()
    if not href:
        raise FetchError(page_url, "Last chapter link has no href")
    return urljoin(page_url, href)


def fetch_latest_chapter(
    scraper: requests.Session,
    series_url: str,
    *,
    retries: int = 1,
    backoff: float = 3.0,
    timeout: float = 30.0,
    delay: float = 0.0,
    ui: Optional["ConsoleUI"] = None,
) -> ChapterNumber:
    """Fetch a series page and return the number of its newest chapter."""
    try:
        response = perform_request(
            scraper,
            series_url,
            retries=retries,
            backoff=backoff,
            timeout=timeout,
            purpose="Series page request",
            ui=ui,
        )
    except RuntimeError as exc:
        raise FetchError(series_url, str(exc)) from exc
    finally:
        if delay:
            time.sleep(delay)

    last_url = extract_last_chapter_url(response.text, series_url)
    try:
        return parse_identifier(last_url).number
    except MalformedIdentifier as exc:
        raise FetchError(series_url, f"Unexpected last chapter link {last_url}") from exc
