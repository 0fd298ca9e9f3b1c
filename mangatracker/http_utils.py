from __future__ import annotations

import time
from typing import Optional, TYPE_CHECKING

import cloudscraper
import requests
from cloudscraper.exceptions import CaptchaException, CloudflareException

if TYPE_CHECKING:
    from .ui import ConsoleUI


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_5) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/126.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def create_scraper() -> cloudscraper.CloudScraper:
    scraper = cloudscraper.create_scraper(
        browser={"browser": "chrome", "platform": "darwin", "mobile": False},
    )
    scraper.headers.update(DEFAULT_HEADERS)
    return scraper


def perform_request(
    scraper: requests.Session,
    url: str,
    *,
    retries: int,
    backoff: float,
    timeout: float,
    purpose: str,
    ui: Optional["ConsoleUI"] = None,
) -> requests.Response:
    """GET ``url``, retrying up to ``retries`` attempts in total.

    Cloudflare challenge and captcha failures are retried like network
    errors. Raises RuntimeError chained to the last error once every
    attempt has failed.
    """
    last_error: Optional[Exception] = None
    for attempt in range(1, retries + 1):
        try:
            response = scraper.get(url, timeout=timeout)
            response.raise_for_status()
            if ui and attempt > 1:
                ui.update_detail(None)
            return response
        except (requests.RequestException, CloudflareException, CaptchaException) as exc:
            last_error = exc
            if attempt == retries:
                break
            wait_time = max(0.5, backoff * attempt)
            message = str(exc).strip() or exc.__class__.__name__
            if ui:
                ui.update_detail(
                    f"{purpose} attempt {attempt}/{retries} failed ({message}). "
                    f"Retrying in {wait_time:.1f}s...",
                    level="warning",
                )
            time.sleep(wait_time)
    if ui:
        ui.update_detail(None)
    reason = str(last_error).strip() if last_error else "no attempt made"
    raise RuntimeError(f"{purpose} failed after {retries} attempt(s): {reason}") from last_error
