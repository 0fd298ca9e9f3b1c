from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Mapping, MutableMapping, Optional, Protocol

from .errors import FetchError, MalformedIdentifier
from .history import load_history_urls
from .http_utils import create_scraper
from .models import ChapterNumber, chapter_url, parse_identifier
from .parsing import fetch_latest_chapter
from .store import SeriesStore
from .ui import ConsoleUI


class SeriesLookup(Protocol):
    def contains(self, url: str) -> bool: ...

    def insert(self, url: str) -> None: ...

    def list_all(self) -> list[str]: ...


class Decision(enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class UpdateReport:
    series_url: str
    last_read: ChapterNumber
    latest: ChapterNumber

    @property
    def last_read_url(self) -> str:
        return chapter_url(self.series_url, self.last_read)


@dataclass(frozen=True)
class FetchFailure:
    series_url: str
    error: FetchError


@dataclass
class DiffResult:
    reports: list[UpdateReport] = field(default_factory=list)
    failures: list[FetchFailure] = field(default_factory=list)


def reconcile(urls: Iterable[str], *, ui: Optional[ConsoleUI] = None) -> dict[str, ChapterNumber]:
    """Fold chapter URLs into the highest chapter seen per series.

    Malformed URLs are skipped. Among equal chapter numbers the last one
    seen is kept.
    """
    latest: dict[str, ChapterNumber] = {}
    for url in urls:
        try:
            chapter = parse_identifier(url)
        except MalformedIdentifier as exc:
            if ui:
                ui.log_event(f"Skipping history entry: {exc}", level="muted")
            continue
        current = latest.get(chapter.series_url)
        if current is None or chapter.number >= current:
            latest[chapter.series_url] = chapter.number
    return latest


def apply_deny(tracked: Mapping[str, ChapterNumber], denied: SeriesLookup) -> dict[str, ChapterNumber]:
    return {url: number for url, number in tracked.items() if not denied.contains(url)}


def discover(tracked: Mapping[str, ChapterNumber], allowed: SeriesLookup) -> set[str]:
    """Series present in ``tracked`` that the user has not allowed yet."""
    return {url for url in tracked if not allowed.contains(url)}


def classify(
    series_url: str,
    decision: Decision,
    *,
    tracked: MutableMapping[str, ChapterNumber],
    allowed: SeriesLookup,
    denied: SeriesLookup,
) -> None:
    if decision is Decision.ALLOW:
        allowed.insert(series_url)
    elif decision is Decision.DENY:
        denied.insert(series_url)
        tracked.pop(series_url, None)
    else:
        raise ValueError(f"Unknown decision: {decision!r}")


def classify_candidates(
    candidates: Iterable[str],
    ask: Callable[[str], Optional[Decision]],
    *,
    tracked: MutableMapping[str, ChapterNumber],
    allowed: SeriesLookup,
    denied: SeriesLookup,
) -> int:
    """Ask once per candidate and record the answers.

    Stops at the first ``None`` answer (end of input) and returns how many
    candidates were classified.
    """
    classified = 0
    for series_url in sorted(set(candidates)):
        decision = ask(series_url)
        if decision is None:
            break
        classify(series_url, decision, tracked=tracked, allowed=allowed, denied=denied)
        classified += 1
    return classified


def diff(
    tracked: Mapping[str, ChapterNumber],
    fetch_latest: Callable[[str], ChapterNumber],
    *,
    ui: Optional[ConsoleUI] = None,
) -> DiffResult:
    """Compare last read chapters against the latest published ones.

    A series is reported only when its latest chapter is strictly greater.
    A FetchError for one series is recorded and the others still run.
    """
    result = DiffResult()
    total = len(tracked)
    for index, series_url in enumerate(sorted(tracked), start=1):
        last_read = tracked[series_url]
        if ui:
            ui.update_status(f"Checking {index}/{total}: {series_url}", level="info")
        try:
            latest = fetch_latest(series_url)
        except FetchError as exc:
            result.failures.append(FetchFailure(series_url=series_url, error=exc))
            continue
        if latest > last_read:
            result.reports.append(UpdateReport(series_url=series_url, last_read=last_read, latest=latest))
    if ui:
        ui.update_status(None)
    return result


def check_for_updates(
    places_path: Path,
    store: SeriesStore,
    *,
    retries: int = 1,
    backoff: float = 3.0,
    timeout: float = 30.0,
    delay: float = 0.0,
    ui: Optional[ConsoleUI] = None,
    ask: Optional[Callable[[str], Optional[Decision]]] = None,
    fetch_latest: Optional[Callable[[str], ChapterNumber]] = None,
) -> DiffResult:
    internal_ui = ui or ConsoleUI()
    should_finalize = ui is None

    try:
        internal_ui.update_status("Reading browser history...", level="info")
        urls = load_history_urls(places_path)
        tracked = reconcile(urls, ui=internal_ui)
        internal_ui.log_event(f"Found {len(tracked)} series in {len(urls)} history entries.", level="info")

        tracked = apply_deny(tracked, store.denied)
        candidates = discover(tracked, store.allowed)
        internal_ui.update_status(None)
        if candidates:
            internal_ui.log_event(f"{len(candidates)} new series to classify.", level="info")
            classify_candidates(
                candidates,
                ask or internal_ui.ask_decision,
                tracked=tracked,
                allowed=store.allowed,
                denied=store.denied,
            )

        fetch = fetch_latest
        if fetch is None:
            scraper = create_scraper()

            def fetch(series_url: str) -> ChapterNumber:
                return fetch_latest_chapter(
                    scraper,
                    series_url,
                    retries=retries,
                    backoff=backoff,
                    timeout=timeout,
                    delay=delay,
                    ui=internal_ui,
                )

        result = diff(tracked, fetch, ui=internal_ui)

        for report in result.reports:
            internal_ui.report_update(report)
        for failure in result.failures:
            internal_ui.report_failure(failure)
        internal_ui.log_event(
            f"{len(result.reports)} series with new chapters, {len(result.failures)} failed checks.",
            level="success" if not result.failures else "warning",
        )
        return result
    finally:
        if should_finalize:
            internal_ui.finalize()
