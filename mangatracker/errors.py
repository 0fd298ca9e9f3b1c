from __future__ import annotations


class TrackerError(RuntimeError):
    """Base class for every error raised by the tracker."""


class MalformedIdentifier(TrackerError, ValueError):
    """A URL does not look like ``<series>chapter-<number>``."""


class FetchError(TrackerError):
    """The latest chapter of a series could not be retrieved."""

    def __init__(self, series_url: str, message: str) -> None:
        super().__init__(f"{message} ({series_url})")
        self.series_url = series_url
        self.message = message


class StoreError(TrackerError):
    """Reading or writing the allow/deny database failed."""


class HistoryError(TrackerError):
    """The browser history snapshot could not be read."""
