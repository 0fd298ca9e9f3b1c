from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import MalformedIdentifier

CHAPTER_SEPARATOR = "chapter-"
RELOAD_MARKER = "?reloadKey=1"

_CHAPTER_TOKEN = re.compile(r"\d+(?:\.\d+)?")


def compare_chapter_numbers(left: "ChapterNumber", right: "ChapterNumber") -> int:
    """Return -1, 0 or 1 comparing two chapter numbers.

    Integer parts are compared by string length first and then
    lexicographically, so ``"07"`` sorts after ``"7"``. A missing fractional
    part sorts before a present one and fractional parts are compared as
    strings (``"5.10"`` < ``"5.9"``).
    """
    if left.raw == right.raw:
        return 0
    if len(left.integer_part) != len(right.integer_part):
        return -1 if len(left.integer_part) < len(right.integer_part) else 1
    if left.integer_part != right.integer_part:
        return -1 if left.integer_part < right.integer_part else 1
    if left.fractional_part is None or right.fractional_part is None:
        return -1 if left.fractional_part is None else 1
    return -1 if left.fractional_part < right.fractional_part else 1


class ChapterNumber:
    __slots__ = ("raw", "integer_part", "fractional_part")

    def __init__(self, raw: str) -> None:
        if not isinstance(raw, str) or not _CHAPTER_TOKEN.fullmatch(raw):
            raise MalformedIdentifier(f"Invalid chapter number: {raw!r}")
        integer_part, _, fractional_part = raw.partition(".")
        object.__setattr__(self, "raw", raw)
        object.__setattr__(self, "integer_part", integer_part)
        object.__setattr__(self, "fractional_part", fractional_part or None)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ChapterNumber is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChapterNumber):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self.raw)

    def __lt__(self, other: "ChapterNumber") -> bool:
        if not isinstance(other, ChapterNumber):
            return NotImplemented
        return compare_chapter_numbers(self, other) < 0

    def __le__(self, other: "ChapterNumber") -> bool:
        if not isinstance(other, ChapterNumber):
            return NotImplemented
        return compare_chapter_numbers(self, other) <= 0

    def __gt__(self, other: "ChapterNumber") -> bool:
        if not isinstance(other, ChapterNumber):
            return NotImplemented
        return compare_chapter_numbers(self, other) > 0

    def __ge__(self, other: "ChapterNumber") -> bool:
        if not isinstance(other, ChapterNumber):
            return NotImplemented
        return compare_chapter_numbers(self, other) >= 0

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"ChapterNumber({self.raw!r})"


@dataclass(frozen=True)
class Chapter:
    series_url: str
    number: ChapterNumber

    @property
    def url(self) -> str:
        return chapter_url(self.series_url, self.number)


def sanitize_url(url: str) -> str:
    marker_index = url.find(RELOAD_MARKER)
    if marker_index != -1:
        return url[:marker_index]
    return url


def chapter_url(series_url: str, number: ChapterNumber | str) -> str:
    return f"{series_url}{CHAPTER_SEPARATOR}{number}"


def parse_identifier(raw: str) -> Chapter:
    """Split a chapter URL into its series key and chapter number.

    The cache-busting ``?reloadKey=1`` marker is dropped first; the series
    key is everything before the last ``chapter-`` separator.
    """
    url = sanitize_url(raw)
    separator_index = url.rfind(CHAPTER_SEPARATOR)
    if separator_index == -1:
        raise MalformedIdentifier(f"No chapter number in URL: {raw}")
    token = url[separator_index + len(CHAPTER_SEPARATOR):]
    try:
        number = ChapterNumber(token)
    except MalformedIdentifier:
        raise MalformedIdentifier(f"Invalid chapter number in URL: {raw}") from None
    return Chapter(series_url=url[:separator_index], number=number)
