"""Tests for chapter URL parsing and chapter number ordering."""

import itertools

import pytest

from mangatracker.errors import MalformedIdentifier
from mangatracker.models import (
    Chapter,
    ChapterNumber,
    chapter_url,
    compare_chapter_numbers,
    parse_identifier,
    sanitize_url,
)

SERIES = "https://mangahub.io/chapter/one-piece/"


def cmp(a, b):
    return compare_chapter_numbers(ChapterNumber(a), ChapterNumber(b))


class TestChapterNumber:
    def test_decomposes_integer_and_fraction(self):
        number = ChapterNumber("12.5")
        assert number.integer_part == "12"
        assert number.fractional_part == "5"

    def test_without_fraction(self):
        number = ChapterNumber("12")
        assert number.integer_part == "12"
        assert number.fractional_part is None

    @pytest.mark.parametrize("token", ["", "abc", "1.2.3", "5.", ".5", "-3", "1 2", "12a"])
    def test_rejects_tokens_outside_grammar(self, token):
        with pytest.raises(MalformedIdentifier):
            ChapterNumber(token)

    def test_is_immutable(self):
        number = ChapterNumber("3")
        with pytest.raises(AttributeError):
            number.raw = "4"

    def test_equality_is_string_equality(self):
        assert ChapterNumber("7") == ChapterNumber("7")
        assert ChapterNumber("07") != ChapterNumber("7")
        assert hash(ChapterNumber("7")) == hash(ChapterNumber("7"))

    def test_str(self):
        assert str(ChapterNumber("10.1")) == "10.1"


class TestOrdering:
    def test_longer_integer_part_is_greater(self):
        assert cmp("12", "5") == 1
        assert cmp("99", "100") == -1

    def test_same_length_compares_lexicographically(self):
        assert cmp("12", "13") == -1
        assert cmp("21", "19") == 1

    def test_length_beats_numeric_value_for_padded_numbers(self):
        assert cmp("07", "7") == 1
        assert cmp("010", "9") == 1

    def test_fraction_sorts_after_plain_number(self):
        assert cmp("5", "5.1") == -1
        assert cmp("5.1", "5") == 1

    def test_fractions_compare_as_strings(self):
        assert cmp("5.2", "5.3") == -1
        assert cmp("5.10", "5.9") == -1

    def test_integer_part_dominates_fraction(self):
        assert cmp("5.9", "6") == -1
        assert cmp("5.2", "12") == -1

    def test_equal(self):
        assert cmp("4.5", "4.5") == 0

    def test_rich_comparisons(self):
        assert ChapterNumber("5") < ChapterNumber("12")
        assert ChapterNumber("12") > ChapterNumber("5.2")
        assert ChapterNumber("5") <= ChapterNumber("5")
        assert ChapterNumber("5") >= ChapterNumber("5")
        assert max(ChapterNumber(raw) for raw in ["5", "12", "5.2"]) == ChapterNumber("12")

    def test_is_total_order_consistent_with_equality(self):
        tokens = ["1", "5", "07", "7", "10", "12", "99", "100", "5.1", "5.10", "5.2", "5.9", "12.0", "12.5"]
        numbers = [ChapterNumber(token) for token in tokens]
        for a, b in itertools.product(numbers, repeat=2):
            result = compare_chapter_numbers(a, b)
            assert result == -compare_chapter_numbers(b, a)
            assert (result == 0) == (a.raw == b.raw)
        for a, b, c in itertools.product(numbers, repeat=3):
            if a < b and b < c:
                assert a < c

    def test_sorting(self):
        tokens = ["12", "5.2", "100", "5", "5.10", "9"]
        assert [str(n) for n in sorted(ChapterNumber(t) for t in tokens)] == ["5", "5.10", "5.2", "9", "12", "100"]


class TestParseIdentifier:
    def test_splits_series_and_number(self):
        chapter = parse_identifier(SERIES + "chapter-1089")
        assert chapter == Chapter(series_url=SERIES, number=ChapterNumber("1089"))

    def test_round_trip(self):
        for raw in ["1", "12.5", "007"]:
            chapter = parse_identifier(SERIES + "chapter-" + raw)
            assert chapter.series_url == SERIES
            assert chapter.number.raw == raw
            assert chapter.url == SERIES + "chapter-" + raw

    def test_uses_last_separator(self):
        url = "https://mangahub.io/chapter/chapter-zero/chapter-3"
        chapter = parse_identifier(url)
        assert chapter.series_url == "https://mangahub.io/chapter/chapter-zero/"
        assert chapter.number.raw == "3"

    def test_strips_reload_marker(self):
        chapter = parse_identifier(SERIES + "chapter-42?reloadKey=1")
        assert chapter.series_url == SERIES
        assert chapter.number.raw == "42"

    def test_reload_marker_before_separator_is_malformed(self):
        with pytest.raises(MalformedIdentifier):
            parse_identifier("https://site/x?reloadKey=1chapter-3")

    def test_missing_separator(self):
        with pytest.raises(MalformedIdentifier):
            parse_identifier("https://mangahub.io/manga/one-piece")

    def test_invalid_chapter_token(self):
        with pytest.raises(MalformedIdentifier):
            parse_identifier(SERIES + "chapter-extra")

    def test_malformed_identifier_is_value_error(self):
        with pytest.raises(ValueError):
            parse_identifier("nothing here")


class TestHelpers:
    def test_sanitize_url_without_marker(self):
        assert sanitize_url(SERIES) == SERIES

    def test_sanitize_url_truncates_at_marker(self):
        assert sanitize_url(SERIES + "chapter-1?reloadKey=1&x=2") == SERIES + "chapter-1"

    def test_chapter_url(self):
        assert chapter_url(SERIES, ChapterNumber("3.5")) == SERIES + "chapter-3.5"
