import pytest

from booknotes.sorting import DEFAULT_SORT, SortMode


@pytest.mark.parametrize("keyword, expected", [
    ("date_old", "date_read ASC"),
    ("date_new", "date_read DESC"),
    ("rating_high", "rating DESC, date_read DESC"),
    ("rating_low", "rating ASC, date_read DESC"),
])
def test_known_keywords(keyword, expected):
    assert SortMode.parse(keyword).order_by == expected


@pytest.mark.parametrize("keyword", [None, "", "   ", "title", "RATING_HIGH", "date_read; DROP TABLE books"])
def test_unknown_or_missing_keyword_falls_back_to_newest(keyword):
    mode = SortMode.parse(keyword)
    assert mode is SortMode.DATE_NEW
    assert mode.order_by == "date_read DESC"


def test_surrounding_whitespace_is_ignored():
    assert SortMode.parse("  rating_low ") is SortMode.RATING_LOW


def test_default_sort_is_newest_first():
    assert DEFAULT_SORT is SortMode.DATE_NEW
    assert DEFAULT_SORT.value == "date_new"
