from datetime import date

import pytest

from utils.parsing import parse_date, parse_fields, parse_int

KEYS = ("book", "rating", "short", "long")


def test_values_run_until_next_key():
    fields = parse_fields("book:3 rating:9 short:Great read long:Best one: on the topic.", KEYS)
    assert fields == {
        "book": "3",
        "rating": "9",
        "short": "Great read",
        "long": "Best one: on the topic.",
    }


def test_keys_are_case_insensitive_and_last_wins():
    assert parse_fields("Rating:7 rating:8", KEYS) == {"rating": "8"}


def test_empty_value_is_kept():
    assert parse_fields("short:Fine long:", KEYS) == {"short": "Fine", "long": ""}


def test_key_inside_a_word_is_not_a_key():
    assert parse_fields("short:no-rating:here", KEYS) == {"short": "no-rating:here"}


def test_unknown_leading_text():
    with pytest.raises(ValueError, match="ratng:9"):
        parse_fields("ratng:9 book:3", KEYS)


def test_parse_int():
    assert parse_int(" 42 ", "pages") == 42
    assert parse_int("", "pages") is None
    assert parse_int(None, "pages") is None
    with pytest.raises(ValueError, match="pages must be a whole number"):
        parse_int("many", "pages")


def test_parse_date():
    assert parse_date("2018-01-11", "published") == date(2018, 1, 11)
    assert parse_date("", "published") is None
    with pytest.raises(ValueError):
        parse_date("11/01/2018", "published")
