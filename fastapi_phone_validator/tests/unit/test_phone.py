from __future__ import annotations

import pytest

from app.core.phone import detect_phone_columns, is_phone_column, normalize_number


@pytest.mark.parametrize("raw", [None, "", "abc", "555-1234", "123456789", 12345])
def test_normalize_rejects_short_or_empty(raw):
    assert normalize_number(raw) is None


def test_normalize_formatted_us_number():
    assert normalize_number("(415) 555-2671") == "+14155552671"


@pytest.mark.parametrize("digits", ["4155552671", "2125550000", "9999999999"])
def test_normalize_ten_digits_prefixes_country_code(digits):
    assert normalize_number(digits) == "+1" + digits


@pytest.mark.parametrize("digits", ["14155552671", "1-212-555-0000"])
def test_normalize_eleven_digits_with_leading_one(digits):
    assert normalize_number(digits) == "+" + digits.replace("-", "")


def test_normalize_ten_digits_starting_with_one_kept_as_is():
    assert normalize_number("1234567890") == "+1234567890"


def test_normalize_long_numbers_pass_through():
    assert normalize_number("+44 20 7946 0958 12") == "+144207946095812"
    assert normalize_number("123456789012345") == "+123456789012345"


def test_normalize_numeric_cells():
    assert normalize_number(4155552671) == "+14155552671"
    assert normalize_number(4155552671.0) == "+14155552671"
    assert normalize_number(True) is None


def test_is_phone_column_empty():
    assert is_phone_column([]) is False


def test_is_phone_column_majority():
    assert is_phone_column(["4155552671", "not a phone", "5551234567"]) is True


def test_is_phone_column_no_matches():
    assert is_phone_column(["abc", "def"]) is False


def test_is_phone_column_tie_is_not_majority():
    assert is_phone_column(["4155552671", "n/a"]) is False
    assert is_phone_column(["4155552671", None, "5551234567", ""]) is False


def test_detect_phone_columns_keeps_header_order():
    rows = [
        {"name": "Ann", "work": "415-555-2671", "cell": "(212) 555-0000", "zip": "94107"},
        {"name": "Bob", "work": "", "cell": "646.555.0101", "zip": "10001"},
        {"name": "Cid", "work": "3105550199", "cell": "7185550123"},
    ]
    assert detect_phone_columns(rows, ["name", "cell", "work", "zip"]) == ["cell", "work"]


def test_detect_phone_columns_none_found():
    rows = [{"name": "Ann", "note": "call later"}]
    assert detect_phone_columns(rows, ["name", "note"]) == []
