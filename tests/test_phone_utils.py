import pytest

from textblast.utils.phone_utils import dedup_key, digits_only, normalize_phone, normalize_sent_keys


@pytest.mark.parametrize("digits", ["4045550100", "2125550199", "0000000000"])
def test_ten_digits_get_country_code(digits):
    assert normalize_phone(digits) == "+1" + digits


@pytest.mark.parametrize("digits", ["14045550100", "12125550199"])
def test_eleven_digits_starting_with_one(digits):
    assert normalize_phone(digits) == "+" + digits


@pytest.mark.parametrize("raw", [
    "(404) 555-0100",
    "404.555.0100",
    "+1 404 555 0100",
    "1-404-555-0100",
    " 404 555 0100 ",
])
def test_formatting_is_ignored(raw):
    assert normalize_phone(raw) == "+14045550100"


@pytest.mark.parametrize("raw", [
    None,
    "",
    "   ",
    "n/a",
    "555-0100",
    "24045550100",       # 11 digits, wrong country code
    "140455501001",      # 12 digits
    "+44 20 7946 0958",
])
def test_other_shapes_are_rejected(raw):
    assert normalize_phone(raw) is None


def test_dedup_key_is_digits_only():
    assert dedup_key("+14045550100") == "14045550100"


def test_digits_only_handles_none():
    assert digits_only(None) == ""


def test_sent_keys_accept_phones_and_keys():
    keys = normalize_sent_keys(["(404) 555-0100", "14045550101", "+1 404 555 0102", "", "abc", "42"])

    assert keys == {"14045550100", "14045550101", "14045550102", "42"}


def test_sent_keys_none():
    assert normalize_sent_keys(None) == set()
