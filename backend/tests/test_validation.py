"""
Numeric Coercion Tests
======================

parse_float / parse_epoch_millis accept numbers and numeric strings and
return None for anything that isn't a finite number.
"""

from datetime import datetime, timezone

import pytest

from app.utils.validation import (
    epoch_millis,
    missing_fields,
    parse_float,
    parse_epoch_millis,
)


class TestParseFloat:

    @pytest.mark.parametrize("raw, expected", [
        (37.5, 37.5),
        (12, 12.0),
        ("37.5", 37.5),
        (" -122.4 ", -122.4),
        ("1e3", 1000.0),
    ])
    def test_numbers_and_numeric_strings(self, raw, expected):
        assert parse_float(raw) == expected
        assert isinstance(parse_float(raw), float)

    @pytest.mark.parametrize("raw", ["abc", "37.5abc", "", "nan", "inf", True, None, [1], {"v": 1}])
    def test_rejects_non_numbers(self, raw):
        assert parse_float(raw) is None

    def test_comma_decimal_is_not_accepted(self):
        assert parse_float("37,5") is None


class TestParseEpochMillis:

    def test_integer_string(self):
        assert parse_epoch_millis("1700000000000") == 1700000000000

    def test_float_is_truncated(self):
        assert parse_epoch_millis(1700000000000.9) == 1700000000000
        assert parse_epoch_millis("1700000000000.9") == 1700000000000

    def test_rejects_garbage(self):
        assert parse_epoch_millis("yesterday") is None
        assert parse_epoch_millis(False) is None


def test_epoch_millis_of_known_instant():
    moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert epoch_millis(moment) == 1704067200000


def test_missing_fields_treats_null_as_missing():
    payload = {"lat": 1, "lon": None}
    assert missing_fields(payload, ("lat", "lon", "smoke")) == ["lon", "smoke"]


class TestStrictNumberStrings:

    @pytest.mark.parametrize("raw", ["3_7.5", "１２", "٣٧", "1,000", "0x10", "1e"])
    def test_only_plain_ascii_numbers(self, raw):
        assert parse_float(raw) is None
        assert parse_epoch_millis(raw) is None

    @pytest.mark.parametrize("raw, expected", [("+12", 12.0), (".5", 0.5), ("5.", 5.0), ("-1E-2", -0.01)])
    def test_ascii_forms_still_accepted(self, raw, expected):
        assert parse_float(raw) == expected


class TestEpochRange:

    @pytest.mark.parametrize("raw", ["1e20", 10**20, "1" * 30, 1e20, -(2**63) - 1])
    def test_values_outside_int64_are_rejected(self, raw):
        assert parse_epoch_millis(raw) is None

    def test_int64_bounds_are_kept(self):
        assert parse_epoch_millis(2**63 - 1) == 2**63 - 1
        assert parse_epoch_millis(str(-(2**63))) == -(2**63)
