"""Tests for SMIL clock value parsing and formatting."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from smilcheck.timecodes import format_time, format_time_short, parse_time


@pytest.mark.unit
class TestParseTime:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("5", 5.0),
            ("5s", 5.0),
            ("12.345s", 12.345),
            ("1:02", 62.0),
            ("1:02.5", 62.5),
            ("1:02:03", 3723.0),
            ("0:00:01.250", 1.25),
            (" 7.5s ", 7.5),
        ],
    )
    def test_supported_forms(self, value, expected):
        assert parse_time(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value",
        ["abc", "", "1:2:3:4", "1::2", "1:x", "nan", "inf"],
    )
    def test_unparsable_values_return_none(self, value):
        assert parse_time(value) is None

    def test_none_returns_none(self):
        assert parse_time(None) is None


@pytest.mark.unit
class TestFormatTime:
    def test_format_time_hundredths(self):
        assert format_time(3723.456) == "01:02:03.45"

    def test_format_time_short_drops_fraction(self):
        assert format_time_short(62.5) == "00:01:02"

    def test_format_zero(self):
        assert format_time(0) == "00:00:00.00"
