from __future__ import annotations

import datetime as dt

import pytest

from tvnaming.date_utils import parse_air_date, translate_ymd

TODAY = dt.date(2020, 6, 15)


class TestTranslateYmd:
    """Tests for translate_ymd layout selection."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2010.11.23", (2010, 11, 23)),
            ("2010-11-23", (2010, 11, 23)),
            ("2010 11 23", (2010, 11, 23)),
            ("20101123", (2010, 11, 23)),
            ("10.11.23", (2010, 11, 23)),
            ("11-23", (2020, 11, 23)),
            ("23", (2020, 6, 23)),
        ],
    )
    def test_default_layouts(self, value, expected):
        assert translate_ymd(value, today=TODAY) == expected

    def test_no_digits(self):
        assert translate_ymd("abc", today=TODAY) == (0, 0, 0)

    def test_too_many_parts(self):
        assert translate_ymd("2010.11.23.01", today=TODAY) == (0, 0, 0)

    def test_custom_layouts(self):
        layouts = ("", "", "", "DMY")
        assert translate_ymd("23.11.2010", layouts, today=TODAY) == (2010, 11, 23)
        assert translate_ymd("11.2010", layouts, today=TODAY) == (0, 0, 0)


class TestParseAirDate:
    """Tests for parse_air_date."""

    def test_valid_date(self):
        assert parse_air_date("2010.11.23", today=TODAY) == dt.date(2010, 11, 23)

    def test_day_overflow_rolls_into_next_month(self):
        assert parse_air_date("2010.11.31", today=TODAY) == dt.date(2010, 12, 1)

    def test_month_overflow_rolls_into_next_year(self):
        assert parse_air_date("2010.13.01", today=TODAY) == dt.date(2011, 1, 1)

    def test_zero_month_is_rejected(self):
        assert parse_air_date("2010.00.23", today=TODAY) is None

    def test_zero_year_is_rejected(self):
        assert parse_air_date("0000.11.23", today=TODAY) is None

    def test_unparseable_is_rejected(self):
        assert parse_air_date("", today=TODAY) is None
        assert parse_air_date("1.2.3.4", today=TODAY) is None

    def test_defaults_to_current_date(self):
        today = dt.date.today()
        assert parse_air_date("05") == dt.date(today.year, today.month, 1) + dt.timedelta(days=4)
