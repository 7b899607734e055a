"""Tests for shared field validators"""

from datetime import date, time, timedelta, timezone

import pytest

from appointly.shared.validators import (
    validate_date_of_birth,
    validate_email,
    validate_full_name,
    validate_phone,
    validate_service_name,
    validate_slot_time,
    validate_strong_password,
)


class TestEmail:
    def test_normalizes_case_and_whitespace(self):
        assert validate_email("  Someone@Example.COM ") == "someone@example.com"

    @pytest.mark.parametrize("value", ["", None, "no-at-sign", "a@b", "a@@b.com"])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            validate_email(value)


class TestPhone:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("+15551234567", "+15551234567"),
            ("+44 7700 900123", "+447700900123"),
            ("(555) 123-4567", "5551234567"),
        ],
    )
    def test_accepts_and_normalizes(self, value, expected):
        assert validate_phone(value) == expected

    @pytest.mark.parametrize("value", ["", "   ", "+0123456", "12345678901234567", "phone"])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            validate_phone(value)


class TestPassword:
    def test_accepts_strong_password(self):
        assert validate_strong_password("Sup3r-Secret-Pass!") == "Sup3r-Secret-Pass!"

    @pytest.mark.parametrize(
        "value,message",
        [
            ("Sh0rt!", "12 characters"),
            ("alllowercase1!", "uppercase"),
            ("ALLUPPERCASE1!", "lowercase"),
            ("NoDigitsHere!!", "number"),
            ("NoSpecials1234", "special"),
        ],
    )
    def test_reports_first_broken_rule(self, value, message):
        with pytest.raises(ValueError, match=message):
            validate_strong_password(value)


class TestFullName:
    def test_strips(self):
        assert validate_full_name("  Ana Lima ") == "Ana Lima"

    @pytest.mark.parametrize("value", ["", "A", "x" * 101])
    def test_length_bounds(self, value):
        with pytest.raises(ValueError):
            validate_full_name(value)


class TestDateOfBirth:
    TODAY = date(2026, 6, 15)

    def test_none_is_allowed(self):
        assert validate_date_of_birth(None, today=self.TODAY) is None

    def test_thirteen_years_old(self):
        assert validate_date_of_birth(date(2013, 6, 14), today=self.TODAY) == date(2013, 6, 14)

    def test_thirteenth_birthday_today_is_too_young(self):
        with pytest.raises(ValueError):
            validate_date_of_birth(date(2013, 6, 15), today=self.TODAY)

    def test_leap_day_today(self):
        assert validate_date_of_birth(date(2000, 1, 1), today=date(2024, 2, 29))


class TestSlotTime:
    @pytest.mark.parametrize("value", [time(9, 0), time(9, 15), time(9, 30), time(23, 45)])
    def test_quarter_hours(self, value):
        assert validate_slot_time(value) == value

    @pytest.mark.parametrize("value", [time(9, 10), time(9, 15, 30), time(9, 0, 0, 1)])
    def test_off_boundary(self, value):
        with pytest.raises(ValueError):
            validate_slot_time(value)

    def test_rejects_utc_offset(self):
        with pytest.raises(ValueError, match="UTC"):
            validate_slot_time(time(10, 0, tzinfo=timezone(timedelta(hours=5))))


class TestServiceName:
    def test_allowed_characters(self):
        assert validate_service_name(" Cut & Colour - Men's ") == "Cut & Colour - Men's"

    @pytest.mark.parametrize("value", ["", "ab", "x" * 101, "Facial!", "Spa/Sauna"])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            validate_service_name(value)
