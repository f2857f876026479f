"""Tests for confirmation and digest text."""

from datetime import date

import pytest

from chairtext import (
    NO_APPOINTMENTS_MESSAGE,
    DigestEntry,
    ValidationError,
    format_appointment_confirmation,
    format_daily_digest,
    format_date,
    format_duration,
    format_time,
)


class TestFormatTime:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("00:00", "12:00 AM"),
            ("00:45", "12:45 AM"),
            ("09:05", "9:05 AM"),
            ("11:59", "11:59 AM"),
            ("12:00", "12:00 PM"),
            ("12:30", "12:30 PM"),
            ("13:05", "1:05 PM"),
            ("23:59", "11:59 PM"),
            ("7:00", "7:00 AM"),
            ("14:00:00", "2:00 PM"),
        ],
    )
    def test_conversions(self, raw, expected):
        assert format_time(raw) == expected

    @pytest.mark.parametrize("raw", ["", "noon", "24:00", "12:60", "1230"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            format_time(raw)


class TestFormatDate:
    def test_long_form(self):
        assert format_date("2025-01-17") == "Friday January 17, 2025"

    def test_accepts_date_objects(self):
        assert format_date(date(2024, 2, 29)) == "Thursday February 29, 2024"

    def test_day_is_not_zero_padded(self):
        assert format_date("2025-03-02") == "Sunday March 2, 2025"

    @pytest.mark.parametrize("raw", ["", "2025-13-01", "17/01/2025", "2025-02-30"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            format_date(raw)


class TestFormatDuration:
    def test_one_hour(self):
        assert format_duration(60) == "1 hour"

    def test_minutes(self):
        assert format_duration(45) == "45 minutes"


class TestConfirmation:
    def test_layout(self):
        text = format_appointment_confirmation("Jane", "2025-01-17", "00:00")
        assert text == "Client: Jane\n\nDate: Friday January 17, 2025\n\nTime: 12:00 AM"

    def test_afternoon(self):
        assert format_appointment_confirmation("Jane", "2025-01-17", "13:05").endswith("Time: 1:05 PM")

    def test_noon(self):
        assert "Time: 12:30 PM" in format_appointment_confirmation("Jane", "2025-01-17", "12:30")


class TestDailyDigest:
    def test_no_appointments(self):
        assert format_daily_digest(0, []) == "You have no appointments today. Enjoy your free day!"
        assert format_daily_digest(0) == NO_APPOINTMENTS_MESSAGE

    def test_singular(self):
        text = format_daily_digest(1, [DigestEntry("Jane", "09:00")])
        assert text == "You have 1 appointment today.\n\nToday:\n1. Jane 9:00 AM"

    def test_plural_enumeration(self):
        text = format_daily_digest(
            3,
            [DigestEntry("Jane", "09:00"), DigestEntry("Sam", "12:15"), DigestEntry("Lee", "17:30")],
        )
        lines = text.split("\n")
        assert lines[0] == "You have 3 appointments today."
        assert lines[-3:] == ["1. Jane 9:00 AM", "2. Sam 12:15 PM", "3. Lee 5:30 PM"]

    def test_header_only_without_entries(self):
        assert format_daily_digest(2) == "You have 2 appointments today."

    def test_accepts_storage_rows(self):
        rows = [
            {"time": "10:00:00", "clients": {"name": "Marcus"}},
            {"time": "11:00", "clientName": "Dre"},
        ]
        text = format_daily_digest(2, rows)
        assert "1. Marcus 10:00 AM" in text
        assert "2. Dre 11:00 AM" in text

    def test_row_without_name_rejected(self):
        with pytest.raises(ValidationError):
            format_daily_digest(1, [{"time": "10:00"}])

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            format_daily_digest(-1)
