"""Tests for appointment sources and digest building."""

import json
from datetime import date

import pytest

from chairtext import DigestEntry, JsonFileAppointmentSource, StaticAppointmentSource, build_digest


class TestBuildDigest:
    def test_sorted_by_time(self):
        digest = build_digest(
            [
                {"time": "14:00:00", "clients": {"name": "Late"}},
                DigestEntry("Early", "08:30"),
                {"time": "9:15", "clientName": "Middle"},
            ]
        )
        assert digest.appointment_count == 3
        assert [e.client_name for e in digest.appointments] == ["Early", "Middle", "Late"]

    def test_empty(self):
        digest = build_digest([])
        assert digest.appointment_count == 0
        assert digest.appointments == []


class TestStaticSource:
    async def test_returns_rows_for_day(self):
        source = StaticAppointmentSource({date(2025, 1, 17): [DigestEntry("Jane", "09:00")]})
        assert await source.appointments_for(date(2025, 1, 17)) == [DigestEntry("Jane", "09:00")]
        assert await source.appointments_for(date(2025, 1, 18)) == []


class TestJsonFileSource:
    async def test_filters_by_date(self, tmp_path):
        path = tmp_path / "appointments.json"
        path.write_text(
            json.dumps(
                [
                    {"date": "2025-01-17", "time": "09:00", "clientName": "Jane"},
                    {"date": "2025-01-18", "time": "10:00", "clientName": "Sam"},
                ]
            ),
            encoding="utf-8",
        )
        rows = await JsonFileAppointmentSource(path).appointments_for(date(2025, 1, 17))
        assert [row["clientName"] for row in rows] == ["Jane"]

    async def test_rejects_non_list(self, tmp_path):
        path = tmp_path / "appointments.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(ValueError):
            await JsonFileAppointmentSource(path).appointments_for(date(2025, 1, 17))
