"""Message composition for confirmations and daily digests.

Everything here is pure string formatting; no I/O.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any, Union

from .errors import ValidationError
from .types import DigestEntry

NO_APPOINTMENTS_MESSAGE = "You have no appointments today. Enjoy your free day!"

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Stores return "14:00:00"; seconds are ignored.
_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2}(?:\.\d+)?)?\s*$")

DigestItem = Union[DigestEntry, Mapping[str, Any]]


def format_time(time24h: str) -> str:
    """Convert ``HH:MM`` (24h) to ``h:MM AM/PM``.

    >>> format_time("00:00")
    '12:00 AM'
    >>> format_time("13:05")
    '1:05 PM'
    """
    match = _TIME_RE.match(time24h or "")
    if not match:
        raise ValidationError(f"Invalid time: {time24h!r}", field="time")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(f"Invalid time: {time24h!r}", field="time")

    suffix = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


def parse_iso_date(iso_date: str | date) -> date:
    if isinstance(iso_date, datetime):
        return iso_date.date()
    if isinstance(iso_date, date):
        return iso_date
    try:
        return datetime.strptime((iso_date or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {iso_date!r}", field="date") from None


def format_date(iso_date: str | date) -> str:
    """Render ``2025-01-17`` as ``Friday January 17, 2025``.

    The date is treated as a calendar day with no timezone attached.
    """
    day = parse_iso_date(iso_date)
    return f"{_WEEKDAYS[day.weekday()]} {_MONTHS[day.month - 1]} {day.day}, {day.year}"


def format_duration(minutes: int) -> str:
    return "1 hour" if minutes == 60 else f"{minutes} minutes"


def format_appointment_confirmation(client_name: str, iso_date: str | date, time24h: str) -> str:
    """Build the text sent when an appointment is booked."""
    return f"Client: {client_name}\n\nDate: {format_date(iso_date)}\n\nTime: {format_time(time24h)}"


def _entry_fields(entry: DigestItem) -> tuple[str, str]:
    if isinstance(entry, DigestEntry):
        return entry.client_name, entry.time

    name = entry.get("client_name") or entry.get("clientName")
    if not name:
        # Rows joined from the clients table carry the name one level down.
        client = entry.get("clients") or entry.get("client") or {}
        if isinstance(client, Mapping):
            name = client.get("name")
    time = entry.get("time")
    if not name or not time:
        raise ValidationError("Digest entry needs a client name and a time", field="appointments")
    return str(name), str(time)


def to_digest_entry(entry: DigestItem) -> DigestEntry:
    name, time = _entry_fields(entry)
    return DigestEntry(client_name=name, time=time)


def format_daily_digest(appointment_count: int, appointments: Iterable[DigestItem] = ()) -> str:
    """Build the morning summary of today's appointments.

    One numbered line per appointment (``1. Jane 9:00 AM``) follows a
    count header. Numbered lines are what the chunker groups on.
    """
    if appointment_count < 0:
        raise ValidationError("appointment_count cannot be negative", field="appointment_count")
    if appointment_count == 0:
        return NO_APPOINTMENTS_MESSAGE

    plural = "" if appointment_count == 1 else "s"
    lines = [f"You have {appointment_count} appointment{plural} today."]

    entries = [_entry_fields(item) for item in appointments]
    if entries:
        lines.extend(["", "Today:"])
        for index, (name, time) in enumerate(entries, start=1):
            lines.append(f"{index}. {name} {format_time(time)}")

    return "\n".join(lines)
