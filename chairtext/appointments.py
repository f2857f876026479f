"""Read-only access to the appointments a digest is built from.

Storage lives outside this package; anything with an async
``appointments_for(day)`` returning digest rows can feed the digest.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import date
from pathlib import Path
from typing import Any, Protocol, Union

from .compose import to_digest_entry
from .types import DailyDigest, DigestEntry

logger = logging.getLogger(__name__)

AppointmentRow = Union[DigestEntry, Mapping[str, Any]]


class AppointmentSource(Protocol):
    """Interface for fetching one day's appointments."""

    async def appointments_for(self, day: date) -> list[AppointmentRow]:
        """Return the appointments on ``day`` ordered by time."""
        ...


def build_digest(rows: Iterable[AppointmentRow]) -> DailyDigest:
    """Turn fetched rows into a digest, sorted by start time."""
    entries = sorted((to_digest_entry(row) for row in rows), key=lambda e: _sort_key(e.time))
    return DailyDigest.from_entries(entries)


def _sort_key(time: str) -> tuple[int, int]:
    hour, _, rest = time.partition(":")
    try:
        return int(hour), int(rest[:2] or 0)
    except ValueError:
        return 99, 99


class StaticAppointmentSource:
    """In-memory source keyed by date."""

    def __init__(self, by_date: Mapping[date, list[AppointmentRow]] | None = None) -> None:
        self.by_date: dict[date, list[AppointmentRow]] = dict(by_date or {})

    async def appointments_for(self, day: date) -> list[AppointmentRow]:
        return list(self.by_date.get(day, []))


class JsonFileAppointmentSource:
    """Reads a JSON list of ``{date, time, clientName}`` rows from disk.

    Used by the scheduler's command line when no database is wired in.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    async def appointments_for(self, day: date) -> list[AppointmentRow]:
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(payload, list):
            raise ValueError(f"{self.path} must contain a JSON list")
        wanted = day.isoformat()
        rows = [row for row in payload if isinstance(row, dict) and row.get("date") == wanted]
        logger.debug("Loaded %d appointment(s) for %s from %s", len(rows), wanted, self.path)
        return rows
