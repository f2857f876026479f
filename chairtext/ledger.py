"""Per-date marker recording that the daily digest already went out.

The scheduled job and the on-demand endpoint can both send a digest; when a
ledger is configured the second one for the same date is skipped.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class DigestLedgerProtocol(Protocol):
    def has_sent(self, day: date) -> bool: ...

    def mark_sent(self, day: date) -> None: ...


class DigestLedger:
    """JSON file holding the ISO dates a digest was sent for."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _load(self) -> set[str]:
        if not self.path.exists():
            return set()
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Digest ledger %s is not valid JSON; treating as empty", self.path)
            return set()
        if not isinstance(payload, list):
            return set()
        return {item for item in payload if isinstance(item, str)}

    def _save(self, days: set[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(sorted(days), indent=2), encoding="utf-8")

    def has_sent(self, day: date) -> bool:
        return day.isoformat() in self._load()

    def mark_sent(self, day: date) -> None:
        days = self._load()
        days.add(day.isoformat())
        self._save(days)


class InMemoryDigestLedger:
    def __init__(self) -> None:
        self.days: set[date] = set()

    def has_sent(self, day: date) -> bool:
        return day in self.days

    def mark_sent(self, day: date) -> None:
        self.days.add(day)
