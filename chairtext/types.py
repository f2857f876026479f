"""Core types for the email-to-SMS notification pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DeliveryStatus(str, Enum):
    """Status of a single transport call."""

    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Result of one email handed to a transport."""

    status: DeliveryStatus
    external_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is DeliveryStatus.SENT

    @classmethod
    def ok(cls, *, external_id: str | None = None) -> DeliveryResult:
        return cls(status=DeliveryStatus.SENT, external_id=external_id)

    @classmethod
    def fail(
        cls,
        error_message: str,
        *,
        error_code: str | None = None,
    ) -> DeliveryResult:
        return cls(
            status=DeliveryStatus.FAILED,
            error_message=error_message,
            error_code=error_code,
        )


@dataclass(frozen=True, slots=True)
class EmailMessage:
    """A plain-text email addressed to a carrier gateway."""

    to: str
    subject: str
    text_content: str
    from_email: str
    from_name: str = ""
    html_content: str | None = None


# ── Notification requests ─────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class AppointmentConfirmation:
    """A single newly booked appointment."""

    client_name: str
    date: str  # ISO yyyy-mm-dd
    time: str  # HH:MM, 24h
    duration: int = 60
    price: float | None = None


@dataclass(frozen=True, slots=True)
class DigestEntry:
    """One line of the daily digest."""

    client_name: str
    time: str


@dataclass(frozen=True, slots=True)
class DailyDigest:
    """Today's appointment count plus the entries to enumerate."""

    appointment_count: int
    appointments: list[DigestEntry] = field(default_factory=list)

    @classmethod
    def from_entries(cls, entries: list[DigestEntry]) -> DailyDigest:
        return cls(appointment_count=len(entries), appointments=list(entries))


# ── Outcomes ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PartOutcome:
    """Delivery result for one chunk of a multi-part send."""

    index: int
    success: bool
    external_id: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "part": self.index + 1,
            "success": self.success,
            "messageId": self.external_id,
            "error": self.error,
        }


@dataclass(frozen=True, slots=True)
class SendOutcome:
    """Aggregate result handed back to the HTTP layer or scheduler."""

    success: bool
    parts: list[PartOutcome] = field(default_factory=list)
    error: str | None = None
    skipped: bool = False

    @property
    def message_ids(self) -> list[str]:
        return [p.external_id for p in self.parts if p.success and p.external_id]

    @property
    def failed_parts(self) -> list[PartOutcome]:
        return [p for p in self.parts if not p.success]

    @classmethod
    def failure(cls, error: str, *, parts: list[PartOutcome] | None = None) -> SendOutcome:
        return cls(success=False, parts=list(parts or []), error=error)


# ── Configuration ─────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PacingSchedule:
    """Waits between consecutive parts: one value after the first, another after the rest."""

    first_delay: float = 60.0
    subsequent_delay: float = 120.0

    def delay_after(self, index: int) -> float:
        """Seconds to wait after part ``index`` (0-based) before the next one."""
        return self.first_delay if index == 0 else self.subsequent_delay


@dataclass(frozen=True, slots=True)
class BarberContact:
    """Where notifications are delivered."""

    phone_number: str
    carrier: str


@dataclass(frozen=True, slots=True)
class NotifierConfig:
    """Everything the notifier needs, passed in explicitly."""

    contact: BarberContact
    from_email: str
    from_name: str = ""
    app_name: str = "Booby Blendz Barbershop"
    max_chunk_length: int = 95
    pacing: PacingSchedule = field(default_factory=PacingSchedule)


@dataclass(frozen=True, slots=True)
class DigestScheduleConfig:
    """When the daily digest job fires."""

    hour: int = 7
    minute: int = 30
    timezone: str = "America/Chicago"
    skip_empty_days: bool = True


@dataclass(frozen=True, slots=True)
class SmtpConfig:
    """Configuration for the SMTP transport."""

    username: str
    password: str
    host: str = "smtp.gmail.com"
    port: int = 587
    use_starttls: bool = True
    timeout: float = 30.0


@dataclass(frozen=True, slots=True)
class SendGridConfig:
    """Configuration for the SendGrid transport."""

    api_key: str


@dataclass(frozen=True, slots=True)
class Smtp2GoConfig:
    """Configuration for the SMTP2GO transport."""

    api_key: str
