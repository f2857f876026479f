"""Notifier: the entry points callers use to text the barber.

Each call composes the text, resolves the carrier gateway address, chunks
the text and hands the parts to the paced sender. Nothing raises past these
methods: every problem comes back as a failed ``SendOutcome``.

Failure policy differs by path:

- Confirmations are best-effort. Every part is attempted even if an earlier
  one failed, and the outcome lists each part.
- Digests stop at the first failed part and report the digest as failed.
  The parts attempted so far are still listed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Union

from .carriers import DEFAULT_DIRECTORY, CarrierDirectory
from .chunking import split_message_into_chunks
from .compose import (
    format_appointment_confirmation,
    format_daily_digest,
    format_time,
    parse_iso_date,
    to_digest_entry,
)
from .email.base import EmailProvider
from .errors import NotificationError, UnsupportedCarrierError, ValidationError
from .ledger import DigestLedgerProtocol
from .pacing import SleepFn, send_paced
from .types import AppointmentConfirmation, DailyDigest, NotifierConfig, SendOutcome

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "New Appointment"
DIGEST_SUBJECT = "Daily Appointment Reminder"
TEST_SUBJECT = "Test SMS"


def confirmation_from_payload(payload: Mapping[str, Any]) -> AppointmentConfirmation:
    """Build a confirmation request from camelCase or snake_case fields.

    Raises:
        ValidationError: if client name, date or time is missing, or the
            date or time does not parse.
    """
    client_name = payload.get("clientName") or payload.get("client_name")
    missing = [
        label
        for label, value in (("clientName", client_name), ("date", payload.get("date")), ("time", payload.get("time")))
        if not value or not str(value).strip()
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", field=missing[0])

    parse_iso_date(str(payload["date"]))
    format_time(str(payload["time"]))

    duration = payload.get("duration") or 60
    try:
        duration = int(duration)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid duration: {duration!r}", field="duration") from None

    price = payload.get("price")
    if price not in (None, ""):
        try:
            price = float(price)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid price: {price!r}", field="price") from None
    else:
        price = None

    return AppointmentConfirmation(
        client_name=str(client_name).strip(),
        date=str(payload["date"]).strip(),
        time=str(payload["time"]).strip(),
        duration=duration,
        price=price,
    )


def _validate_confirmation(request: AppointmentConfirmation) -> None:
    for field_name in ("client_name", "date", "time"):
        value = getattr(request, field_name)
        if not value or not str(value).strip():
            raise ValidationError(f"Missing required field: {field_name}", field=field_name)


class SMSNotifier:
    """Sends confirmations, digests and test messages to one barber's phone.

    Usage::

        notifier = SMSNotifier(config, SmtpProvider(smtp_config))
        outcome = await notifier.send_appointment_confirmation(
            AppointmentConfirmation(client_name="Jane", date="2025-01-17", time="14:00")
        )
        if not outcome.success:
            print(outcome.error)
    """

    def __init__(
        self,
        config: NotifierConfig,
        provider: EmailProvider,
        *,
        directory: CarrierDirectory | None = None,
        ledger: DigestLedgerProtocol | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.config = config
        self.provider = provider
        self.directory = directory or DEFAULT_DIRECTORY
        self.ledger = ledger
        self._sleep = sleep
        self._digests_in_flight: set[date] = set()

    def gateway_address(self, phone_number: str | None = None, carrier: str | None = None) -> str:
        """Resolve the gateway address, defaulting to the configured contact."""
        contact = self.config.contact
        return self.directory.resolve(phone_number or contact.phone_number, carrier or contact.carrier)

    async def send_appointment_confirmation(
        self,
        request: Union[AppointmentConfirmation, Mapping[str, Any]],
    ) -> SendOutcome:
        try:
            if not isinstance(request, AppointmentConfirmation):
                request = confirmation_from_payload(request)
            _validate_confirmation(request)
            text = format_appointment_confirmation(request.client_name, request.date, request.time)
        except ValidationError as exc:
            logger.warning("Rejected appointment confirmation: %s", exc)
            return SendOutcome.failure(str(exc))

        return await self._dispatch(text, CONFIRMATION_SUBJECT, stop_on_failure=False)

    async def send_daily_digest(
        self,
        digest: DailyDigest,
        *,
        for_date: date | str | None = None,
        force: bool = False,
    ) -> SendOutcome:
        try:
            day = parse_iso_date(for_date) if for_date is not None else date.today()
            entries = [to_digest_entry(item) for item in digest.appointments]
            text = format_daily_digest(digest.appointment_count, entries)
        except ValidationError as exc:
            logger.warning("Rejected daily digest: %s", exc)
            return SendOutcome.failure(str(exc))

        if self.ledger is None:
            return await self._dispatch(text, DIGEST_SUBJECT, stop_on_failure=True)
        if force:
            outcome = await self._dispatch(text, DIGEST_SUBJECT, stop_on_failure=True)
            if outcome.success:
                self.ledger.mark_sent(day)
            return outcome

        # Check and claim happen with no await in between.
        if day in self._digests_in_flight or self.ledger.has_sent(day):
            logger.info("Daily digest for %s already sent or in progress; skipping", day.isoformat())
            return SendOutcome(
                success=False,
                error=f"Daily digest for {day.isoformat()} already sent or in progress",
                skipped=True,
            )

        self._digests_in_flight.add(day)
        try:
            outcome = await self._dispatch(text, DIGEST_SUBJECT, stop_on_failure=True)
            if outcome.success:
                self.ledger.mark_sent(day)
        finally:
            # Failed sends leave the day unmarked.
            self._digests_in_flight.discard(day)
        return outcome

    async def send_test_message(
        self,
        message: str | None = None,
        *,
        phone_number: str | None = None,
        carrier: str | None = None,
    ) -> SendOutcome:
        text = message or f"Test SMS from {self.config.app_name}!"
        return await self._dispatch(
            text,
            TEST_SUBJECT,
            stop_on_failure=False,
            phone_number=phone_number,
            carrier=carrier,
        )

    async def _dispatch(
        self,
        text: str,
        subject: str,
        *,
        stop_on_failure: bool,
        phone_number: str | None = None,
        carrier: str | None = None,
    ) -> SendOutcome:
        try:
            to_address = self.gateway_address(phone_number, carrier)
        except UnsupportedCarrierError as exc:
            logger.error("Cannot send %r: %s", subject, exc)
            return SendOutcome.failure(str(exc))

        chunks = split_message_into_chunks(text, self.config.max_chunk_length)
        try:
            return await send_paced(
                self.provider,
                chunks,
                to_address,
                subject,
                from_email=self.config.from_email,
                from_name=self.config.from_name,
                schedule=self.config.pacing,
                stop_on_failure=stop_on_failure,
                sleep=self._sleep,
            )
        except NotificationError as exc:
            logger.error("Sending %r failed: %s", subject, exc)
            return SendOutcome.failure(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error sending %r", subject)
            return SendOutcome.failure(str(exc))
