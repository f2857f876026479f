"""
chairtext: Email-to-SMS appointment notifications for a single barber.

Texts the barber's own phone through the carrier's email-to-SMS gateway
(``8327080194@vtext.com`` and friends) whenever an appointment is booked, and
once every morning with the day's schedule. Long digests are split into
SMS-sized parts and sent a few minutes apart so carriers don't throttle them.

Quick start, confirmation on booking::

    from chairtext import (
        AppointmentConfirmation, BarberContact, NotifierConfig, SMSNotifier,
        SmtpConfig, SmtpProvider,
    )

    notifier = SMSNotifier(
        NotifierConfig(
            contact=BarberContact(phone_number="(832) 708-0194", carrier="verizon"),
            from_email="shop@gmail.com",
        ),
        SmtpProvider(SmtpConfig(username="shop@gmail.com", password="app-password")),
    )
    outcome = await notifier.send_appointment_confirmation(
        AppointmentConfirmation(client_name="Jane", date="2025-01-17", time="14:00")
    )
    if outcome.success:
        print(f"Sent: {outcome.message_ids}")

Daily digest::

    digest = DailyDigest.from_entries([DigestEntry("Jane", "09:00"), DigestEntry("Sam", "13:30")])
    outcome = await notifier.send_daily_digest(digest)

Just the pieces::

    from chairtext import resolve_gateway_address, format_daily_digest, split_message_into_chunks

    resolve_gateway_address("832-708-0194", "Verizon")   # "8327080194@vtext.com"
    split_message_into_chunks(format_daily_digest(5, entries))  # 3 parts

For testing::

    from chairtext import MockEmailProvider

    provider = MockEmailProvider()
    notifier = SMSNotifier(config, provider, sleep=fake_sleep)

Module overview
---------------
- ``types``         Dataclasses: requests, DeliveryResult, SendOutcome, configs
- ``errors``        UnsupportedCarrierError, TransportError, ValidationError
- ``carriers``      Carrier directory and gateway address resolution
- ``compose``       Confirmation and digest text
- ``chunking``      SMS-sized splitting
- ``pacing``        Paced multi-part delivery
- ``notifier``      SMSNotifier entry points
- ``ledger``        "Digest already sent today" marker
- ``appointments``  AppointmentSource protocol and simple sources
- ``email/``        SmtpProvider, SendGridProvider, Smtp2GoProvider
- ``config``        Environment-variable loaders
- ``api``           FastAPI app factory
- ``scheduler``     APScheduler daily digest job
"""

from .appointments import AppointmentSource, JsonFileAppointmentSource, StaticAppointmentSource, build_digest
from .carriers import (
    DEFAULT_GATEWAY_DOMAINS,
    CarrierDirectory,
    CarrierEntry,
    carrier_listing,
    clean_phone_number,
    resolve_gateway_address,
    supported_carriers,
)
from .chunking import DEFAULT_MAX_CHUNK_LENGTH, is_appointment_line, split_message_into_chunks
from .compose import (
    NO_APPOINTMENTS_MESSAGE,
    format_appointment_confirmation,
    format_daily_digest,
    format_date,
    format_duration,
    format_time,
)
from .email import EmailProvider, SendGridProvider, SmtpProvider, Smtp2GoProvider
from .errors import NotificationError, TransportError, UnsupportedCarrierError, ValidationError
from .ledger import DigestLedger, InMemoryDigestLedger
from .mock import MockEmailProvider
from .notifier import SMSNotifier, confirmation_from_payload
from .pacing import send_paced
from .types import (
    AppointmentConfirmation,
    BarberContact,
    DailyDigest,
    DeliveryResult,
    DeliveryStatus,
    DigestEntry,
    DigestScheduleConfig,
    EmailMessage,
    NotifierConfig,
    PacingSchedule,
    PartOutcome,
    SendGridConfig,
    SendOutcome,
    Smtp2GoConfig,
    SmtpConfig,
)

__all__ = [
    # Notifier
    "SMSNotifier",
    "confirmation_from_payload",
    # Carrier directory
    "CarrierDirectory",
    "CarrierEntry",
    "DEFAULT_GATEWAY_DOMAINS",
    "carrier_listing",
    "clean_phone_number",
    "resolve_gateway_address",
    "supported_carriers",
    # Composer
    "NO_APPOINTMENTS_MESSAGE",
    "format_appointment_confirmation",
    "format_daily_digest",
    "format_date",
    "format_duration",
    "format_time",
    # Chunker
    "DEFAULT_MAX_CHUNK_LENGTH",
    "is_appointment_line",
    "split_message_into_chunks",
    # Paced sender
    "send_paced",
    # Email providers
    "EmailProvider",
    "SendGridProvider",
    "SmtpProvider",
    "Smtp2GoProvider",
    "MockEmailProvider",
    # Appointments and ledger
    "AppointmentSource",
    "JsonFileAppointmentSource",
    "StaticAppointmentSource",
    "build_digest",
    "DigestLedger",
    "InMemoryDigestLedger",
    # Errors
    "NotificationError",
    "TransportError",
    "UnsupportedCarrierError",
    "ValidationError",
    # Types
    "AppointmentConfirmation",
    "BarberContact",
    "DailyDigest",
    "DeliveryResult",
    "DeliveryStatus",
    "DigestEntry",
    "DigestScheduleConfig",
    "EmailMessage",
    "NotifierConfig",
    "PacingSchedule",
    "PartOutcome",
    "SendGridConfig",
    "SendOutcome",
    "Smtp2GoConfig",
    "SmtpConfig",
]
