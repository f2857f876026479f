"""Build configuration objects from environment variables.

Only process entry points (the scheduler, the ASGI app factory) read the
environment; library code receives the resulting dataclasses explicitly.

Environment variables:
    EMAIL_USER / EMAIL_PASSWORD: SMTP login, also the sender address.
    SMTP_HOST / SMTP_PORT: SMTP relay (default smtp.gmail.com:587).
    CHAIRTEXT_TRANSPORT: smtp (default), sendgrid or smtp2go.
    SENDGRID_API_KEY / SMTP2GO_API_KEY: API keys for those transports.
    BARBER_PHONE_NUMBER / BARBER_CARRIER: where texts are delivered.
    CHAIRTEXT_FROM_NAME, CHAIRTEXT_APP_NAME: display names.
    CHAIRTEXT_MAX_CHUNK_LENGTH: characters per SMS part (default 95).
    CHAIRTEXT_PACING_FIRST_SECONDS / CHAIRTEXT_PACING_SUBSEQUENT_SECONDS:
        waits between parts (default 60 / 120).
    CHAIRTEXT_DIGEST_HOUR / CHAIRTEXT_DIGEST_MINUTE / CHAIRTEXT_TIMEZONE:
        daily digest time (default 07:30 America/Chicago).
    CHAIRTEXT_SKIP_EMPTY_DAYS: skip the scheduled digest with no appointments.
    CHAIRTEXT_LEDGER_PATH: JSON file that records sent digests (optional).
    CHAIRTEXT_EXTRA_CARRIERS: ``key=@domain,...`` additions to the carrier table.
    CHAIRTEXT_APPOINTMENTS_FILE: JSON appointment rows for the HTTP app (optional).
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from .carriers import DEFAULT_DIRECTORY, CarrierDirectory, parse_carrier_overrides
from .email.base import EmailProvider
from .errors import ValidationError
from .ledger import DigestLedger
from .types import (
    BarberContact,
    DigestScheduleConfig,
    NotifierConfig,
    PacingSchedule,
    SendGridConfig,
    Smtp2GoConfig,
    SmtpConfig,
)

TRANSPORTS = ("smtp", "sendgrid", "smtp2go")


def _env(env: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if env is None else env


def _required(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if value is None or not value.strip():
        raise ValidationError(f"Missing required environment variable: {name}", field=name)
    return value.strip()


def _optional(env: Mapping[str, str], name: str, default: str) -> str:
    value = env.get(name)
    return value.strip() if value and value.strip() else default


def _number(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"Invalid number for {name}: {raw!r}", field=name) from None


def _bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValidationError(f"Invalid boolean value for {name}: {raw!r}", field=name)


def notifier_config_from_env(env: Mapping[str, str] | None = None) -> NotifierConfig:
    env = _env(env)
    max_chunk_length = int(_number(env, "CHAIRTEXT_MAX_CHUNK_LENGTH", 95))
    if max_chunk_length < 1:
        raise ValidationError("CHAIRTEXT_MAX_CHUNK_LENGTH must be positive", field="CHAIRTEXT_MAX_CHUNK_LENGTH")

    return NotifierConfig(
        contact=BarberContact(
            phone_number=_required(env, "BARBER_PHONE_NUMBER"),
            carrier=_optional(env, "BARBER_CARRIER", "verizon"),
        ),
        from_email=_required(env, "EMAIL_USER"),
        from_name=_optional(env, "CHAIRTEXT_FROM_NAME", ""),
        app_name=_optional(env, "CHAIRTEXT_APP_NAME", "Booby Blendz Barbershop"),
        max_chunk_length=max_chunk_length,
        pacing=PacingSchedule(
            first_delay=_number(env, "CHAIRTEXT_PACING_FIRST_SECONDS", 60.0),
            subsequent_delay=_number(env, "CHAIRTEXT_PACING_SUBSEQUENT_SECONDS", 120.0),
        ),
    )


def schedule_config_from_env(env: Mapping[str, str] | None = None) -> DigestScheduleConfig:
    env = _env(env)
    hour = int(_number(env, "CHAIRTEXT_DIGEST_HOUR", 7))
    minute = int(_number(env, "CHAIRTEXT_DIGEST_MINUTE", 30))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValidationError(f"Invalid digest time {hour:02d}:{minute:02d}", field="CHAIRTEXT_DIGEST_HOUR")
    return DigestScheduleConfig(
        hour=hour,
        minute=minute,
        timezone=_optional(env, "CHAIRTEXT_TIMEZONE", "America/Chicago"),
        skip_empty_days=_bool(env, "CHAIRTEXT_SKIP_EMPTY_DAYS", True),
    )


def directory_from_env(env: Mapping[str, str] | None = None) -> CarrierDirectory:
    env = _env(env)
    try:
        extra = parse_carrier_overrides(env.get("CHAIRTEXT_EXTRA_CARRIERS"))
    except ValueError as exc:
        raise ValidationError(str(exc), field="CHAIRTEXT_EXTRA_CARRIERS") from None
    return DEFAULT_DIRECTORY.with_overrides(extra) if extra else DEFAULT_DIRECTORY


def ledger_from_env(env: Mapping[str, str] | None = None) -> DigestLedger | None:
    path = _env(env).get("CHAIRTEXT_LEDGER_PATH")
    return DigestLedger(path) if path and path.strip() else None


def email_configured(env: Mapping[str, str] | None = None) -> bool:
    """Whether credentials for the selected transport are present."""
    env = _env(env)
    transport = _optional(env, "CHAIRTEXT_TRANSPORT", "smtp").lower()
    if transport == "sendgrid":
        return bool(env.get("SENDGRID_API_KEY"))
    if transport == "smtp2go":
        return bool(env.get("SMTP2GO_API_KEY"))
    return bool(env.get("EMAIL_USER") and env.get("EMAIL_PASSWORD"))


def provider_from_env(env: Mapping[str, str] | None = None) -> EmailProvider:
    """Instantiate the transport named by ``CHAIRTEXT_TRANSPORT``."""
    env = _env(env)
    transport = _optional(env, "CHAIRTEXT_TRANSPORT", "smtp").lower()

    if transport == "sendgrid":
        from .email.sendgrid import SendGridProvider

        return SendGridProvider(SendGridConfig(api_key=_required(env, "SENDGRID_API_KEY")))
    if transport == "smtp2go":
        from .email.smtp2go import Smtp2GoProvider

        return Smtp2GoProvider(Smtp2GoConfig(api_key=_required(env, "SMTP2GO_API_KEY")))
    if transport == "smtp":
        from .email.smtp import SmtpProvider

        return SmtpProvider(
            SmtpConfig(
                username=_required(env, "EMAIL_USER"),
                password=_required(env, "EMAIL_PASSWORD"),
                host=_optional(env, "SMTP_HOST", "smtp.gmail.com"),
                port=int(_number(env, "SMTP_PORT", 587)),
            )
        )
    raise ValidationError(
        f"Unknown transport {transport!r}; expected one of {', '.join(TRANSPORTS)}",
        field="CHAIRTEXT_TRANSPORT",
    )
