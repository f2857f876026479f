"""HTTP surface for the notifier.

Routes return the ``{success, ...}`` JSON envelopes the booking front end
expects. Build with ``create_app``; for a process driven by environment
variables use ``uvicorn chairtext.api:app_from_env --factory``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from .appointments import AppointmentSource, JsonFileAppointmentSource, build_digest
from .errors import ValidationError
from .notifier import SMSNotifier, confirmation_from_payload
from .types import SendOutcome

logger = logging.getLogger(__name__)


class AppointmentSMSRequest(BaseModel):
    """Body of ``POST /api/send-appointment-sms``."""

    model_config = ConfigDict(extra="ignore")

    clientName: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    duration: Optional[int] = None
    price: Optional[float] = None
    notes: Optional[str] = None
    status: Optional[str] = None


class SMSTestRequest(BaseModel):
    """Body of ``POST /api/test-sms``; every field is optional."""

    model_config = ConfigDict(extra="ignore")

    phoneNumber: Optional[str] = None
    carrier: Optional[str] = None
    message: Optional[str] = None


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _first_id(outcome: SendOutcome) -> Optional[str]:
    ids = outcome.message_ids
    return ids[0] if ids else None


def create_app(
    notifier: SMSNotifier,
    appointment_source: Optional[AppointmentSource] = None,
    *,
    email_configured: bool = True,
    timezone_name: str = "America/Chicago",
) -> FastAPI:
    """Build the FastAPI application around an already-configured notifier.

    The notifier's transport is closed on shutdown when it has a ``close()``
    method (the SMTP2GO provider holds an HTTP client).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield

        close = getattr(notifier.provider, "close", None)
        if callable(close):
            close()
            logger.info("Email transport closed")

    app = FastAPI(title=notifier.config.app_name, lifespan=lifespan)
    tz = ZoneInfo(timezone_name)

    @app.get("/")
    async def root() -> dict[str, Any]:
        return {
            "message": f"{notifier.config.app_name} Email-to-SMS API is running!",
            "status": "active",
            "endpoints": {
                "health": "/api/health",
                "carriers": "/api/carriers",
                "sendSMS": "/api/send-appointment-sms",
                "dailyReminder": "/api/send-daily-reminder",
                "testSMS": "/api/test-sms",
            },
        }

    @app.get("/api/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "emailConfigured": email_configured,
            "supportedCarriers": notifier.directory.supported_carriers(),
        }

    @app.get("/api/carriers")
    async def carriers() -> dict[str, Any]:
        return {"carriers": notifier.directory.listing()}

    @app.post("/api/send-appointment-sms")
    async def send_appointment_sms(body: AppointmentSMSRequest) -> Any:
        try:
            request = confirmation_from_payload(body.model_dump())
        except ValidationError as exc:
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))

        outcome = await notifier.send_appointment_confirmation(request)
        if not outcome.success:
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send Email-to-SMS", outcome.error)

        return {
            "success": True,
            "message": "Appointment confirmation Email-to-SMS sent successfully!",
            "messageId": _first_id(outcome),
            "parts": [p.to_dict() for p in outcome.parts],
        }

    @app.post("/api/send-daily-reminder")
    async def send_daily_reminder() -> Any:
        if appointment_source is None:
            return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "No appointment source configured")

        today = datetime.now(tz=tz).date()
        try:
            digest = build_digest(await appointment_source.appointments_for(today))
        except Exception:
            logger.exception("Failed to fetch today's appointments")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch today's appointments")

        outcome = await notifier.send_daily_digest(digest, for_date=today)
        if outcome.skipped:
            return _error(status.HTTP_409_CONFLICT, "Daily reminder already sent today", outcome.error)
        if not outcome.success:
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send daily reminder", outcome.error)

        count = digest.appointment_count
        message = (
            "Daily reminder sent successfully! You have no appointments today."
            if count == 0
            else f"Daily reminder sent successfully! Found {count} appointment{_plural(count)} for today."
        )
        return {
            "success": True,
            "message": message,
            "appointmentsCount": count,
            "messageId": [p.to_dict() for p in outcome.parts],
        }

    @app.post("/api/test-sms")
    async def test_sms(body: Optional[SMSTestRequest] = None) -> Any:
        body = body or SMSTestRequest()
        carrier = body.carrier or notifier.config.contact.carrier
        phone = body.phoneNumber or notifier.config.contact.phone_number
        outcome = await notifier.send_test_message(body.message, phone_number=phone, carrier=carrier)
        if not outcome.success:
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send test SMS", outcome.error)

        return {
            "success": True,
            "message": "Test SMS sent successfully!",
            "messageId": _first_id(outcome),
            "details": {"phoneNumber": phone, "carrier": carrier},
        }

    return app


def app_from_env() -> FastAPI:
    """ASGI factory wired from environment variables."""
    from .config import (
        directory_from_env,
        email_configured,
        ledger_from_env,
        notifier_config_from_env,
        provider_from_env,
        schedule_config_from_env,
    )

    notifier = SMSNotifier(
        notifier_config_from_env(),
        provider_from_env(),
        directory=directory_from_env(),
        ledger=ledger_from_env(),
    )
    appointments_file = os.environ.get("CHAIRTEXT_APPOINTMENTS_FILE")
    source = JsonFileAppointmentSource(appointments_file) if appointments_file else None
    return create_app(
        notifier,
        source,
        email_configured=email_configured(),
        timezone_name=schedule_config_from_env().timezone,
    )
