"""SMTP2GO email provider."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from chairtext.types import DeliveryResult, EmailMessage, Smtp2GoConfig

logger = logging.getLogger(__name__)

SMTP2GO_API_URL = "https://api.smtp2go.com/v3/email/send"
DEFAULT_TIMEOUT_SECONDS = 10.0


class Smtp2GoProvider:
    """Sends emails via the SMTP2GO REST API."""

    def __init__(self, config: Smtp2GoConfig) -> None:
        self._api_key = config.api_key
        self._client = httpx.Client(timeout=DEFAULT_TIMEOUT_SECONDS)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> Smtp2GoProvider:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    async def __aenter__(self) -> Smtp2GoProvider:
        return self

    async def __aexit__(self, *args: Any) -> None:
        self.close()

    def send(self, message: EmailMessage) -> DeliveryResult:
        """Send an email via SMTP2GO."""
        sender = f"{message.from_name} <{message.from_email}>" if message.from_name else message.from_email
        payload: dict[str, Any] = {
            "sender": sender,
            "to": [message.to],
            "subject": message.subject,
            "text_body": message.text_content,
        }
        if message.html_content:
            payload["html_body"] = message.html_content
        try:
            response = self._client.post(
                SMTP2GO_API_URL,
                json=payload,
                headers={"X-Smtp2go-Api-Key": self._api_key},
            )
            if 200 <= response.status_code < 300:
                logger.info("Email sent via SMTP2GO to %s", message.to)
                return DeliveryResult.ok(external_id=_email_id(response))
            logger.error(
                "SMTP2GO send failed. Status: %s, Body: %s",
                response.status_code,
                response.text,
            )
            return DeliveryResult.fail(
                f"SMTP2GO returned status {response.status_code}",
                error_code=str(response.status_code),
            )
        except Exception as exc:
            logger.exception("Unexpected error sending email via SMTP2GO")
            return DeliveryResult.fail(str(exc))

    async def send_async(self, message: EmailMessage) -> DeliveryResult:
        """Send an email asynchronously (runs sync send in a thread)."""
        return await asyncio.to_thread(self.send, message)


def _email_id(response: httpx.Response) -> str | None:
    try:
        data = response.json().get("data") or {}
    except (ValueError, AttributeError):
        return None
    email_id = data.get("email_id") if isinstance(data, dict) else None
    return str(email_id) if email_id else None
