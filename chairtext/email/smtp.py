"""SMTP email provider (Gmail app passwords by default)."""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage as MIMEMessage
from email.utils import formataddr, make_msgid

from chairtext.types import DeliveryResult, EmailMessage, SmtpConfig

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


def build_mime_message(message: EmailMessage) -> MIMEMessage:
    """Render an ``EmailMessage`` as a MIME message with a fresh Message-ID."""
    mime = MIMEMessage()
    mime["From"] = formataddr((message.from_name, message.from_email)) if message.from_name else message.from_email
    mime["To"] = message.to
    mime["Subject"] = message.subject
    sender_domain = message.from_email.rpartition("@")[2] or None
    mime["Message-ID"] = make_msgid(domain=sender_domain)
    mime.set_content(message.text_content)
    if message.html_content:
        mime.add_alternative(message.html_content, subtype="html")
    return mime


class SmtpProvider:
    """Sends emails through an authenticated SMTP relay.

    A connection is opened per message; the gateway sends are minutes
    apart so there is nothing to gain from keeping one alive.
    """

    def __init__(self, config: SmtpConfig) -> None:
        if not config.username or not config.password:
            raise ValueError("SmtpConfig.username and SmtpConfig.password are required")
        self._config = config

    def _connect(self) -> smtplib.SMTP:
        cfg = self._config
        if cfg.port == IMPLICIT_TLS_PORT:
            return smtplib.SMTP_SSL(cfg.host, cfg.port, timeout=cfg.timeout, context=ssl.create_default_context())
        server = smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout)
        if cfg.use_starttls:
            server.starttls(context=ssl.create_default_context())
        return server

    def send(self, message: EmailMessage) -> DeliveryResult:
        """Send an email via SMTP."""
        mime = build_mime_message(message)
        try:
            with self._connect() as server:
                server.login(self._config.username, self._config.password)
                server.send_message(mime)
        except smtplib.SMTPResponseException as exc:
            logger.error("SMTP send failed. Code: %s, Error: %s", exc.smtp_code, exc.smtp_error)
            error = exc.smtp_error.decode("utf-8", errors="replace") if isinstance(exc.smtp_error, bytes) else str(exc.smtp_error)
            return DeliveryResult.fail(error, error_code=str(exc.smtp_code))
        except Exception as exc:
            logger.exception("Unexpected error sending email via SMTP")
            return DeliveryResult.fail(str(exc))

        message_id = mime["Message-ID"]
        logger.info("Email sent via SMTP to %s (%s)", message.to, message_id)
        return DeliveryResult.ok(external_id=message_id)

    async def send_async(self, message: EmailMessage) -> DeliveryResult:
        """Send an email asynchronously (runs sync send in a thread)."""
        return await asyncio.to_thread(self.send, message)
