"""Base protocol for email providers."""

from __future__ import annotations

from typing import Protocol

from chairtext.types import DeliveryResult, EmailMessage


class EmailProvider(Protocol):
    """Interface that all email providers must implement.

    Providers never raise on delivery problems; they return a failed
    ``DeliveryResult`` instead.
    """

    def send(self, message: EmailMessage) -> DeliveryResult:
        """Send an email and return the delivery result."""
        ...

    async def send_async(self, message: EmailMessage) -> DeliveryResult:
        """Send without blocking the event loop."""
        ...
