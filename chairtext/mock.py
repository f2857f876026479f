"""Mock email provider for testing.

Records every email it is handed and returns configurable results, so code
that sends gateway emails can be tested without a mail server.
"""

from __future__ import annotations

import random
import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from .types import DeliveryResult, EmailMessage


@dataclass
class SentEmail:
    """Record of an email sent through the MockEmailProvider."""

    message: EmailMessage
    result: DeliveryResult


class MockEmailProvider:
    """Test provider that records emails and returns configurable results.

    Usage::

        provider = MockEmailProvider()
        result = provider.send(EmailMessage(to="5551234567@vtext.com", ...))
        assert result.succeeded
        assert provider.sent[0].message.to == "5551234567@vtext.com"

    Script per-call results (the last one repeats)::

        provider = MockEmailProvider(results=[DeliveryResult.ok(), DeliveryResult.fail("boom")])

    Or raise from the transport, as a broken adapter would::

        provider = MockEmailProvider(raise_on_send=ConnectionError("down"))
    """

    def __init__(
        self,
        *,
        failure_rate: float = 0.0,
        fixed_result: DeliveryResult | None = None,
        results: Iterable[DeliveryResult] | None = None,
        raise_on_send: Exception | None = None,
    ) -> None:
        self.failure_rate = failure_rate
        self.fixed_result = fixed_result
        self.results = list(results or [])
        self.raise_on_send = raise_on_send
        self.sent: list[SentEmail] = []
        self.calls = 0

    def send(self, message: EmailMessage) -> DeliveryResult:
        self.calls += 1
        if self.raise_on_send is not None:
            raise self.raise_on_send

        if self.results:
            result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        elif self.fixed_result is not None:
            result = self.fixed_result
        elif self.failure_rate > 0 and random.random() < self.failure_rate:  # noqa: S311
            result = DeliveryResult.fail("Simulated failure")
        else:
            result = DeliveryResult.ok(external_id=f"<mock_{uuid.uuid4().hex[:12]}@chairtext>")

        self.sent.append(SentEmail(message=message, result=result))
        return result

    async def send_async(self, message: EmailMessage) -> DeliveryResult:
        return self.send(message)

    @property
    def bodies(self) -> list[str]:
        return [record.message.text_content for record in self.sent]

    def reset(self) -> None:
        """Clear all recorded emails."""
        self.sent.clear()
        self.calls = 0
