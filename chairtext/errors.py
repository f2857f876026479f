"""Exceptions raised inside the notification pipeline.

None of these escape the public ``SMSNotifier`` entry points; they are
converted to a failed ``SendOutcome`` at that boundary.
"""

from __future__ import annotations


class NotificationError(RuntimeError):
    """Base class for pipeline errors."""


class UnsupportedCarrierError(NotificationError, LookupError):
    """Raised when a carrier key is not in the directory."""

    def __init__(self, carrier: str) -> None:
        super().__init__(f"Unsupported carrier: {carrier}")
        self.carrier = carrier


class TransportError(NotificationError):
    """Raised when one outbound email could not be handed to the transport."""

    def __init__(self, message: str, *, part: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.part = part
        self.code = code


class ValidationError(NotificationError, ValueError):
    """Raised when required notification fields are missing or malformed."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
