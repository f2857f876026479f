"""Email transports used to reach carrier SMS gateways."""

from .base import EmailProvider
from .sendgrid import SendGridProvider
from .smtp import SmtpProvider
from .smtp2go import Smtp2GoProvider

__all__ = ["EmailProvider", "SendGridProvider", "SmtpProvider", "Smtp2GoProvider"]
