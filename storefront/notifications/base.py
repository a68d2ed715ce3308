"""
Abstract base class for email delivery providers.

Uses the Adapter Pattern so the notification service can send through
Gmail OAuth2 or a plain SMTP account without knowing which.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional


@dataclass
class OutgoingEmail:
    """One email ready for delivery."""

    to: str
    subject: str
    html: Optional[str] = None
    text: Optional[str] = None
    from_addr: Optional[str] = None

    def to_message(self, default_from: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_addr or default_from
        message["To"] = self.to
        message["Subject"] = self.subject
        message["Message-ID"] = make_msgid()

        message.set_content(self.text or "This message requires an HTML-capable email client.")
        if self.html:
            message.add_alternative(self.html, subtype="html")
        return message


class NotificationError(Exception):
    """Base exception for notification delivery errors."""
    pass


class NotificationProvider(ABC):
    """Delivers a single email."""

    def __init__(self, user: str, store_name: str = "Your Store"):
        self.user = user
        self.store_name = store_name

    @property
    def default_from(self) -> str:
        return formataddr((self.store_name, self.user))

    @abstractmethod
    def is_configured(self) -> bool:
        """
        Whether all credentials needed to send are present.
        """
        pass

    @abstractmethod
    def send(self, email: OutgoingEmail) -> str:
        """
        Deliver one email.

        Returns:
            Message-ID of the sent message

        Raises:
            NotificationError: If delivery fails
        """
        pass
