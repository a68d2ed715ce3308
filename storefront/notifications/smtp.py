"""
SMTP delivery providers: password login and Gmail OAuth2 (XOAUTH2).
"""

import base64
import smtplib
import ssl
import time
from typing import Optional

import requests

from storefront.notifications.base import NotificationError, NotificationProvider, OutgoingEmail
from storefront.utils.logger import get_logger, hash_email, log_with_context

logger = get_logger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GMAIL_SMTP_HOST = "smtp.gmail.com"
GMAIL_SMTP_PORT = 465


class SmtpProvider(NotificationProvider):
    """Plain SMTP over implicit TLS with username/password login."""

    def __init__(
        self,
        user: str,
        password: str,
        host: str = GMAIL_SMTP_HOST,
        port: int = GMAIL_SMTP_PORT,
        store_name: str = "Your Store",
        timeout: int = 30
    ):
        super().__init__(user, store_name)
        self.password = password
        self.host = host
        self.port = port
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.user and self.password)

    def _connect(self) -> smtplib.SMTP_SSL:
        return smtplib.SMTP_SSL(
            self.host,
            self.port,
            timeout=self.timeout,
            context=ssl.create_default_context()
        )

    def _authenticate(self, smtp: smtplib.SMTP_SSL) -> None:
        smtp.login(self.user, self.password)

    def send(self, email: OutgoingEmail) -> str:
        if not self.is_configured():
            raise NotificationError("SMTP credentials are not configured")

        message = email.to_message(self.default_from)
        try:
            with self._connect() as smtp:
                self._authenticate(smtp)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP delivery failed: {str(e)}")

        log_with_context(
            logger, "INFO",
            "Email sent",
            recipient_hash=hash_email(email.to),
            message_id=message["Message-ID"]
        )
        return message["Message-ID"]


class GmailOAuth2Provider(SmtpProvider):
    """
    Gmail SMTP authenticated with an OAuth2 refresh token.

    Access tokens are exchanged at Google's token endpoint and reused until
    a minute before they expire.
    """

    def __init__(
        self,
        user: str,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        store_name: str = "Your Store",
        timeout: int = 30
    ):
        super().__init__(
            user,
            password="",
            host=GMAIL_SMTP_HOST,
            port=GMAIL_SMTP_PORT,
            store_name=store_name,
            timeout=timeout
        )
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token

        self._access_token: Optional[str] = None
        self._expires_at: float = 0.0

    def is_configured(self) -> bool:
        return all([self.user, self.client_id, self.client_secret, self.refresh_token])

    def get_access_token(self) -> str:
        """
        Return a valid access token, refreshing it when needed.

        Raises:
            NotificationError: If Google rejects the refresh token
        """
        if self._access_token and time.time() < self._expires_at - 60:
            return self._access_token

        try:
            response = requests.post(
                GOOGLE_TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "refresh_token": self.refresh_token,
                    "grant_type": "refresh_token",
                },
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise NotificationError(f"OAuth2 token refresh failed: {str(e)}")

        if response.status_code != 200:
            raise NotificationError(
                f"OAuth2 token refresh failed: {response.status_code} {response.text[:200]}"
            )

        tokens = response.json()
        access_token = tokens.get("access_token")
        if not access_token:
            raise NotificationError("OAuth2 token response has no access_token")

        self._access_token = access_token
        self._expires_at = time.time() + int(tokens.get("expires_in", 3600))
        return access_token

    def _authenticate(self, smtp: smtplib.SMTP_SSL) -> None:
        token = self.get_access_token()
        auth_string = f"user={self.user}\x01auth=Bearer {token}\x01\x01"
        encoded = base64.b64encode(auth_string.encode()).decode()

        smtp.ehlo()
        code, reply = smtp.docmd("AUTH", f"XOAUTH2 {encoded}")
        if code != 235:
            # a cached token may have been revoked
            self._access_token = None
            raise NotificationError(f"XOAUTH2 authentication failed: {code} {reply!r}")
