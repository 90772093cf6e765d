from __future__ import annotations

import logging
from typing import Protocol

import requests
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from .config import Settings
from .errors import MessagingConfigError, MessagingSendError
from .logging_utils import mask_phone
from .sms import OutboundSms

logger = logging.getLogger(__name__)


class SmsSender(Protocol):
    def send(self, message: OutboundSms) -> str | None: ...


class TwilioSender:
    """
    Send SMS replies through the configured Twilio account.

    Credentials are only checked when send() is called, so the app starts
    (and the stats lookup runs) even when Twilio is not configured.
    """

    def __init__(self, settings: Settings, client: Client | None = None) -> None:
        self.settings = settings
        self._client = client

    def get_twilio_client(self) -> Client:
        if self._client is not None:
            return self._client

        if not self.settings.twilio_account_sid or not self.settings.twilio_auth_token:
            raise MessagingConfigError(
                "Twilio credentials are not configured (TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN)"
            )

        self._client = Client(self.settings.twilio_account_sid, self.settings.twilio_auth_token)
        return self._client

    def send(self, message: OutboundSms) -> str | None:
        if not self.settings.twilio_from_number:
            raise MessagingConfigError("TWILIO_PHONE_NUMBER is not configured")

        client = self.get_twilio_client()
        try:
            created = client.messages.create(
                to=message.recipient,
                from_=self.settings.twilio_from_number,
                body=message.body,
            )
        except (TwilioException, requests.RequestException) as exc:
            raise MessagingSendError(f"Twilio send failed: {exc}") from exc

        sid = getattr(created, "sid", None)
        logger.info("sms sent to=%s sid=%s", mask_phone(message.recipient), sid)
        return sid


class PreviewSender:
    """Collects replies instead of sending them (test endpoint and CLI)."""

    def __init__(self) -> None:
        self.sent: list[OutboundSms] = []

    def send(self, message: OutboundSms) -> str | None:
        self.sent.append(message)
        return None
