"""
Kudisms SMS client.
"""
import logging
import re
from typing import Iterator

import requests

from carwash.config import get_settings

logger = logging.getLogger(__name__)


class SMSError(Exception):
    pass


def format_nigerian_phone(phone_number: str) -> str:
    """
    Normalise a Nigerian number to international format.

    08169530309, 8169530309, 2348169530309 and +2348169530309 all become
    +2348169530309.
    """
    cleaned = re.sub(r"\D", "", phone_number)

    if cleaned.startswith("234") and len(cleaned) == 13:
        return f"+{cleaned}"
    if cleaned.startswith("0") and len(cleaned) == 11:
        return f"+234{cleaned[1:]}"
    if len(cleaned) == 10:
        return f"+234{cleaned}"
    if phone_number.startswith("+"):
        return phone_number
    return f"+{cleaned}"


class SMSClient:
    def __init__(self, token: str, sender_id: str, url: str, timeout: int = 20):
        self.token = token
        self.sender_id = sender_id
        self.url = url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def send(self, phone_number: str, message: str) -> dict:
        """Send one message, raising SMSError when the provider does not accept it."""
        if not self.token or not self.sender_id:
            raise SMSError("SMS provider is not configured")

        recipient = format_nigerian_phone(phone_number).lstrip("+")
        try:
            resp = self.session.post(
                self.url,
                data={
                    "token": self.token,
                    "senderID": self.sender_id,
                    "recipients": recipient,
                    "message": message,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise SMSError(f"SMS request failed: {exc}") from exc

        if not resp.ok:
            raise SMSError(f"SMS provider error {resp.status_code}: {resp.text}")
        payload = resp.json() if resp.content else {}
        if payload.get("status") != "success":
            raise SMSError(payload.get("msg") or "SMS provider rejected the message")

        logger.info("SMS sent to %s", recipient)
        return payload

    def close(self) -> None:
        self.session.close()


def get_sms_client() -> Iterator[SMSClient]:
    """
    FastAPI dependency yielding an SMS client for one request.

    Each request gets its own session, since sends run on worker threads and
    a requests.Session is not safe to share between them.
    """
    settings = get_settings()
    client = SMSClient(
        token=settings.kudisms_token,
        sender_id=settings.kudisms_sender_id,
        url=settings.kudisms_url,
        timeout=settings.notification_timeout,
    )
    try:
        yield client
    finally:
        client.close()
