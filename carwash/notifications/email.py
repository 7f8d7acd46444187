"""
SendGrid email client used for staff credentials.
"""
import logging
from typing import Iterator

import requests

from carwash.config import get_settings

logger = logging.getLogger(__name__)


class EmailError(Exception):
    pass


class EmailClient:
    def __init__(self, api_key: str, from_email: str, url: str, timeout: int = 20):
        self.from_email = from_email
        self.url = url
        self.timeout = timeout
        self.configured = bool(api_key)
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def send(self, to_email: str, subject: str, text: str) -> None:
        if not self.configured:
            raise EmailError("Email provider is not configured")

        body = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {"email": self.from_email},
            "subject": subject,
            "content": [{"type": "text/plain", "value": text}],
        }
        try:
            resp = self.session.post(self.url, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            raise EmailError(f"Email request failed: {exc}") from exc
        if not resp.ok:
            raise EmailError(f"Email provider error {resp.status_code}: {resp.text}")
        logger.info("Email '%s' sent to %s", subject, to_email)

    def send_credentials(self, to_email: str, name: str, temp_password: str, login_url: str) -> None:
        """Deliver a new staff member's temporary password."""
        text = (
            f"Hello {name},\n\n"
            f"An account has been created for you.\n\n"
            f"Email: {to_email}\n"
            f"Temporary password: {temp_password}\n\n"
            f"Sign in at {login_url} and change your password.\n"
        )
        self.send(to_email, "Your car wash account", text)

    def close(self) -> None:
        self.session.close()


def get_email_client() -> Iterator[EmailClient]:
    """FastAPI dependency yielding an email client for one request."""
    settings = get_settings()
    client = EmailClient(
        api_key=settings.sendgrid_api_key,
        from_email=settings.sendgrid_from_email,
        url=settings.sendgrid_url,
        timeout=settings.notification_timeout,
    )
    try:
        yield client
    finally:
        client.close()
