"""
Outbound notifications (SMS and email).

Clients are provided through FastAPI dependencies so a request can be served
with a different client, and delivery failures are the caller's to log.
"""
from carwash.notifications.sms import SMSClient, SMSError, get_sms_client, format_nigerian_phone
from carwash.notifications.email import EmailClient, EmailError, get_email_client

__all__ = [
    "SMSClient", "SMSError", "get_sms_client", "format_nigerian_phone",
    "EmailClient", "EmailError", "get_email_client",
]
