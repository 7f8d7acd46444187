"""
Small helpers shared across models, routers and reports.
"""
from datetime import datetime, timezone
from typing import Optional
import secrets
import string


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from backends without tz support."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_temp_password(length: int = 10) -> str:
    """Random password handed to newly created staff accounts."""
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_passcode() -> str:
    """Four digit code the customer gives back when collecting the vehicle."""
    return "".join(secrets.choice(string.digits) for _ in range(4))
