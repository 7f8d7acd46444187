"""
Washer/company income split for check-ins.
"""
import logging
from typing import Iterable, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carwash.models.check_in import CheckInService
from carwash.models.service import Service

logger = logging.getLogger(__name__)

COMMISSION_TOTAL = 100.0


def validate_commission(washer_percentage: float, company_percentage: float) -> Optional[str]:
    """Return an error message when the pair is not a valid split, else None."""
    if washer_percentage < 0 or washer_percentage > 100:
        return "Washer commission percentage must be between 0 and 100"
    if company_percentage < 0 or company_percentage > 100:
        return "Company commission percentage must be between 0 and 100"
    if abs((washer_percentage + company_percentage) - COMMISSION_TOTAL) > 1e-9:
        return "Washer and company commission percentages must equal 100%"
    return None


def split_price(price: float, washer_percentage: float, company_percentage: float) -> Tuple[float, float]:
    """Split one service price into (washer share, company share)."""
    return price * washer_percentage / 100, price * company_percentage / 100


async def compute_check_in_income(
    db: AsyncSession, rendered: Iterable[CheckInService]
) -> Tuple[float, float]:
    """
    Sum the washer and company shares over the services rendered on a check-in.

    A rendered service whose catalog entry can no longer be found contributes
    nothing to either share.
    """
    washer_income = 0.0
    company_income = 0.0
    for line in rendered:
        service = None
        if line.service_id is not None:
            service = await db.get(Service, line.service_id)
        if service is None:
            logger.warning(
                "Service %s not found for check-in %s, skipping commission",
                line.service_id, line.check_in_id,
            )
            continue
        washer_share, company_share = split_price(
            line.price,
            service.washer_commission_percentage,
            service.company_commission_percentage,
        )
        washer_income += washer_share
        company_income += company_share
    return washer_income, company_income
