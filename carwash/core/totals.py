"""
Customer visit and spend totals.

Completed and paid check-ins are the source of truth. The ``total_visits`` and
``total_spent`` columns on the customer row are a cache written back by
``refresh_customer_totals`` inside the caller's transaction.
"""
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from carwash.models.check_in import CheckIn, VISIT_STATUSES
from carwash.models.customer import Customer


async def customer_totals(
    db: AsyncSession, customer_id: int, since: Optional[datetime] = None
) -> Tuple[int, float]:
    """Count finished visits and sum their amounts, optionally from ``since`` on."""
    query = select(
        func.count(CheckIn.id), func.coalesce(func.sum(CheckIn.total_amount), 0.0)
    ).where(
        CheckIn.customer_id == customer_id,
        CheckIn.status.in_(VISIT_STATUSES),
    )
    if since is not None:
        query = query.where(CheckIn.check_in_time >= since)
    visits, spent = (await db.execute(query)).one()
    return int(visits or 0), float(spent or 0.0)


async def refresh_customer_totals(db: AsyncSession, customer: Customer) -> Tuple[int, float]:
    """Recompute the cached totals for a customer and store them on the row."""
    visits, spent = await customer_totals(db, customer.id)
    customer.total_visits = visits
    customer.total_spent = spent
    return visits, spent
