"""
Routes for car washers viewing their own records.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from carwash.database import get_db
from carwash.models.bonus import Bonus, BonusStatus, BonusType
from carwash.models.user import User, UserRole
from carwash.routers.common import bad_request
from carwash.schemas.bonus import Bonus as BonusSchema

router = APIRouter(prefix="/worker", tags=["worker"])


def summarize_bonuses(bonuses) -> dict:
    summary = {
        "totalBonuses": len(bonuses),
        "totalAmount": sum(b.amount for b in bonuses),
    }
    for state in (BonusStatus.PENDING, BonusStatus.APPROVED, BonusStatus.PAID, BonusStatus.REJECTED):
        matching = [b for b in bonuses if b.status == state]
        summary[f"{state.value}Bonuses"] = len(matching)
        if state != BonusStatus.REJECTED:
            summary[f"{state.value}Amount"] = sum(b.amount for b in matching)
    return summary


@router.get("/bonuses")
async def get_worker_bonuses(
    worker_id: Optional[int] = Query(None, alias="workerId"),
    status_filter: Optional[BonusStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    """
    A washer's bonuses with totals per status.
    """
    if worker_id is None:
        raise bad_request("Worker ID is required")

    result = await db.execute(
        select(User).where(User.id == worker_id, User.role == UserRole.CAR_WASHER)
    )
    worker = result.scalar_one_or_none()
    if not worker:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Worker not found"
        )

    query = select(Bonus).where(Bonus.type == BonusType.WASHER, Bonus.recipient_id == worker_id)
    if status_filter:
        query = query.where(Bonus.status == status_filter)
    result = await db.execute(query.order_by(Bonus.created_at.desc()))
    bonuses = result.scalars().all()

    return {
        "success": True,
        "worker": {"id": worker.id, "name": worker.name, "email": worker.email},
        "bonuses": [
            BonusSchema.model_validate(b).model_copy(update={
                "recipient_name": worker.name,
                "recipient_email": worker.email,
                "recipient_phone": worker.phone or "",
            })
            for b in bonuses
        ],
        "summary": summarize_bonuses(bonuses),
    }
