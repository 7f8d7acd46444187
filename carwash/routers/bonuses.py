"""
Bonus routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from carwash.core.bonuses import BonusNotice, find_recipient, issue_bonus, notify_customer_bonus
from carwash.database import get_db
from carwash.models.bonus import Bonus, BonusStatus, BonusType
from carwash.notifications.sms import SMSClient, get_sms_client
from carwash.routers.common import bad_request, get_object_or_404, order_column
from carwash.schemas.bonus import Bonus as BonusSchema, BonusAction, BonusCreate
from carwash.utils import utcnow

router = APIRouter(prefix="/admin/bonuses", tags=["bonuses"])


async def serialize_bonus(db: AsyncSession, bonus: Bonus) -> BonusSchema:
    """Bonus with the recipient's contact details filled in."""
    schema = BonusSchema.model_validate(bonus)
    recipient = await find_recipient(db, bonus.type, bonus.recipient_id)
    if recipient is None:
        return schema
    return schema.model_copy(update={
        "recipient_name": recipient.name,
        "recipient_email": recipient.email or "",
        "recipient_phone": recipient.phone or "",
    })


@router.get("")
async def get_bonuses(
    type: Optional[BonusType] = None,
    status_filter: Optional[BonusStatus] = Query(None, alias="status"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
):
    """
    List bonuses with recipient details.
    """
    query = select(Bonus)
    if type:
        query = query.where(Bonus.type == type)
    if status_filter:
        query = query.where(Bonus.status == status_filter)
    result = await db.execute(query.order_by(order_column(Bonus.created_at, sort_order), Bonus.id))
    bonuses = result.scalars().all()

    return {
        "success": True,
        "bonuses": [await serialize_bonus(db, b) for b in bonuses],
    }


@router.get("/{bonus_id}")
async def get_bonus(bonus_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a specific bonus by ID.
    """
    bonus = await get_object_or_404(db, Bonus, bonus_id, "Bonus")
    return {"success": True, "bonus": await serialize_bonus(db, bonus)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_bonus(
    payload: BonusCreate,
    db: AsyncSession = Depends(get_db),
    sms: SMSClient = Depends(get_sms_client),
):
    """
    Issue a bonus. Customers are sent an SMS once the bonus is saved; a failed
    SMS leaves the bonus pending and is reported as ``smsSent: false``.
    """
    bonus = await issue_bonus(
        db,
        payload.type,
        payload.recipient_id,
        payload.amount,
        payload.reason,
        milestone=payload.milestone,
        reward_type=payload.reward_type,
        item_id=payload.item_id,
        quantity=payload.quantity,
    )
    await db.commit()

    response = {
        "success": True,
        "message": "Bonus created successfully",
        "bonus": await serialize_bonus(db, bonus),
    }
    if bonus.type == BonusType.CUSTOMER:
        customer = await find_recipient(db, bonus.type, bonus.recipient_id)
        response["smsSent"] = await run_in_threadpool(
            notify_customer_bonus, sms, BonusNotice.capture(customer, bonus)
        )
    return response


@router.patch("/{bonus_id}")
async def update_bonus(bonus_id: int, payload: BonusAction, db: AsyncSession = Depends(get_db)):
    """
    Approve, pay, reject or cancel a bonus.
    """
    bonus = await get_object_or_404(db, Bonus, bonus_id, "Bonus")

    if payload.action == "approve":
        if payload.approved_by is None:
            raise bad_request("approvedBy is required to approve a bonus")
        if bonus.status != BonusStatus.PENDING:
            raise bad_request("Only pending bonuses can be approved")
        bonus.status = BonusStatus.APPROVED
        bonus.approved_by = payload.approved_by
        bonus.approved_at = utcnow()
    elif payload.action == "pay":
        if bonus.status not in (BonusStatus.PENDING, BonusStatus.APPROVED):
            raise bad_request(f"Cannot pay a {bonus.status.value} bonus")
        bonus.status = BonusStatus.PAID
        bonus.paid_at = utcnow()
    elif payload.action == "reject":
        if bonus.status == BonusStatus.PAID:
            raise bad_request("Cannot reject a paid bonus")
        bonus.status = BonusStatus.REJECTED
    else:
        if bonus.status == BonusStatus.PAID:
            raise bad_request("Cannot cancel a paid bonus")
        bonus.status = BonusStatus.CANCELLED

    await db.commit()
    await db.refresh(bonus)

    return {
        "success": True,
        "message": f"Bonus {bonus.status.value} successfully",
        "bonus": await serialize_bonus(db, bonus),
    }


@router.delete("/{bonus_id}")
async def delete_bonus(bonus_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete a bonus that has not been paid.
    """
    bonus = await get_object_or_404(db, Bonus, bonus_id, "Bonus")
    if bonus.status == BonusStatus.PAID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete a paid bonus"
        )
    await db.delete(bonus)
    await db.commit()
    return {"success": True, "message": "Bonus deleted successfully"}
