"""
Washer payment request routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from carwash.core.deductions import calculate_deductions
from carwash.database import get_db
from carwash.models.payment_request import PaymentRequest, PaymentRequestStatus
from carwash.models.user import User, WasherProfile
from carwash.routers.common import bad_request, like
from carwash.routers.materials import unreturned_tools
from carwash.schemas.payment_request import (
    PaymentRequest as PaymentRequestSchema,
    PaymentRequestCreate,
    PaymentRequestUpdate,
)
from carwash.utils import utcnow

router = APIRouter(prefix="/admin/payment-requests", tags=["payment-requests"])

# Advances are only available to washers who have earned little so far
ADVANCE_LIMIT = 2000.0


def _serialize(row) -> PaymentRequestSchema:
    payment_request, washer_name = row
    return PaymentRequestSchema.model_validate(payment_request).model_copy(update={"washer_name": washer_name})


async def _load(db: AsyncSession, request_id: int):
    result = await db.execute(
        select(PaymentRequest, User.name)
        .join(User, User.id == PaymentRequest.washer_id)
        .where(PaymentRequest.id == request_id)
    )
    row = result.first()
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment request not found"
        )
    return row


@router.get("")
async def get_payment_requests(
    washer_id: Optional[int] = Query(None, alias="washerId"),
    status_filter: Optional[PaymentRequestStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    List payment requests with the washer's name.
    """
    query = select(PaymentRequest, User.name).join(User, User.id == PaymentRequest.washer_id)
    if washer_id is not None:
        query = query.where(PaymentRequest.washer_id == washer_id)
    if status_filter:
        query = query.where(PaymentRequest.status == status_filter)
    pattern = like(search)
    if pattern:
        query = query.where(User.name.ilike(pattern))
    result = await db.execute(query.order_by(PaymentRequest.created_at.desc(), PaymentRequest.id.desc()))
    return {"success": True, "paymentRequests": [_serialize(row) for row in result.all()]}


@router.get("/{request_id}")
async def get_payment_request(request_id: int, db: AsyncSession = Depends(get_db)):
    return {"success": True, "paymentRequest": _serialize(await _load(db, request_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_payment_request(payload: PaymentRequestCreate, db: AsyncSession = Depends(get_db)):
    """
    A washer asks to be paid out of their earnings, or for an advance.
    """
    result = await db.execute(select(WasherProfile).where(WasherProfile.user_id == payload.washer_id))
    profile = result.scalar_one_or_none()
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Washer profile not found"
        )

    result = await db.execute(
        select(PaymentRequest.id).where(
            PaymentRequest.washer_id == payload.washer_id,
            PaymentRequest.status == PaymentRequestStatus.PENDING,
        )
    )
    if result.first() is not None:
        raise bad_request("You already have a pending payment request")

    data = payload.model_dump()
    if payload.material_deductions is None or payload.tool_deductions is None:
        deductions = calculate_deductions(await unreturned_tools(db, payload.washer_id))
        if payload.material_deductions is None:
            data["material_deductions"] = deductions["materialDeductions"]
        if payload.tool_deductions is None:
            data["tool_deductions"] = deductions["toolDeductions"]

    earnings = profile.total_earnings or 0.0
    if payload.is_advance:
        if earnings > ADVANCE_LIMIT:
            raise bad_request(f"Advances are only available when earnings are {ADVANCE_LIMIT:,.0f} or less")
        if payload.requested_amount > ADVANCE_LIMIT:
            raise bad_request(f"Advance amount cannot exceed {ADVANCE_LIMIT:,.0f}")
    else:
        needed = payload.requested_amount + data["material_deductions"] + data["tool_deductions"]
        if needed > earnings:
            raise bad_request(
                f"Requested amount plus deductions ({needed:,.2f}) exceeds available earnings ({earnings:,.2f})"
            )

    payment_request = PaymentRequest(
        **data,
        total_earnings=earnings,
        status=PaymentRequestStatus.PENDING,
    )
    db.add(payment_request)
    await db.commit()

    return {
        "success": True,
        "message": "Payment request submitted successfully",
        "paymentRequest": _serialize(await _load(db, payment_request.id)),
    }


@router.patch("/{request_id}")
async def review_payment_request(
    request_id: int,
    payload: PaymentRequestUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Approve, reject or pay a request.
    """
    payment_request, _ = await _load(db, request_id)
    update_data = payload.model_dump(exclude_unset=True)

    new_status = update_data.pop("status", None)
    if new_status is not None and new_status != payment_request.status:
        if payment_request.status in (PaymentRequestStatus.PAID, PaymentRequestStatus.REJECTED):
            raise bad_request(f"Cannot change a {payment_request.status.value} payment request")
        payment_request.status = new_status
        payment_request.reviewed_at = utcnow()
        if new_status == PaymentRequestStatus.PAID:
            payment_request.paid_at = utcnow()
        if new_status in (PaymentRequestStatus.APPROVED, PaymentRequestStatus.PAID) and payment_request.approved_amount is None:
            payment_request.approved_amount = update_data.get("approved_amount", payment_request.requested_amount)

    for field, value in update_data.items():
        setattr(payment_request, field, value)

    await db.commit()
    return {
        "success": True,
        "message": "Payment request updated successfully",
        "paymentRequest": _serialize(await _load(db, request_id)),
    }


@router.delete("/{request_id}")
async def delete_payment_request(request_id: int, db: AsyncSession = Depends(get_db)):
    """
    Withdraw a request that has not been reviewed yet.
    """
    payment_request, _ = await _load(db, request_id)
    if payment_request.status != PaymentRequestStatus.PENDING:
        raise bad_request("Only pending payment requests can be deleted")
    await db.delete(payment_request)
    await db.commit()
    return {"success": True, "message": "Payment request deleted successfully"}
