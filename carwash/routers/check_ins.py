"""
Check-in routes: vehicles arriving, being washed, paid for.
"""
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.orm import selectinload
from typing import List, Optional

from carwash.core.achievements import check_customer_milestones
from carwash.core.bonuses import BonusNotice, notify_customer_bonus
from carwash.core.commission import compute_check_in_income
from carwash.core.totals import refresh_customer_totals
from carwash.database import get_db
from carwash.errors import error_response
from carwash.models.check_in import CheckIn, CheckInService, CheckInStatus, PaymentStatus, WashType
from carwash.models.customer import Customer
from carwash.models.service import Service
from carwash.models.user import User, UserRole, WasherProfile
from carwash.models.vehicle import Vehicle
from carwash.notifications.sms import SMSClient, SMSError, get_sms_client
from carwash.routers.common import bad_request, like
from carwash.schemas.check_in import CheckIn as CheckInSchema, CheckInCreate, CheckInCreated, CheckInUpdate, KeyCodeSMS
from carwash.utils import generate_passcode, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/check-ins", tags=["check-ins"])


async def _load_check_in(db: AsyncSession, check_in_id: int) -> CheckIn:
    result = await db.execute(
        select(CheckIn).options(selectinload(CheckIn.services)).where(CheckIn.id == check_in_id)
    )
    check_in = result.scalar_one_or_none()
    if not check_in:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Check-in not found"
        )
    return check_in


async def _require_washer(db: AsyncSession, washer_id: int) -> User:
    result = await db.execute(
        select(User).where(User.id == washer_id, User.role == UserRole.CAR_WASHER)
    )
    washer = result.scalar_one_or_none()
    if washer is None:
        raise bad_request("Assigned washer not found")
    return washer


async def _resolve_customer(db: AsyncSession, payload: CheckInCreate):
    """Find or create the customer and vehicle a check-in belongs to."""
    result = await db.execute(select(Vehicle).where(Vehicle.license_plate == payload.license_plate))
    vehicle = result.scalar_one_or_none()

    if payload.customer_id is not None:
        customer = await db.get(Customer, payload.customer_id)
        if customer is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Customer not found"
            )
        if vehicle is not None and vehicle.customer_id != customer.id:
            raise bad_request("License plate is registered to another customer")
    elif vehicle is not None:
        customer = await db.get(Customer, vehicle.customer_id)
    elif payload.customer_name and payload.customer_phone:
        customer = Customer(
            name=payload.customer_name.strip(),
            phone=payload.customer_phone.strip(),
            is_registered=False,
        )
        db.add(customer)
        await db.flush()
    else:
        return None, None

    if vehicle is None and customer is not None:
        vehicle = Vehicle(
            customer_id=customer.id,
            license_plate=payload.license_plate,
            vehicle_type=payload.vehicle_type,
            color=payload.vehicle_color,
            is_primary=False,
        )
        db.add(vehicle)
        await db.flush()
    return customer, vehicle


async def _credit_washer(db: AsyncSession, check_in: CheckIn) -> None:
    result = await db.execute(
        select(WasherProfile).where(WasherProfile.user_id == check_in.assigned_washer_id)
    )
    profile = result.scalar_one_or_none()
    if profile is None:
        logger.warning("No washer profile for user %s, earnings not credited", check_in.assigned_washer_id)
        return
    profile.total_earnings = (profile.total_earnings or 0.0) + check_in.washer_income


@router.get("")
async def get_check_ins(
    search: Optional[str] = None,
    status_filter: Optional[CheckInStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    washer_id: Optional[int] = Query(None, alias="washerId"),
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """
    List check-ins, newest first.
    """
    query = (
        select(CheckIn, Customer.name)
        .outerjoin(Customer, Customer.id == CheckIn.customer_id)
        .options(selectinload(CheckIn.services))
    )
    pattern = like(search)
    if pattern:
        query = query.where(or_(
            CheckIn.license_plate.ilike(pattern),
            Customer.name.ilike(pattern),
            Customer.phone.ilike(pattern),
        ))
    if status_filter:
        query = query.where(CheckIn.status == status_filter)
    if payment_status:
        query = query.where(CheckIn.payment_status == payment_status)
    if washer_id is not None:
        query = query.where(CheckIn.assigned_washer_id == washer_id)

    result = await db.execute(query.order_by(CheckIn.check_in_time.desc()).limit(limit))
    check_ins = [
        {**CheckInSchema.model_validate(c).model_dump(by_alias=True, mode="json"), "customerName": name}
        for c, name in result.all()
    ]
    return {"success": True, "checkIns": check_ins}


@router.get("/{check_in_id}")
async def get_check_in(check_in_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a specific check-in by ID.
    """
    check_in = await _load_check_in(db, check_in_id)
    return {"success": True, "checkIn": CheckInSchema.model_validate(check_in)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_check_in(payload: CheckInCreate, db: AsyncSession = Depends(get_db)):
    """
    Check a vehicle in with the services requested.

    The check-in, its service lines and any new customer or vehicle are
    written in one transaction.
    """
    result = await db.execute(select(Service).where(Service.id.in_(payload.services)))
    services = {s.id: s for s in result.scalars().all()}
    for service_id in payload.services:
        service = services.get(service_id)
        if service is None or not service.is_active:
            raise bad_request(f"Service {service_id} not found or inactive")

    if payload.assigned_washer_id is not None:
        await _require_washer(db, payload.assigned_washer_id)

    customer, vehicle = await _resolve_customer(db, payload)

    lines: List[CheckInService] = [
        CheckInService(
            service_id=services[service_id].id,
            service_name=services[service_id].name,
            price=services[service_id].base_price,
            duration=services[service_id].estimated_duration,
        )
        for service_id in payload.services
    ]
    check_in = CheckIn(
        customer_id=customer.id if customer else None,
        vehicle_id=vehicle.id if vehicle else None,
        license_plate=payload.license_plate,
        vehicle_type=payload.vehicle_type,
        vehicle_color=payload.vehicle_color,
        wash_type=payload.wash_type,
        assigned_washer_id=payload.assigned_washer_id,
        status=CheckInStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        total_amount=sum(line.price for line in lines),
        passcode=generate_passcode(),
        remarks=payload.remarks,
        services=lines,
    )
    db.add(check_in)
    if customer is not None:
        await refresh_customer_totals(db, customer)
    await db.commit()

    return {
        "success": True,
        "message": "Vehicle checked in successfully",
        "checkIn": CheckInCreated.model_validate(check_in),
    }


@router.patch("/{check_in_id}")
async def update_check_in(
    check_in_id: int,
    update: CheckInUpdate,
    db: AsyncSession = Depends(get_db),
    sms: SMSClient = Depends(get_sms_client),
):
    """
    Move a check-in along: assign, start, complete, take payment or cancel.

    Completing computes the washer and company income. Taking payment credits
    the assigned washer. Milestones are checked for the customer afterwards;
    a failure there is logged and does not affect the update.
    """
    check_in = await _load_check_in(db, check_in_id)

    if update.assigned_washer_id is not None:
        await _require_washer(db, update.assigned_washer_id)
        check_in.assigned_washer_id = update.assigned_washer_id
    if update.remarks is not None:
        check_in.remarks = update.remarks
    if update.payment_method is not None:
        check_in.payment_method = update.payment_method

    new_status = update.status
    if new_status == CheckInStatus.COMPLETED and check_in.status != CheckInStatus.COMPLETED:
        passcode_exempt = check_in.wash_type == WashType.INSTANT or update.completed_by_washer
        if not passcode_exempt and update.passcode != check_in.passcode:
            raise bad_request("A valid passcode is required to complete this check-in")

    if new_status is not None:
        check_in.status = new_status

    # a check-in marked paid is paid, whether or not paymentStatus came with it
    payment_status = update.payment_status
    if payment_status is None and new_status == CheckInStatus.PAID:
        payment_status = PaymentStatus.PAID

    finished = check_in.status in (CheckInStatus.COMPLETED, CheckInStatus.PAID)
    newly_paid = payment_status == PaymentStatus.PAID and check_in.payment_status != PaymentStatus.PAID

    if (finished or newly_paid) and check_in.actual_completion_time is None:
        check_in.actual_completion_time = utcnow()
        check_in.washer_income, check_in.company_income = await compute_check_in_income(db, check_in.services)

    if payment_status is not None:
        check_in.payment_status = payment_status
    if newly_paid:
        check_in.paid_at = utcnow()
        if check_in.status == CheckInStatus.COMPLETED:
            check_in.status = CheckInStatus.PAID
        if check_in.assigned_washer_id is not None:
            await _credit_washer(db, check_in)

    customer = await db.get(Customer, check_in.customer_id) if check_in.customer_id else None
    if customer is not None:
        await refresh_customer_totals(db, customer)

    await db.commit()
    response = {
        "success": True,
        "message": "Check-in updated successfully",
        "checkIn": CheckInSchema.model_validate(check_in).model_dump(by_alias=True, mode="json"),
    }

    if customer is not None and check_in.status in (CheckInStatus.COMPLETED, CheckInStatus.PAID):
        try:
            check = await check_customer_milestones(db, customer)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Milestone check failed after check-in %s", check_in_id)
        else:
            response["newAchievements"] = len(check.new_achievements)
            for notice in [BonusNotice.capture(customer, bonus) for bonus in check.bonuses]:
                await run_in_threadpool(notify_customer_bonus, sms, notice)

    return response


def key_code_sms_text(customer_name: str, key_code: str) -> str:
    return (
        f"Hi {customer_name}! Your car wash key code is: {key_code}. "
        "Please keep this code safe and present it when picking up your vehicle."
    )


@router.post("/{check_in_id}/send-sms")
async def send_key_code_sms(
    check_in_id: int,
    payload: KeyCodeSMS,
    admin_id: Optional[int] = Header(None, alias="X-Admin-ID"),
    db: AsyncSession = Depends(get_db),
    sms: SMSClient = Depends(get_sms_client),
):
    """
    Text the customer the key code they need to collect their vehicle.
    """
    if admin_id is None:
        raise bad_request("Admin ID not provided in headers")
    admin = await db.get(User, admin_id)
    if admin is None or not admin.is_admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin user not found"
        )
    if not (payload.phone_number or "").strip():
        raise bad_request("Phone number is required")

    check_in = await _load_check_in(db, check_in_id)
    if not check_in.passcode:
        raise bad_request("No key code available for this check-in")
    customer = await db.get(Customer, check_in.customer_id) if check_in.customer_id else None
    message = key_code_sms_text(customer.name if customer else "Customer", check_in.passcode)

    try:
        await run_in_threadpool(sms.send, payload.phone_number.strip(), message)
    except SMSError:
        logger.exception("Failed to send key code SMS for check-in %s", check_in_id)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to send SMS via Kudisms. Please check your Kudisms account configuration and balance.",
            errorCode="SMS_SEND_FAILED",
        )

    logger.info("Admin %s sent the key code for check-in %s", admin_id, check_in_id)
    return {"success": True, "message": "Key code sent successfully via SMS"}
