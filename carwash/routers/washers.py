"""
Car washer account routes.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.orm import selectinload
from typing import Optional

from carwash.config import get_settings
from carwash.core.staff import hash_password, washer_status
from carwash.database import get_db
from carwash.models.user import User, UserRole, WasherProfile
from carwash.notifications.email import EmailClient, get_email_client
from carwash.routers.common import bad_request, like
from carwash.schemas.user import Washer, WasherCreate, WasherUpdate
from carwash.utils import generate_temp_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/washers", tags=["washers"])

PROFILE_FIELDS = ("hourly_rate", "is_available", "assigned_admin_id")


def serialize_washer(user: User) -> Washer:
    profile = user.washer_profile
    is_available = profile.is_available if profile else False
    return Washer(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        hourly_rate=profile.hourly_rate if profile else 0.0,
        total_earnings=profile.total_earnings if profile else 0.0,
        is_available=is_available,
        is_active=user.is_active,
        status=washer_status(user.is_active, is_available),
        assigned_admin_id=profile.assigned_admin_id if profile else None,
        created_at=user.created_at,
    )


async def _load_washer(db: AsyncSession, washer_id: int) -> User:
    result = await db.execute(
        select(User)
        .options(selectinload(User.washer_profile))
        .where(User.id == washer_id, User.role == UserRole.CAR_WASHER)
    )
    washer = result.scalar_one_or_none()
    if not washer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Washer not found"
        )
    return washer


@router.get("")
async def get_washers(
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(active|inactive|on_leave)$"),
    db: AsyncSession = Depends(get_db),
):
    """
    List car washers with their earnings and availability.
    """
    query = (
        select(User)
        .options(selectinload(User.washer_profile))
        .where(User.role == UserRole.CAR_WASHER)
    )
    pattern = like(search)
    if pattern:
        query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern), User.phone.ilike(pattern)))

    result = await db.execute(query.order_by(User.name))
    washers = [serialize_washer(u) for u in result.scalars().all()]
    if status_filter:
        washers = [w for w in washers if w.status == status_filter]
    return {"success": True, "washers": washers}


@router.get("/{washer_id}")
async def get_washer(washer_id: int, db: AsyncSession = Depends(get_db)):
    washer = await _load_washer(db, washer_id)
    return {"success": True, "washer": serialize_washer(washer)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_washer(
    payload: WasherCreate,
    db: AsyncSession = Depends(get_db),
    mailer: EmailClient = Depends(get_email_client),
):
    """
    Create a washer account with a temporary password and email it to them.

    When the email cannot be sent the temporary password is returned so an
    admin can pass it on.
    """
    result = await db.execute(select(User).where(User.email == payload.email))
    if result.scalar_one_or_none():
        raise bad_request("A user with this email already exists")

    temp_password = generate_temp_password()
    user = User(
        name=payload.name.strip(),
        email=payload.email,
        phone=payload.phone.strip(),
        role=UserRole.CAR_WASHER,
        password_hash=hash_password(temp_password),
        is_active=True,
        washer_profile=WasherProfile(
            hourly_rate=payload.hourly_rate,
            total_earnings=0.0,
            is_available=True,
            assigned_admin_id=payload.created_by,
        ),
    )
    db.add(user)
    await db.commit()

    settings = get_settings()
    try:
        await run_in_threadpool(
            mailer.send_credentials, user.email, user.name, temp_password, settings.frontend_url
        )
        email_sent = True
    except Exception:
        logger.exception("Failed to email credentials to washer %s", user.id)
        email_sent = False

    response = {
        "success": True,
        "message": "Car washer created successfully",
        "washer": serialize_washer(user),
        "emailSent": email_sent,
    }
    if not email_sent:
        response["temporaryPassword"] = temp_password
    return response


@router.patch("/{washer_id}")
async def update_washer(
    washer_id: int,
    payload: WasherUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a washer's account and profile.
    """
    washer = await _load_washer(db, washer_id)
    update_data = payload.model_dump(exclude_unset=True)

    if "email" in update_data and update_data["email"] != washer.email:
        result = await db.execute(select(User).where(User.email == update_data["email"], User.id != washer_id))
        if result.scalar_one_or_none():
            raise bad_request("A user with this email already exists")

    if washer.washer_profile is None:
        washer.washer_profile = WasherProfile(total_earnings=0.0)
    for field, value in update_data.items():
        target = washer.washer_profile if field in PROFILE_FIELDS else washer
        setattr(target, field, value)

    await db.commit()
    return {"success": True, "message": "Washer updated successfully", "washer": serialize_washer(washer)}


@router.delete("/{washer_id}")
async def deactivate_washer(washer_id: int, db: AsyncSession = Depends(get_db)):
    """
    Deactivate a washer. Their history is kept.
    """
    washer = await _load_washer(db, washer_id)
    washer.is_active = False
    if washer.washer_profile is not None:
        washer.washer_profile.is_available = False
    await db.commit()
    return {"success": True, "message": "Washer deactivated successfully"}
