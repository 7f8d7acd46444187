"""
Admin account routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.orm import selectinload
from typing import Optional

from carwash.core.staff import hash_password, permissions_for_role
from carwash.database import get_db
from carwash.models.user import AdminProfile, User, UserRole
from carwash.routers.common import bad_request, like
from carwash.schemas.user import Admin, AdminCreate, AdminUpdate

router = APIRouter(prefix="/admin/admins", tags=["admins"])

ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPER_ADMIN)


def serialize_admin(user: User) -> Admin:
    profile = user.admin_profile
    return Admin(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        role=user.role,
        address=user.address,
        location=user.location,
        is_active=user.is_active,
        permissions=profile.permissions if profile else permissions_for_role(user.role.value),
        next_of_kin=profile.next_of_kin if profile else [],
        created_at=user.created_at,
    )


async def _load_admin(db: AsyncSession, admin_id: int) -> User:
    result = await db.execute(
        select(User)
        .options(selectinload(User.admin_profile))
        .where(User.id == admin_id, User.role.in_(ADMIN_ROLES))
    )
    admin = result.scalar_one_or_none()
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin not found"
        )
    return admin


@router.get("")
async def get_admins(
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    List admins and super admins.
    """
    query = select(User).options(selectinload(User.admin_profile)).where(User.role.in_(ADMIN_ROLES))
    if role in ADMIN_ROLES:
        query = query.where(User.role == role)
    pattern = like(search)
    if pattern:
        query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    result = await db.execute(query.order_by(User.created_at.desc()))
    return {"success": True, "admins": [serialize_admin(u) for u in result.scalars().all()]}


@router.get("/{admin_id}")
async def get_admin(admin_id: int, db: AsyncSession = Depends(get_db)):
    admin = await _load_admin(db, admin_id)
    return {"success": True, "admin": serialize_admin(admin)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_admin(payload: AdminCreate, db: AsyncSession = Depends(get_db)):
    """
    Create an admin account. Permissions follow the role.
    """
    result = await db.execute(select(User).where(User.email == payload.email))
    if result.scalar_one_or_none():
        raise bad_request("A user with this email already exists")

    user = User(
        name=payload.name.strip(),
        email=payload.email,
        phone=payload.phone.strip(),
        role=UserRole(payload.role),
        password_hash=hash_password(payload.password),
        address=payload.address,
        location=payload.location,
        is_active=True,
        admin_profile=AdminProfile(
            permissions=permissions_for_role(payload.role),
            next_of_kin=[kin.model_dump() for kin in payload.next_of_kin],
            created_by=payload.created_by,
        ),
    )
    db.add(user)
    await db.commit()

    return {"success": True, "message": "Admin created successfully", "admin": serialize_admin(user)}


@router.put("/{admin_id}")
async def update_admin(admin_id: int, payload: AdminUpdate, db: AsyncSession = Depends(get_db)):
    """
    Update an admin's details. Changing the role resets permissions to the role's set.
    """
    admin = await _load_admin(db, admin_id)

    admin.name = payload.name.strip()
    admin.phone = payload.phone.strip()
    if payload.address is not None:
        admin.address = payload.address
    if payload.location is not None:
        admin.location = payload.location
    if payload.is_active is not None:
        admin.is_active = payload.is_active

    if admin.admin_profile is None:
        admin.admin_profile = AdminProfile(permissions=permissions_for_role(admin.role.value), next_of_kin=[])
    if payload.role is not None and payload.role != admin.role.value:
        admin.role = UserRole(payload.role)
        admin.admin_profile.permissions = permissions_for_role(payload.role)
    if payload.next_of_kin is not None:
        admin.admin_profile.next_of_kin = [kin.model_dump() for kin in payload.next_of_kin]

    await db.commit()
    return {"success": True, "message": "Admin updated successfully", "admin": serialize_admin(admin)}


@router.delete("/{admin_id}")
async def deactivate_admin(admin_id: int, db: AsyncSession = Depends(get_db)):
    """
    Deactivate an admin account.
    """
    admin = await _load_admin(db, admin_id)
    admin.is_active = False
    await db.commit()
    return {"success": True, "message": "Admin deactivated successfully"}
