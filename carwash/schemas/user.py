"""
Pydantic schemas for staff: washers and admins.
"""
from pydantic import EmailStr, Field, field_validator
from datetime import datetime
from typing import List, Literal, Optional

from carwash.models.user import UserRole
from carwash.schemas.base import CamelModel, UpdateModel


class WasherCreate(CamelModel):
    """Schema for creating a car washer account."""
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    hourly_rate: float = Field(default=0.0, ge=0)
    created_by: Optional[int] = None


class WasherUpdate(UpdateModel):
    """Schema for updating a washer and their profile."""
    nullable_fields = ("phone", "assigned_admin_id")

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    is_available: Optional[bool] = None
    is_active: Optional[bool] = None
    assigned_admin_id: Optional[int] = None


class Washer(CamelModel):
    """Schema for washer responses."""
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    hourly_rate: float
    total_earnings: float
    is_available: bool
    is_active: bool
    status: Literal["active", "inactive", "on_leave"]
    assigned_admin_id: Optional[int] = None
    created_at: Optional[datetime] = None


class NextOfKin(CamelModel):
    name: str
    phone: str
    address: str

    @field_validator("name", "phone", "address")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Next of kin name, phone and address are required")
        return value


class AdminCreate(CamelModel):
    """Schema for creating an admin account."""
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    password: str
    address: Optional[str] = None
    location: Optional[str] = None
    role: Literal["admin", "super_admin"] = "admin"
    next_of_kin: List[NextOfKin] = []
    created_by: Optional[int] = None

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return value


class AdminUpdate(CamelModel):
    """Schema for replacing an admin's details."""
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    address: Optional[str] = None
    location: Optional[str] = None
    role: Optional[Literal["admin", "super_admin"]] = None
    next_of_kin: Optional[List[NextOfKin]] = None
    is_active: Optional[bool] = None


class Admin(CamelModel):
    """Schema for admin responses."""
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    address: Optional[str] = None
    location: Optional[str] = None
    is_active: bool
    permissions: List[str] = []
    next_of_kin: List[NextOfKin] = []
    created_at: Optional[datetime] = None
