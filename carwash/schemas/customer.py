"""
Pydantic schemas for Customer and Vehicle.
"""
from pydantic import EmailStr, field_validator
from datetime import datetime
from typing import List, Optional

from carwash.schemas.base import CamelModel, ReadModel


class CustomerBase(CamelModel):
    """Base customer schema with common fields."""
    name: str
    email: Optional[EmailStr] = None
    phone: str


class CustomerCreate(CustomerBase):
    """Schema for registering a customer with their first vehicle."""
    license_plate: str
    vehicle_type: str
    vehicle_color: str
    vehicle_model: Optional[str] = None

    @field_validator("name", "phone", "license_plate", "vehicle_type", "vehicle_color")
    @classmethod
    def not_blank(cls, value: str, info) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"{info.field_name} is required")
        return value

    @field_validator("license_plate")
    @classmethod
    def upper_plate(cls, value: str) -> str:
        return value.upper()

    @field_validator("email", mode="before")
    @classmethod
    def empty_email(cls, value):
        return value or None


class CustomerUpdate(CustomerCreate):
    """Schema for replacing a customer's details and primary vehicle."""
    is_registered: Optional[bool] = None


class Vehicle(ReadModel):
    """Schema for vehicle responses."""
    id: int
    customer_id: int
    license_plate: str
    vehicle_type: str
    color: Optional[str] = None
    model: Optional[str] = None
    is_primary: bool
    created_at: datetime


class Customer(CustomerBase, ReadModel):
    """Schema for customer responses."""
    id: int
    is_registered: bool
    total_visits: int
    total_spent: float
    created_at: datetime
    updated_at: Optional[datetime] = None


class CustomerDetail(Customer):
    """Customer with totals recomputed from check-ins."""
    last_visit: Optional[datetime] = None
    vehicles: List[Vehicle] = []
