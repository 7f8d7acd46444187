"""
Pydantic schemas for CheckIn.
"""
from pydantic import Field, field_validator
from datetime import datetime
from typing import List, Optional

from carwash.models.check_in import CheckInStatus, PaymentMethod, PaymentStatus, WashType
from carwash.schemas.base import CamelModel, ReadModel


class CheckInCreate(CamelModel):
    """Schema for checking a vehicle in."""
    license_plate: str
    vehicle_type: str
    vehicle_color: Optional[str] = None
    wash_type: WashType
    services: List[int] = Field(min_length=1)
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    assigned_washer_id: Optional[int] = None
    remarks: Optional[str] = None

    @field_validator("license_plate")
    @classmethod
    def upper_plate(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("License plate is required")
        return value


class CheckInUpdate(CamelModel):
    """Schema for moving a check-in along."""
    status: Optional[CheckInStatus] = None
    payment_status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None
    assigned_washer_id: Optional[int] = None
    passcode: Optional[str] = None
    completed_by_washer: bool = False
    remarks: Optional[str] = None


class CheckInServiceLine(ReadModel):
    id: int
    service_id: Optional[int] = None
    service_name: str
    price: float
    duration: Optional[int] = None


class CheckIn(ReadModel):
    """Schema for check-in responses."""
    id: int
    customer_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    license_plate: str
    vehicle_type: str
    vehicle_color: Optional[str] = None
    wash_type: WashType
    assigned_washer_id: Optional[int] = None
    status: CheckInStatus
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    total_amount: float
    washer_income: float
    company_income: float
    remarks: Optional[str] = None
    check_in_time: datetime
    actual_completion_time: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    services: List[CheckInServiceLine] = []


class CheckInCreated(CheckIn):
    """Returned once at creation so the passcode can be handed to the customer."""
    passcode: Optional[str] = None


class KeyCodeSMS(CamelModel):
    """Schema for texting a customer their key code."""
    phone_number: Optional[str] = None
