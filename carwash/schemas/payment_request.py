"""
Pydantic schemas for washer payment requests.
"""
from pydantic import Field
from datetime import datetime
from typing import Optional

from carwash.models.check_in import PaymentMethod
from carwash.models.payment_request import PaymentRequestStatus
from carwash.schemas.base import CamelModel, ReadModel, UpdateModel


class PaymentRequestCreate(CamelModel):
    """Schema for a washer asking to be paid."""
    washer_id: int
    requested_amount: float = Field(gt=0)
    # left out, these are worked out from the tools the washer has not returned
    material_deductions: Optional[float] = Field(default=None, ge=0)
    tool_deductions: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None
    is_advance: bool = False


class PaymentRequestUpdate(UpdateModel):
    """Schema for reviewing a payment request."""
    nullable_fields = ("admin_notes", "approved_amount", "payment_method", "payment_reference", "reviewed_by")

    status: Optional[PaymentRequestStatus] = None
    admin_notes: Optional[str] = None
    approved_amount: Optional[float] = Field(default=None, ge=0)
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None
    reviewed_by: Optional[int] = None


class PaymentRequest(ReadModel):
    """Schema for payment request responses."""
    id: int
    washer_id: int
    washer_name: Optional[str] = None
    requested_amount: float
    material_deductions: float
    tool_deductions: float
    total_earnings: float
    is_advance: bool
    status: PaymentRequestStatus
    notes: Optional[str] = None
    admin_notes: Optional[str] = None
    approved_amount: Optional[float] = None
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
