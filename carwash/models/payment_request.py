"""
Washer payment request model.
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from carwash.database import Base
from carwash.models.check_in import PaymentMethod
from carwash.utils import utcnow
import enum


class PaymentRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class PaymentRequest(Base):
    """Payment request database model."""

    __tablename__ = "payment_requests"

    id = Column(Integer, primary_key=True, index=True)
    washer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    requested_amount = Column(Float, nullable=False)
    material_deductions = Column(Float, default=0.0, nullable=False)
    tool_deductions = Column(Float, default=0.0, nullable=False)
    # Earnings at the time of the request
    total_earnings = Column(Float, default=0.0, nullable=False)
    is_advance = Column(Boolean, default=False, nullable=False)
    status = Column(SQLEnum(PaymentRequestStatus), default=PaymentRequestStatus.PENDING, nullable=False, index=True)
    notes = Column(String, nullable=True)
    admin_notes = Column(String, nullable=True)
    approved_amount = Column(Float, nullable=True)
    payment_method = Column(SQLEnum(PaymentMethod), nullable=True)
    payment_reference = Column(String, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
