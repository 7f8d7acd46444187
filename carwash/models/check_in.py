"""
Check-in (one vehicle visit) and the services rendered on it.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from carwash.database import Base
from carwash.utils import utcnow
import enum


class CheckInStatus(str, enum.Enum):
    """Check-in status enumeration."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAID = "paid"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    POS = "pos"
    MOBILE_MONEY = "mobile_money"


class WashType(str, enum.Enum):
    INSTANT = "instant"
    DELAYED = "delayed"


# Statuses that count as a finished visit for totals and milestones
VISIT_STATUSES = (CheckInStatus.COMPLETED, CheckInStatus.PAID)


class CheckIn(Base):
    """Check-in database model."""

    __tablename__ = "car_check_ins"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="SET NULL"), nullable=True)
    license_plate = Column(String, nullable=False, index=True)
    vehicle_type = Column(String, nullable=False)
    vehicle_color = Column(String, nullable=True)
    wash_type = Column(SQLEnum(WashType), default=WashType.INSTANT, nullable=False)
    assigned_washer_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    status = Column(SQLEnum(CheckInStatus), default=CheckInStatus.PENDING, nullable=False)
    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    payment_method = Column(SQLEnum(PaymentMethod), nullable=True)
    total_amount = Column(Float, default=0.0, nullable=False)
    washer_income = Column(Float, default=0.0, nullable=False)
    company_income = Column(Float, default=0.0, nullable=False)
    passcode = Column(String, nullable=True)
    remarks = Column(String, nullable=True)
    check_in_time = Column(DateTime(timezone=True), default=utcnow)
    actual_completion_time = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    services = relationship("CheckInService", back_populates="check_in", cascade="all, delete-orphan")


class CheckInService(Base):
    """A catalog service as rendered on one check-in, with its price at the time."""

    __tablename__ = "check_in_services"

    id = Column(Integer, primary_key=True, index=True)
    check_in_id = Column(Integer, ForeignKey("car_check_ins.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="SET NULL"), nullable=True)
    service_name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    duration = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    check_in = relationship("CheckIn", back_populates="services")
