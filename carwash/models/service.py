"""
Wash service catalog model.
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Enum as SQLEnum
from carwash.database import Base
from carwash.utils import utcnow
import enum


class ServiceCategory(str, enum.Enum):
    """Service category enumeration."""
    EXTERIOR = "exterior"
    INTERIOR = "interior"
    ENGINE = "engine"
    VACUUM = "vacuum"
    COMPLEMENTARY = "complementary"


class Service(Base):
    """Service database model."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(String, nullable=True)
    category = Column(SQLEnum(ServiceCategory), nullable=False)
    base_price = Column(Float, default=0.0, nullable=False)
    estimated_duration = Column(Integer, nullable=False)
    washer_commission_percentage = Column(Float, default=40.0, nullable=False)
    company_commission_percentage = Column(Float, default=60.0, nullable=False)
    max_washers_per_service = Column(Integer, default=2, nullable=False)
    commission_notes = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
