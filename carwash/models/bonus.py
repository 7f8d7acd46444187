"""
Bonus model for database.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum as SQLEnum
from carwash.database import Base
from carwash.utils import utcnow
import enum


class BonusType(str, enum.Enum):
    """Who receives the bonus."""
    CUSTOMER = "customer"
    WASHER = "washer"


class RewardType(str, enum.Enum):
    CASH = "cash"
    ITEM = "item"


class BonusStatus(str, enum.Enum):
    """Bonus status enumeration."""
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class Bonus(Base):
    """Bonus database model."""

    __tablename__ = "bonuses"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(SQLEnum(BonusType), nullable=False, index=True)
    # customers.id or users.id depending on type
    recipient_id = Column(Integer, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    reason = Column(String, nullable=False)
    milestone = Column(String, nullable=True)
    reward_type = Column(SQLEnum(RewardType), default=RewardType.CASH, nullable=False)
    item_id = Column(Integer, ForeignKey("inventory_items.id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=True)
    status = Column(SQLEnum(BonusStatus), default=BonusStatus.PENDING, nullable=False, index=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
