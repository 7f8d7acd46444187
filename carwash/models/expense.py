"""
Business expenses recorded by admins.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text, Enum as SQLEnum
from carwash.database import Base
from carwash.utils import utcnow
import enum


class ExpenseType(str, enum.Enum):
    """What the money went on."""
    CHECKIN = "checkin"
    SALARY = "salary"
    EXPENSES = "expenses"
    FREE_WILL = "free_will"
    DEPOSIT_TO_BANK = "deposit_to_bank"
    OTHER = "other"


class Expense(Base):
    """Expense database model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    service_type = Column(SQLEnum(ExpenseType), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    reason = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    admin_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    check_in_id = Column(Integer, ForeignKey("car_check_ins.id", ondelete="SET NULL"), nullable=True)
    expense_date = Column(DateTime(timezone=True), default=utcnow, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
