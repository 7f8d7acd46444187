"""
Milestone and achievement models.
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint, Enum as SQLEnum
from carwash.database import Base
from carwash.utils import utcnow
import enum


class MilestoneType(str, enum.Enum):
    """What a milestone condition is measured against."""
    VISITS = "visits"
    SPENDING = "spending"


class Milestone(Base):
    """Milestone database model."""

    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False)
    type = Column(SQLEnum(MilestoneType), nullable=False)
    # {"operator": ">=", "value": 5, "period": "all_time"}
    condition = Column(JSON, nullable=False)
    # {"type": "bonus", "value": 500, "description": "..."} or null
    reward = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class MilestoneAchievement(Base):
    """A customer reaching a milestone."""

    __tablename__ = "customer_milestone_achievements"
    __table_args__ = (
        UniqueConstraint("customer_id", "milestone_id", name="uq_achievement_customer_milestone"),
    )

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    milestone_id = Column(Integer, ForeignKey("milestones.id", ondelete="CASCADE"), nullable=False, index=True)
    achieved_at = Column(DateTime(timezone=True), default=utcnow)
    achieved_value = Column(Float, nullable=False)
    reward_claimed = Column(Boolean, default=False, nullable=False)
    claimed_at = Column(DateTime(timezone=True), nullable=True)
    claimed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    notes = Column(String, nullable=True)
