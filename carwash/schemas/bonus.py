"""
Pydantic schemas for Bonus.
"""
from pydantic import Field, field_validator
from datetime import datetime
from typing import Literal, Optional

from carwash.models.bonus import BonusStatus, BonusType, RewardType
from carwash.schemas.base import CamelModel, ReadModel


class BonusCreate(CamelModel):
    """Schema for issuing a bonus."""
    type: BonusType
    recipient_id: int
    amount: float = Field(gt=0)
    reason: str
    milestone: Optional[str] = None
    reward_type: RewardType = RewardType.CASH
    item_id: Optional[int] = None
    quantity: int = Field(default=1, gt=0)

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Reason is required")
        return value


class BonusAction(CamelModel):
    """Schema for moving a bonus through its lifecycle."""
    action: Literal["approve", "pay", "reject", "cancel"]
    approved_by: Optional[int] = None


class Bonus(ReadModel):
    """Schema for bonus responses."""
    id: int
    type: BonusType
    recipient_id: int
    recipient_name: str = "Unknown"
    recipient_email: str = ""
    recipient_phone: str = ""
    amount: float
    reason: str
    milestone: Optional[str] = None
    reward_type: RewardType
    item_id: Optional[int] = None
    quantity: Optional[int] = None
    status: BonusStatus
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
