"""
Pydantic schemas for milestones and achievements.
"""
from pydantic import Field, field_validator
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from carwash.core.conditions import validate_condition
from carwash.models.milestone import MilestoneType
from carwash.schemas.base import CamelModel, ReadModel, UpdateModel


class MilestoneReward(CamelModel):
    type: Literal["discount", "bonus", "free_service"]
    value: float = Field(gt=0)
    description: Optional[str] = None


def _check_condition(value: Dict[str, Any]) -> Dict[str, Any]:
    error = validate_condition(value)
    if error:
        raise ValueError(error)
    condition = {"operator": value["operator"], "value": float(value["value"])}
    condition["period"] = value.get("period") or "all_time"
    return condition


class MilestoneBase(CamelModel):
    """Base milestone schema with common fields."""
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: MilestoneType
    condition: Dict[str, Any]
    reward: Optional[MilestoneReward] = None
    is_active: bool = True


class MilestoneCreate(MilestoneBase):
    """Schema for creating a milestone."""
    created_by: int

    @field_validator("condition")
    @classmethod
    def check_condition(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        return _check_condition(value)


class MilestoneUpdate(UpdateModel):
    """Schema for updating a milestone."""
    nullable_fields = ("reward",)

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    type: Optional[MilestoneType] = None
    condition: Optional[Dict[str, Any]] = None
    reward: Optional[MilestoneReward] = None
    is_active: Optional[bool] = None

    @field_validator("condition")
    @classmethod
    def check_condition(cls, value: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if value is None:
            return None
        return _check_condition(value)


class Milestone(MilestoneBase, ReadModel):
    """Schema for milestone responses."""
    id: int
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class AchievementCheckRequest(CamelModel):
    """Check one customer, or every customer with ``allCustomers``."""
    customer_id: Optional[int] = None
    all_customers: bool = False
    force_check: bool = False


class QualifyingCustomersRequest(CamelModel):
    milestone_id: int


class RewardClaim(CamelModel):
    claimed_by: Optional[int] = None
    notes: Optional[str] = None


class MilestoneAchievement(ReadModel):
    """Schema for achievement responses."""
    id: int
    customer_id: int
    customer_name: Optional[str] = None
    milestone_id: int
    milestone_name: Optional[str] = None
    achieved_at: datetime
    achieved_value: float
    reward_claimed: bool
    claimed_at: Optional[datetime] = None
    claimed_by: Optional[int] = None
    notes: Optional[str] = None
