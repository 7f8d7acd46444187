"""
Pydantic schemas for tools, tool assignments and tool charges.
"""
from pydantic import Field
from datetime import datetime
from typing import Optional

from carwash.models.tool import ToolChargeStatus
from carwash.schemas.base import CamelModel, ReadModel, UpdateModel


class WorkerToolCreate(CamelModel):
    name: str = Field(min_length=1)
    tool_type: str = Field(min_length=1)
    quantity: int = Field(ge=0)
    replacement_cost: float = Field(default=0.0, ge=0)


class WorkerTool(ReadModel):
    id: int
    name: str
    tool_type: str
    quantity: int
    replacement_cost: float


class WasherToolAssign(CamelModel):
    """Schema for handing a tool to a washer."""
    washer_id: int
    tool_name: str = Field(min_length=1)
    tool_type: str = Field(min_length=1)
    quantity: int = Field(default=1, gt=0)
    assigned_by: Optional[int] = None
    notes: Optional[str] = None


class WasherToolReturn(CamelModel):
    washer_tool_id: int
    is_returned: bool = True


class WasherTool(ReadModel):
    """Schema for tool assignment responses."""
    id: int
    washer_id: int
    tool_name: str
    tool_type: str
    quantity: int
    replacement_cost: float
    is_returned: bool
    assigned_by: Optional[int] = None
    assigned_date: datetime
    returned_date: Optional[datetime] = None
    notes: Optional[str] = None


class ToolChargeCreate(CamelModel):
    """Schema for charging a worker for a tool."""
    tool_name: str = Field(min_length=1)
    worker_id: int
    worker_name: Optional[str] = None
    charge_amount: float = Field(gt=0)
    reason: str = Field(min_length=1)
    replacement_cost: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class ToolChargeUpdate(UpdateModel):
    nullable_fields = ("notes",)

    status: Optional[ToolChargeStatus] = None
    charge_amount: Optional[float] = Field(default=None, gt=0)
    notes: Optional[str] = None


class ToolCharge(ReadModel):
    """Schema for tool charge responses."""
    id: int
    tool_name: str
    worker_id: int
    worker_name: Optional[str] = None
    charge_amount: float
    reason: str
    replacement_cost: Optional[float] = None
    notes: Optional[str] = None
    status: ToolChargeStatus
    created_at: datetime
