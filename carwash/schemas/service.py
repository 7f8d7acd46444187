"""
Pydantic schemas for Service.
"""
from pydantic import Field, field_validator, model_validator
from datetime import datetime
from typing import Optional

from carwash.core.commission import validate_commission
from carwash.models.service import ServiceCategory
from carwash.schemas.base import CamelModel, ReadModel, UpdateModel


class ServiceBase(CamelModel):
    """Base service schema with common fields."""
    name: str
    description: Optional[str] = None
    category: ServiceCategory
    base_price: float = Field(default=0.0, ge=0)
    estimated_duration: int
    washer_commission_percentage: float = 40.0
    company_commission_percentage: float = 60.0
    max_washers_per_service: int = 2
    commission_notes: Optional[str] = None
    is_active: bool = True


class ServiceCreate(ServiceBase):
    """Schema for creating a service."""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Service name is required")
        return value

    @model_validator(mode="after")
    def check_rules(self):
        if self.estimated_duration <= 0:
            raise ValueError("Duration must be greater than 0")
        if self.max_washers_per_service < 1:
            raise ValueError("Max washers per service must be at least 1")
        error = validate_commission(self.washer_commission_percentage, self.company_commission_percentage)
        if error:
            raise ValueError(error)
        return self


class ServiceUpdate(UpdateModel):
    """Schema for updating a service."""
    nullable_fields = ("description", "commission_notes")

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[ServiceCategory] = None
    base_price: Optional[float] = Field(default=None, ge=0)
    estimated_duration: Optional[int] = Field(default=None, gt=0)
    washer_commission_percentage: Optional[float] = None
    company_commission_percentage: Optional[float] = None
    max_washers_per_service: Optional[int] = Field(default=None, ge=1)
    commission_notes: Optional[str] = None
    is_active: Optional[bool] = None


class Service(ServiceBase, ReadModel):
    """Schema for service responses."""
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
