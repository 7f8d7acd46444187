"""
Pydantic schemas for inventory items.
"""
from pydantic import Field, computed_field, model_validator
from datetime import datetime
from typing import Optional

from carwash.core.stock import StockStatus, stock_status
from carwash.schemas.base import CamelModel, ReadModel, UpdateModel


class InventoryItemBase(CamelModel):
    """Base inventory schema with common fields."""
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    current_stock: int = Field(ge=0)
    min_stock_level: int = Field(ge=0)
    max_stock_level: int = Field(ge=0)
    unit: str = "pcs"
    cost_per_unit: float = Field(gt=0)
    supplier: Optional[str] = None


class InventoryItemCreate(InventoryItemBase):
    """Schema for creating an inventory item."""

    @model_validator(mode="after")
    def check_levels(self):
        if self.min_stock_level >= self.max_stock_level:
            raise ValueError("Minimum stock level must be less than maximum stock level")
        return self


class InventoryItemUpdate(UpdateModel):
    """Schema for updating an inventory item."""
    nullable_fields = ("supplier",)

    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    current_stock: Optional[int] = Field(default=None, ge=0)
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    max_stock_level: Optional[int] = Field(default=None, ge=0)
    unit: Optional[str] = None
    cost_per_unit: Optional[float] = Field(default=None, gt=0)
    supplier: Optional[str] = None


class InventoryItem(InventoryItemBase, ReadModel):
    """Schema for inventory responses."""
    id: int
    last_updated: Optional[datetime] = None

    @computed_field(alias="status")
    @property
    def status(self) -> StockStatus:
        return stock_status(self.current_stock, self.min_stock_level)

    @computed_field(alias="totalValue")
    @property
    def total_value(self) -> float:
        return self.current_stock * self.cost_per_unit
