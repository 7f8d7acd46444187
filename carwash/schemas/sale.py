"""
Pydantic schemas for stock sales.
"""
from pydantic import Field
from datetime import datetime
from typing import List, Optional

from carwash.models.check_in import PaymentMethod
from carwash.models.sale import SaleStatus
from carwash.schemas.base import CamelModel, ReadModel


class SaleItemCreate(CamelModel):
    inventory_id: int
    quantity: int = Field(gt=0)
    unit_price: Optional[float] = Field(default=None, gt=0)


class SaleCreate(CamelModel):
    """Schema for recording a sale."""
    admin_id: int
    customer_name: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    items: List[SaleItemCreate] = Field(min_length=1)
    total_amount: Optional[float] = Field(default=None, gt=0)
    remarks: Optional[str] = None


class SaleItem(ReadModel):
    id: int
    inventory_id: Optional[int] = None
    item_name: str
    quantity: int
    unit_price: float
    total_price: float


class Sale(ReadModel):
    """Schema for sale responses."""
    id: int
    admin_id: int
    customer_name: Optional[str] = None
    payment_method: PaymentMethod
    total_amount: float
    status: SaleStatus
    remarks: Optional[str] = None
    created_at: datetime
    items: List[SaleItem] = []
