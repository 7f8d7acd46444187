"""
Pydantic schemas for washer materials and check-in material usage.
"""
from pydantic import Field
from datetime import datetime
from typing import List, Optional

from carwash.schemas.base import CamelModel, ReadModel


class WasherMaterialAssign(CamelModel):
    """Schema for issuing a material to a washer."""
    washer_id: int
    material_name: str = Field(min_length=1)
    material_type: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str = Field(min_length=1)
    notes: Optional[str] = None


class WasherMaterialQuantity(CamelModel):
    quantity: Optional[float] = None


class WasherMaterial(ReadModel):
    """Schema for washer material responses."""
    id: int
    washer_id: int
    material_name: str
    material_type: str
    quantity: float
    unit: str
    returned_quantity: float
    is_returned: bool
    assigned_date: datetime
    notes: Optional[str] = None


class MaterialUse(CamelModel):
    material_id: int
    material_name: str
    quantity_used: int = Field(gt=0)


class CheckInMaterialsAssign(CamelModel):
    """Schema for recording the materials a washer used on a check-in."""
    check_in_id: int
    washer_id: int
    materials: List[MaterialUse] = Field(min_length=1)


class CheckInMaterial(ReadModel):
    id: int
    check_in_id: int
    washer_id: int
    material_id: Optional[int] = None
    material_name: str
    quantity_used: int
    usage_date: datetime
