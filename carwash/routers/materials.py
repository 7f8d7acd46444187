"""
Material routes: consumables issued to washers, materials used on check-ins
and the payout deductions for what a washer still holds.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from carwash.core.deductions import calculate_deductions, outstanding_value
from carwash.database import get_db
from carwash.models.check_in import CheckIn
from carwash.models.material import CheckInMaterial, WasherMaterial
from carwash.models.tool import WasherTool
from carwash.routers.common import bad_request, get_object_or_404
from carwash.routers.tools import require_worker
from carwash.schemas.material import (
    CheckInMaterial as CheckInMaterialSchema,
    CheckInMaterialsAssign,
    WasherMaterial as WasherMaterialSchema,
    WasherMaterialAssign,
    WasherMaterialQuantity,
)

washer_materials_router = APIRouter(prefix="/admin/washer-materials", tags=["materials"])
check_in_materials_router = APIRouter(prefix="/admin/check-ins/assign-materials", tags=["materials"])
deductions_router = APIRouter(prefix="/admin/calculate-deductions", tags=["materials"])


async def unreturned_tools(db: AsyncSession, washer_id: int):
    result = await db.execute(
        select(WasherTool)
        .where(WasherTool.washer_id == washer_id, WasherTool.is_returned.is_(False))
        .order_by(WasherTool.id)
    )
    return result.scalars().all()


# Washer materials

@washer_materials_router.get("")
async def get_washer_materials(
    washer_id: Optional[int] = Query(None, alias="washerId"),
    material_type: Optional[str] = Query(None, alias="materialType"),
    is_returned: Optional[bool] = Query(None, alias="isReturned"),
    db: AsyncSession = Depends(get_db),
):
    query = select(WasherMaterial)
    if washer_id is not None:
        query = query.where(WasherMaterial.washer_id == washer_id)
    if material_type:
        query = query.where(WasherMaterial.material_type == material_type)
    if is_returned is not None:
        query = query.where(WasherMaterial.is_returned.is_(is_returned))
    result = await db.execute(query.order_by(WasherMaterial.assigned_date.desc(), WasherMaterial.id.desc()))
    return {
        "success": True,
        "materials": [WasherMaterialSchema.model_validate(m) for m in result.scalars().all()],
    }


@washer_materials_router.post("", status_code=status.HTTP_201_CREATED)
async def assign_washer_material(payload: WasherMaterialAssign, db: AsyncSession = Depends(get_db)):
    await require_worker(db, payload.washer_id)
    material = WasherMaterial(**payload.model_dump(), returned_quantity=0.0, is_returned=False)
    db.add(material)
    await db.commit()
    await db.refresh(material)
    return {
        "success": True,
        "message": "Washer material assigned successfully",
        "material": WasherMaterialSchema.model_validate(material),
    }


@washer_materials_router.patch("/{material_id}")
async def update_washer_material(
    material_id: int,
    payload: WasherMaterialQuantity,
    db: AsyncSession = Depends(get_db),
):
    """
    Set the quantity a washer still holds.
    """
    if payload.quantity is None or payload.quantity < 0:
        raise bad_request("Quantity must be a non-negative number")
    material = await get_object_or_404(db, WasherMaterial, material_id, "Washer material")
    material.quantity = payload.quantity
    await db.commit()
    await db.refresh(material)
    return {
        "success": True,
        "message": "Washer material updated successfully",
        "material": WasherMaterialSchema.model_validate(material),
    }


# Materials used on a check-in

@check_in_materials_router.get("")
async def get_check_in_materials(
    check_in_id: Optional[int] = Query(None, alias="checkInId"),
    washer_id: Optional[int] = Query(None, alias="washerId"),
    db: AsyncSession = Depends(get_db),
):
    if check_in_id is None:
        raise bad_request("checkInId is required")
    query = select(CheckInMaterial).where(CheckInMaterial.check_in_id == check_in_id)
    if washer_id is not None:
        query = query.where(CheckInMaterial.washer_id == washer_id)
    result = await db.execute(query.order_by(CheckInMaterial.id))
    return {
        "success": True,
        "materials": [CheckInMaterialSchema.model_validate(m) for m in result.scalars().all()],
    }


@check_in_materials_router.post("", status_code=status.HTTP_201_CREATED)
async def assign_check_in_materials(payload: CheckInMaterialsAssign, db: AsyncSession = Depends(get_db)):
    """
    Record what a washer used on a check-in, drawing it from the tools and
    materials assigned to them. All lines are written or none.
    """
    result = await db.execute(
        select(CheckIn).where(
            CheckIn.id == payload.check_in_id,
            CheckIn.assigned_washer_id == payload.washer_id,
        )
    )
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Check-in not found or not assigned to this washer"
        )

    usages = []
    for line in payload.materials:
        result = await db.execute(
            select(WasherTool)
            .where(
                WasherTool.id == line.material_id,
                WasherTool.washer_id == payload.washer_id,
                WasherTool.is_returned.is_(False),
            )
            .with_for_update()
        )
        held = result.scalar_one_or_none()
        if held is None:
            raise bad_request(f"Material {line.material_name} not found in washer's assigned materials")
        if held.quantity < line.quantity_used:
            raise bad_request(
                f"Insufficient quantity for {line.material_name}. "
                f"Available: {held.quantity}, Requested: {line.quantity_used}"
            )
        held.quantity -= line.quantity_used
        usage = CheckInMaterial(
            check_in_id=payload.check_in_id,
            washer_id=payload.washer_id,
            material_id=held.id,
            material_name=line.material_name,
            quantity_used=line.quantity_used,
        )
        db.add(usage)
        usages.append(usage)

    await db.commit()
    return {
        "success": True,
        "message": "Materials assigned to check-in successfully",
        "materials": [CheckInMaterialSchema.model_validate(u) for u in usages],
    }


# Deductions

@deductions_router.get("")
async def get_deductions(
    washer_id: Optional[int] = Query(None, alias="washerId"),
    db: AsyncSession = Depends(get_db),
):
    """
    What would be deducted from a washer's payout for tools and materials
    they have not returned.
    """
    if washer_id is None:
        raise bad_request("washerId is required")
    tools = await unreturned_tools(db, washer_id)
    return {
        "success": True,
        "deductions": calculate_deductions(tools),
        "unreturnedItems": [
            {
                "id": t.id,
                "toolName": t.tool_name,
                "toolType": t.tool_type,
                "quantity": t.quantity,
                "amount": t.replacement_cost,
                "totalValue": outstanding_value(t),
            }
            for t in tools
        ],
        "hasUnreturnedTools": bool(tools),
    }
