"""
Inventory routes.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from datetime import datetime, timezone
from typing import Optional

from carwash.core.stock import StockStatus, stock_status
from carwash.database import get_db
from carwash.models.inventory import InventoryItem
from carwash.routers.common import bad_request, get_object_or_404, like
from carwash.schemas.inventory import InventoryItem as InventoryItemSchema, InventoryItemCreate, InventoryItemUpdate
from carwash.utils import as_utc

router = APIRouter(prefix="/admin/inventory", tags=["inventory"])

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SORT_KEYS = {
    "name": lambda item: item.name.lower(),
    "currentStock": lambda item: item.current_stock,
    "totalValue": lambda item: item.current_stock * item.cost_per_unit,
    "lastUpdated": lambda item: as_utc(item.last_updated) or EPOCH,
}


@router.get("")
async def get_inventory(
    search: Optional[str] = None,
    category: Optional[str] = None,
    status_filter: Optional[StockStatus] = Query(None, alias="status"),
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
):
    """
    List inventory items with their stock status and total value.
    """
    query = select(InventoryItem)
    pattern = like(search)
    if pattern:
        query = query.where(or_(
            InventoryItem.name.ilike(pattern),
            InventoryItem.supplier.ilike(pattern),
        ))
    if category and category != "all":
        query = query.where(InventoryItem.category == category)

    result = await db.execute(query)
    items = list(result.scalars().all())
    if status_filter:
        items = [i for i in items if stock_status(i.current_stock, i.min_stock_level) == status_filter]
    items.sort(key=SORT_KEYS.get(sort_by, SORT_KEYS["name"]), reverse=sort_order == "desc")

    schemas = [InventoryItemSchema.model_validate(i) for i in items]
    return {
        "success": True,
        "items": schemas,
        "summary": {
            "totalItems": len(schemas),
            "totalValue": sum(s.total_value for s in schemas),
            "lowStockItems": sum(1 for s in schemas if s.status == StockStatus.LOW),
        },
    }


@router.get("/{item_id}")
async def get_inventory_item(item_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a specific inventory item by ID.
    """
    item = await get_object_or_404(db, InventoryItem, item_id, "Inventory item")
    return {"success": True, "item": InventoryItemSchema.model_validate(item)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_inventory_item(item: InventoryItemCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a new inventory item.
    """
    db_item = InventoryItem(**item.model_dump())
    db_item.name = db_item.name.strip()
    db.add(db_item)
    await db.commit()
    await db.refresh(db_item)

    return {
        "success": True,
        "message": "Inventory item created successfully",
        "item": InventoryItemSchema.model_validate(db_item),
    }


@router.patch("/{item_id}")
async def update_inventory_item(
    item_id: int,
    item_update: InventoryItemUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update an inventory item.
    """
    db_item = await get_object_or_404(db, InventoryItem, item_id, "Inventory item")

    update_data = item_update.model_dump(exclude_unset=True)
    min_level = update_data.get("min_stock_level", db_item.min_stock_level)
    max_level = update_data.get("max_stock_level", db_item.max_stock_level)
    if min_level >= max_level:
        raise bad_request("Minimum stock level must be less than maximum stock level")

    for field, value in update_data.items():
        setattr(db_item, field, value)

    await db.commit()
    await db.refresh(db_item)

    return {
        "success": True,
        "message": "Inventory item updated successfully",
        "item": InventoryItemSchema.model_validate(db_item),
    }


@router.delete("/{item_id}")
async def delete_inventory_item(item_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete an inventory item.
    """
    db_item = await get_object_or_404(db, InventoryItem, item_id, "Inventory item")
    await db.delete(db_item)
    await db.commit()
    return {"success": True, "message": "Inventory item deleted successfully"}
