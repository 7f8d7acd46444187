"""
Stock sale routes.
"""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import Optional

from carwash.core.stock import insufficient_stock_message
from carwash.database import get_db
from carwash.models.inventory import InventoryItem, InventoryMovement, MovementType
from carwash.models.sale import Sale, SaleItem, SaleStatus
from carwash.models.user import User
from carwash.routers.common import bad_request, end_of_day, start_of_day
from carwash.schemas.sale import Sale as SaleSchema, SaleCreate

router = APIRouter(prefix="/admin/sales", tags=["sales"])


@router.get("")
async def get_sales(
    status_filter: Optional[SaleStatus] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    """
    List sales, newest first.
    """
    query = select(Sale).options(selectinload(Sale.items))
    if status_filter:
        query = query.where(Sale.status == status_filter)
    if start_date:
        query = query.where(Sale.created_at >= start_of_day(start_date))
    if end_date:
        query = query.where(Sale.created_at <= end_of_day(end_date))

    result = await db.execute(query.order_by(Sale.created_at.desc()))
    sales = result.scalars().all()
    return {
        "success": True,
        "sales": [SaleSchema.model_validate(s) for s in sales],
        "totalRevenue": sum(s.total_amount for s in sales if s.status == SaleStatus.COMPLETED),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_sale(sale: SaleCreate, db: AsyncSession = Depends(get_db)):
    """
    Record a sale: the sale, its lines, the stock decrements and the stock
    movements are committed together.
    """
    admin = await db.get(User, sale.admin_id)
    if admin is None or not admin.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can record sales"
        )

    lines = []
    for requested in sale.items:
        result = await db.execute(
            select(InventoryItem).where(InventoryItem.id == requested.inventory_id).with_for_update()
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Inventory item {requested.inventory_id} not found"
            )
        if item.current_stock < requested.quantity:
            raise bad_request(insufficient_stock_message(item.name, item.current_stock, requested.quantity))

        unit_price = requested.unit_price if requested.unit_price is not None else item.cost_per_unit
        previous = item.current_stock
        item.current_stock = previous - requested.quantity
        lines.append((item, requested.quantity, unit_price, previous))

    total_amount = sale.total_amount
    if total_amount is None:
        total_amount = sum(quantity * unit_price for _, quantity, unit_price, _ in lines)
    if total_amount <= 0:
        raise bad_request("Total amount must be greater than 0")

    db_sale = Sale(
        admin_id=admin.id,
        customer_name=sale.customer_name,
        payment_method=sale.payment_method,
        total_amount=total_amount,
        status=SaleStatus.COMPLETED,
        remarks=sale.remarks,
        items=[
            SaleItem(
                inventory_id=item.id,
                item_name=item.name,
                quantity=quantity,
                unit_price=unit_price,
                total_price=quantity * unit_price,
            )
            for item, quantity, unit_price, _ in lines
        ],
    )
    db.add(db_sale)
    await db.flush()

    for item, quantity, _, previous in lines:
        db.add(InventoryMovement(
            item_id=item.id,
            movement_type=MovementType.OUT,
            quantity=quantity,
            previous_balance=previous,
            new_balance=item.current_stock,
            reason="Sale transaction",
            reference_id=db_sale.id,
            performed_by=admin.id,
        ))

    await db.commit()

    return {
        "success": True,
        "message": "Sale recorded successfully",
        "sale": SaleSchema.model_validate(db_sale),
    }
