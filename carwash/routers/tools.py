"""
Tool routes: tool stock, assignments to washers and tool charges.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from typing import Optional

from carwash.database import get_db
from carwash.models.tool import ToolCharge, ToolChargeStatus, WasherTool, WorkerTool
from carwash.models.user import User, UserRole
from carwash.routers.common import bad_request, get_object_or_404, like, order_column
from carwash.schemas.tool import (
    ToolCharge as ToolChargeSchema,
    ToolChargeCreate,
    ToolChargeUpdate,
    WasherTool as WasherToolSchema,
    WasherToolAssign,
    WasherToolReturn,
    WorkerTool as WorkerToolSchema,
    WorkerToolCreate,
)
from carwash.utils import utcnow

tool_charges_router = APIRouter(prefix="/admin/tool-charges", tags=["tools"])
worker_tools_router = APIRouter(prefix="/admin/worker-tools", tags=["tools"])
washer_tools_router = APIRouter(prefix="/admin/washer-tools", tags=["tools"])


async def require_worker(db: AsyncSession, worker_id: int) -> User:
    result = await db.execute(
        select(User).where(User.id == worker_id, User.role == UserRole.CAR_WASHER)
    )
    worker = result.scalar_one_or_none()
    if not worker:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Washer not found"
        )
    return worker


# Tool charges

@tool_charges_router.get("")
async def get_tool_charges(
    search: Optional[str] = None,
    status_filter: Optional[ToolChargeStatus] = Query(None, alias="status"),
    worker_id: Optional[int] = Query(None, alias="workerId"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
):
    """
    List tool charges.
    """
    query = select(ToolCharge)
    pattern = like(search)
    if pattern:
        query = query.where(or_(
            ToolCharge.tool_name.ilike(pattern),
            ToolCharge.worker_name.ilike(pattern),
            ToolCharge.reason.ilike(pattern),
        ))
    if status_filter:
        query = query.where(ToolCharge.status == status_filter)
    if worker_id is not None:
        query = query.where(ToolCharge.worker_id == worker_id)
    result = await db.execute(query.order_by(order_column(ToolCharge.created_at, sort_order), ToolCharge.id))
    charges = result.scalars().all()

    return {
        "success": True,
        "toolCharges": [ToolChargeSchema.model_validate(c) for c in charges],
        "summary": {
            "totalCharges": len(charges),
            "totalAmount": sum(c.charge_amount for c in charges),
            "pendingAmount": sum(c.charge_amount for c in charges if c.status == ToolChargeStatus.PENDING),
        },
    }


@tool_charges_router.post("", status_code=status.HTTP_201_CREATED)
async def create_tool_charge(payload: ToolChargeCreate, db: AsyncSession = Depends(get_db)):
    """
    Charge a washer for a lost or damaged tool.
    """
    worker = await require_worker(db, payload.worker_id)
    charge = ToolCharge(**payload.model_dump())
    charge.worker_name = payload.worker_name or worker.name
    charge.status = ToolChargeStatus.PENDING
    db.add(charge)
    await db.commit()
    await db.refresh(charge)
    return {
        "success": True,
        "message": "Tool charge created successfully",
        "toolCharge": ToolChargeSchema.model_validate(charge),
    }


@tool_charges_router.patch("/{charge_id}")
async def update_tool_charge(charge_id: int, payload: ToolChargeUpdate, db: AsyncSession = Depends(get_db)):
    charge = await get_object_or_404(db, ToolCharge, charge_id, "Tool charge")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(charge, field, value)
    await db.commit()
    await db.refresh(charge)
    return {
        "success": True,
        "message": "Tool charge updated successfully",
        "toolCharge": ToolChargeSchema.model_validate(charge),
    }


@tool_charges_router.delete("/{charge_id}")
async def delete_tool_charge(charge_id: int, db: AsyncSession = Depends(get_db)):
    charge = await get_object_or_404(db, ToolCharge, charge_id, "Tool charge")
    await db.delete(charge)
    await db.commit()
    return {"success": True, "message": "Tool charge deleted successfully"}


# Tool stock

@worker_tools_router.get("")
async def get_worker_tools(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(WorkerTool).order_by(WorkerTool.name))
    return {"success": True, "tools": [WorkerToolSchema.model_validate(t) for t in result.scalars().all()]}


@worker_tools_router.post("", status_code=status.HTTP_201_CREATED)
async def create_worker_tool(payload: WorkerToolCreate, db: AsyncSession = Depends(get_db)):
    """
    Add tools to stock. Restocking an existing name and type adds to its quantity.
    """
    result = await db.execute(
        select(WorkerTool).where(WorkerTool.name == payload.name, WorkerTool.tool_type == payload.tool_type)
    )
    tool = result.scalar_one_or_none()
    if tool:
        tool.quantity += payload.quantity
        tool.replacement_cost = payload.replacement_cost or tool.replacement_cost
    else:
        tool = WorkerTool(**payload.model_dump())
        db.add(tool)
    await db.commit()
    await db.refresh(tool)
    return {"success": True, "tool": WorkerToolSchema.model_validate(tool)}


# Tool assignments

@washer_tools_router.get("")
async def get_washer_tools(
    washer_id: Optional[int] = Query(None, alias="washerId"),
    tool_type: Optional[str] = Query(None, alias="toolType"),
    is_returned: Optional[bool] = Query(None, alias="isReturned"),
    db: AsyncSession = Depends(get_db),
):
    """
    List tools assigned to washers.
    """
    query = select(WasherTool)
    if washer_id is not None:
        query = query.where(WasherTool.washer_id == washer_id)
    if tool_type:
        query = query.where(WasherTool.tool_type == tool_type)
    if is_returned is not None:
        query = query.where(WasherTool.is_returned.is_(is_returned))
    result = await db.execute(query.order_by(WasherTool.assigned_date.desc(), WasherTool.id.desc()))
    tools = result.scalars().all()

    outstanding = [t for t in tools if not t.is_returned]
    return {
        "success": True,
        "tools": [WasherToolSchema.model_validate(t) for t in tools],
        "summary": {
            "totalAssigned": len(tools),
            "outstanding": len(outstanding),
            "outstandingValue": sum(t.replacement_cost * t.quantity for t in outstanding),
        },
    }


@washer_tools_router.post("", status_code=status.HTTP_201_CREATED)
async def assign_tool(payload: WasherToolAssign, db: AsyncSession = Depends(get_db)):
    """
    Hand tools from stock to a washer. The stock decrement and the assignment
    are committed together.
    """
    await require_worker(db, payload.washer_id)

    result = await db.execute(
        select(WorkerTool)
        .where(func.lower(WorkerTool.name) == payload.tool_name.strip().lower(), WorkerTool.tool_type == payload.tool_type)
        .with_for_update()
    )
    stock = result.scalars().first()
    if stock is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tool {payload.tool_name} not found in stock"
        )
    if stock.quantity < payload.quantity:
        raise bad_request(
            f"Insufficient quantity for {stock.name}. Available: {stock.quantity}, Requested: {payload.quantity}"
        )
    stock.quantity -= payload.quantity

    assignment = WasherTool(
        washer_id=payload.washer_id,
        worker_tool_id=stock.id,
        tool_name=stock.name,
        tool_type=stock.tool_type,
        quantity=payload.quantity,
        replacement_cost=stock.replacement_cost,
        is_returned=False,
        assigned_by=payload.assigned_by,
        notes=payload.notes,
    )
    db.add(assignment)
    await db.commit()
    await db.refresh(assignment)

    return {
        "success": True,
        "message": "Tool assigned successfully",
        "tool": WasherToolSchema.model_validate(assignment),
    }


@washer_tools_router.put("")
async def return_tool(payload: WasherToolReturn, db: AsyncSession = Depends(get_db)):
    """
    Mark an assignment returned (putting the tools back in stock) or undo a return.
    """
    assignment = await get_object_or_404(db, WasherTool, payload.washer_tool_id, "Tool assignment")
    if assignment.is_returned == payload.is_returned:
        raise bad_request("Tool is already returned" if payload.is_returned else "Tool is not returned")

    stock = await db.get(WorkerTool, assignment.worker_tool_id) if assignment.worker_tool_id else None
    if payload.is_returned:
        assignment.is_returned = True
        assignment.returned_date = utcnow()
        if stock is not None:
            stock.quantity += assignment.quantity
    else:
        if stock is not None:
            if stock.quantity < assignment.quantity:
                raise bad_request(f"Insufficient quantity for {stock.name} to reassign")
            stock.quantity -= assignment.quantity
        assignment.is_returned = False
        assignment.returned_date = None

    await db.commit()
    await db.refresh(assignment)
    return {
        "success": True,
        "message": "Tool assignment updated successfully",
        "tool": WasherToolSchema.model_validate(assignment),
    }
