"""
Expense routes: money spent running the car wash.
"""
from datetime import date

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from carwash.database import get_db
from carwash.models.check_in import CheckIn
from carwash.models.expense import Expense, ExpenseType
from carwash.models.user import User, UserRole
from carwash.routers.common import bad_request, end_of_day, get_object_or_404, start_of_day
from carwash.schemas.expense import Expense as ExpenseSchema, ExpenseCreate, ExpenseUpdate

router = APIRouter(prefix="/admin/expenses", tags=["expenses"])


def _serialize(row) -> ExpenseSchema:
    expense, admin_name = row
    return ExpenseSchema.model_validate(expense).model_copy(update={"admin_name": admin_name})


async def _load(db: AsyncSession, expense_id: int):
    result = await db.execute(
        select(Expense, User.name)
        .outerjoin(User, User.id == Expense.admin_id)
        .where(Expense.id == expense_id)
    )
    row = result.first()
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Expense not found"
        )
    return row


@router.get("")
async def get_expenses(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    service_type: Optional[ExpenseType] = Query(None, alias="serviceType"),
    db: AsyncSession = Depends(get_db),
):
    """
    List expenses, newest first. ``endDate`` includes the whole day.
    """
    query = select(Expense, User.name).outerjoin(User, User.id == Expense.admin_id)
    if start_date:
        query = query.where(Expense.expense_date >= start_of_day(start_date))
    if end_date:
        query = query.where(Expense.expense_date <= end_of_day(end_date))
    if service_type:
        query = query.where(Expense.service_type == service_type)
    result = await db.execute(query.order_by(Expense.expense_date.desc(), Expense.id.desc()))
    expenses = [_serialize(row) for row in result.all()]

    by_type = {}
    for expense in expenses:
        by_type[expense.service_type.value] = by_type.get(expense.service_type.value, 0.0) + expense.amount
    return {
        "success": True,
        "expenses": expenses,
        "summary": {
            "totalExpenses": len(expenses),
            "totalAmount": sum(e.amount for e in expenses),
            "byType": by_type,
        },
    }


@router.get("/{expense_id}")
async def get_expense(expense_id: int, db: AsyncSession = Depends(get_db)):
    return {"success": True, "expense": _serialize(await _load(db, expense_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_expense(payload: ExpenseCreate, db: AsyncSession = Depends(get_db)):
    """
    Record an expense against the admin who paid it.
    """
    if payload.admin_id is not None:
        admin = await db.get(User, payload.admin_id)
        if admin is None or not admin.is_admin:
            raise bad_request("Admin user not found")
    if payload.check_in_id is not None:
        await get_object_or_404(db, CheckIn, payload.check_in_id, "Check-in")

    data = payload.model_dump(exclude_none=True)
    data["service_type"] = ExpenseType(payload.service_type)
    expense = Expense(**data)
    db.add(expense)
    await db.commit()

    return {
        "success": True,
        "message": "Expense created successfully",
        "expense": _serialize(await _load(db, expense.id)),
    }


@router.patch("/{expense_id}")
async def update_expense(expense_id: int, payload: ExpenseUpdate, db: AsyncSession = Depends(get_db)):
    expense, _ = await _load(db, expense_id)
    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("check_in_id") is not None:
        await get_object_or_404(db, CheckIn, update_data["check_in_id"], "Check-in")
    if "reason" in update_data:
        update_data["reason"] = update_data["reason"].strip()
    for field, value in update_data.items():
        setattr(expense, field, value)
    await db.commit()

    return {
        "success": True,
        "message": "Expense updated successfully",
        "expense": _serialize(await _load(db, expense_id)),
    }


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: int,
    admin_id: Optional[int] = Header(None, alias="X-Admin-ID"),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete an expense. Admins may delete their own; super admins any.
    """
    if admin_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin ID is required"
        )
    admin = await db.get(User, admin_id)
    if admin is None or not admin.is_admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin user not found"
        )
    expense, _ = await _load(db, expense_id)
    if admin.role != UserRole.SUPER_ADMIN and expense.admin_id != admin.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to delete this expense"
        )

    await db.delete(expense)
    await db.commit()
    return {"success": True, "message": "Expense deleted successfully"}
