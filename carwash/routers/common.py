"""
Helpers shared by the routers.
"""
from datetime import date, datetime, time, timezone
from typing import Optional, Type, TypeVar

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


async def get_object_or_404(db: AsyncSession, model: Type[ModelT], object_id: int, label: str) -> ModelT:
    """Load a row by primary key or raise 404 ``"<label> not found"``."""
    obj = await db.get(model, object_id)
    if obj is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} not found"
        )
    return obj


def bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def order_column(column, sort_order: str):
    return column.asc() if sort_order == "asc" else column.desc()


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def end_of_day(value: date) -> datetime:
    return datetime.combine(value, time.max, tzinfo=timezone.utc)


def like(term: Optional[str]) -> Optional[str]:
    """Case-insensitive substring pattern for ``ilike``."""
    if not term or not term.strip():
        return None
    return f"%{term.strip()}%"
