"""
Pydantic schemas for expenses.
"""
from pydantic import model_validator
from datetime import datetime
from typing import Optional

from carwash.models.expense import ExpenseType
from carwash.schemas.base import CamelModel, ReadModel, UpdateModel


class ExpenseCreate(CamelModel):
    """Schema for recording an expense."""
    service_type: Optional[str] = None
    amount: Optional[float] = None
    reason: Optional[str] = None
    description: Optional[str] = None
    admin_id: Optional[int] = None
    check_in_id: Optional[int] = None
    expense_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_rules(self):
        if not self.service_type or self.amount is None or not (self.reason or "").strip():
            raise ValueError("Service type, amount, and reason are required")
        if self.service_type not in {t.value for t in ExpenseType}:
            raise ValueError("Invalid service type")
        if self.amount <= 0:
            raise ValueError("Amount must be greater than 0")
        self.reason = self.reason.strip()
        return self


class ExpenseUpdate(UpdateModel):
    nullable_fields = ("description", "check_in_id")

    service_type: Optional[ExpenseType] = None
    amount: Optional[float] = None
    reason: Optional[str] = None
    description: Optional[str] = None
    check_in_id: Optional[int] = None
    expense_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_rules(self):
        if self.amount is not None and self.amount <= 0:
            raise ValueError("Amount must be greater than 0")
        if self.reason is not None and not self.reason.strip():
            raise ValueError("Reason cannot be empty")
        return self


class Expense(ReadModel):
    """Schema for expense responses."""
    id: int
    service_type: ExpenseType
    amount: float
    reason: str
    description: Optional[str] = None
    admin_id: Optional[int] = None
    admin_name: Optional[str] = None
    check_in_id: Optional[int] = None
    expense_date: datetime
    created_at: datetime
