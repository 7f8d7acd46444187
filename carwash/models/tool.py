"""
Tool stock, tool assignments and tool charges.
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from carwash.database import Base
from carwash.utils import utcnow
import enum


class ToolChargeStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    DISPUTED = "disputed"


class WorkerTool(Base):
    """Tools held in stock for handing out to washers."""

    __tablename__ = "worker_tools"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    tool_type = Column(String, nullable=False)
    quantity = Column(Integer, default=0, nullable=False)
    replacement_cost = Column(Float, default=0.0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class WasherTool(Base):
    """A tool assigned to a washer."""

    __tablename__ = "washer_tools"

    id = Column(Integer, primary_key=True, index=True)
    washer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    worker_tool_id = Column(Integer, ForeignKey("worker_tools.id", ondelete="SET NULL"), nullable=True)
    tool_name = Column(String, nullable=False)
    tool_type = Column(String, nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    replacement_cost = Column(Float, default=0.0, nullable=False)
    is_returned = Column(Boolean, default=False, nullable=False)
    assigned_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    assigned_date = Column(DateTime(timezone=True), default=utcnow)
    returned_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(String, nullable=True)


class ToolCharge(Base):
    """Charge raised against a worker for a lost or damaged tool."""

    __tablename__ = "tool_charges"

    id = Column(Integer, primary_key=True, index=True)
    tool_name = Column(String, nullable=False)
    worker_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    worker_name = Column(String, nullable=True)
    charge_amount = Column(Float, nullable=False)
    reason = Column(String, nullable=False)
    replacement_cost = Column(Float, nullable=True)
    notes = Column(String, nullable=True)
    status = Column(SQLEnum(ToolChargeStatus), default=ToolChargeStatus.PENDING, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
