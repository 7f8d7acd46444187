"""
Washing materials handed to washers and the amounts used on check-ins.
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey
from carwash.database import Base
from carwash.utils import utcnow


class WasherMaterial(Base):
    """A consumable (shampoo, wax, towels) issued to a washer."""

    __tablename__ = "washer_materials"

    id = Column(Integer, primary_key=True, index=True)
    washer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    material_name = Column(String, nullable=False)
    material_type = Column(String, nullable=False)
    quantity = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    returned_quantity = Column(Float, default=0.0, nullable=False)
    is_returned = Column(Boolean, default=False, nullable=False)
    assigned_date = Column(DateTime(timezone=True), default=utcnow)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class CheckInMaterial(Base):
    """Material drawn from a washer's assigned tools for one check-in."""

    __tablename__ = "check_in_materials"

    id = Column(Integer, primary_key=True, index=True)
    check_in_id = Column(Integer, ForeignKey("car_check_ins.id", ondelete="CASCADE"), nullable=False, index=True)
    washer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    material_id = Column(Integer, ForeignKey("washer_tools.id", ondelete="SET NULL"), nullable=True)
    material_name = Column(String, nullable=False)
    quantity_used = Column(Integer, nullable=False)
    usage_date = Column(DateTime(timezone=True), default=utcnow)
