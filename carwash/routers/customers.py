"""
Customer routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from sqlalchemy.orm import selectinload
from typing import Optional

from carwash.core.totals import customer_totals
from carwash.database import get_db
from carwash.models.check_in import CheckIn
from carwash.models.customer import Customer
from carwash.models.vehicle import Vehicle
from carwash.routers.common import get_object_or_404, like
from carwash.schemas.customer import (
    Customer as CustomerSchema,
    CustomerCreate,
    CustomerDetail,
    CustomerUpdate,
    Vehicle as VehicleSchema,
)

router = APIRouter(prefix="/admin/customers", tags=["customers"])


async def _plate_owner(db: AsyncSession, license_plate: str) -> Optional[Vehicle]:
    result = await db.execute(select(Vehicle).where(Vehicle.license_plate == license_plate))
    return result.scalar_one_or_none()


@router.get("")
async def get_customers(
    search: Optional[str] = None,
    filter: str = Query("all", pattern="^(all|registered|unregistered)$"),
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    """
    Get customers, searchable by name, phone, email or license plate.
    """
    query = select(Customer).options(selectinload(Customer.vehicles))
    pattern = like(search)
    if pattern:
        plate_owners = select(Vehicle.customer_id).where(Vehicle.license_plate.ilike(pattern))
        query = query.where(or_(
            Customer.name.ilike(pattern),
            Customer.phone.ilike(pattern),
            Customer.email.ilike(pattern),
            Customer.id.in_(plate_owners),
        ))
    if filter == "registered":
        query = query.where(Customer.is_registered.is_(True))
    elif filter == "unregistered":
        query = query.where(Customer.is_registered.is_(False))

    result = await db.execute(query.order_by(Customer.created_at.desc()).offset(skip).limit(limit))
    customers = result.scalars().all()

    return {
        "success": True,
        "customers": [
            {
                **CustomerSchema.model_validate(c).model_dump(by_alias=True, mode="json"),
                "vehicles": [VehicleSchema.model_validate(v) for v in c.vehicles],
            }
            for c in customers
        ],
    }


@router.get("/{customer_id}")
async def get_customer(customer_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a customer with totals recomputed from their check-ins.
    """
    result = await db.execute(
        select(Customer).options(selectinload(Customer.vehicles)).where(Customer.id == customer_id)
    )
    customer = result.scalar_one_or_none()
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )

    visits, spent = await customer_totals(db, customer.id)
    last_visit = await db.scalar(
        select(func.max(CheckIn.check_in_time)).where(CheckIn.customer_id == customer.id)
    )

    detail = CustomerDetail.model_validate(customer).model_copy(update={
        "total_visits": visits,
        "total_spent": spent,
        "last_visit": last_visit,
    })
    return {"success": True, "customer": detail}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_customer(customer: CustomerCreate, db: AsyncSession = Depends(get_db)):
    """
    Register a customer together with their first vehicle.
    """
    if await _plate_owner(db, customer.license_plate):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A vehicle with this license plate is already registered"
        )

    db_customer = Customer(
        name=customer.name,
        email=customer.email,
        phone=customer.phone,
        is_registered=True,
        total_visits=0,
        total_spent=0.0,
    )
    db.add(db_customer)
    await db.flush()

    db.add(Vehicle(
        customer_id=db_customer.id,
        license_plate=customer.license_plate,
        vehicle_type=customer.vehicle_type,
        color=customer.vehicle_color,
        model=customer.vehicle_model,
        is_primary=True,
    ))
    await db.commit()
    await db.refresh(db_customer)

    return {
        "success": True,
        "message": "Customer registered successfully",
        "customer": CustomerSchema.model_validate(db_customer),
    }


@router.put("/{customer_id}")
async def update_customer(
    customer_id: int,
    customer_update: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a customer and their primary vehicle.
    """
    db_customer = await get_object_or_404(db, Customer, customer_id, "Customer")

    owner = await _plate_owner(db, customer_update.license_plate)
    if owner and owner.customer_id != customer_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="License plate is already registered to another customer"
        )

    db_customer.name = customer_update.name
    db_customer.email = customer_update.email
    db_customer.phone = customer_update.phone
    if customer_update.is_registered is not None:
        db_customer.is_registered = customer_update.is_registered

    result = await db.execute(
        select(Vehicle).where(Vehicle.customer_id == customer_id).order_by(Vehicle.is_primary.desc(), Vehicle.id)
    )
    vehicle = owner or result.scalars().first()
    if vehicle is None:
        vehicle = Vehicle(customer_id=customer_id, is_primary=True)
        db.add(vehicle)
    vehicle.license_plate = customer_update.license_plate
    vehicle.vehicle_type = customer_update.vehicle_type
    vehicle.color = customer_update.vehicle_color
    if customer_update.vehicle_model is not None:
        vehicle.model = customer_update.vehicle_model

    await db.commit()
    await db.refresh(db_customer)

    return {
        "success": True,
        "message": "Customer updated successfully",
        "customer": CustomerSchema.model_validate(db_customer),
    }


@router.delete("/{customer_id}")
async def delete_customer(customer_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete a customer and their vehicles.
    """
    db_customer = await get_object_or_404(db, Customer, customer_id, "Customer")
    await db.delete(db_customer)
    await db.commit()
    return {"success": True, "message": "Customer deleted successfully"}
