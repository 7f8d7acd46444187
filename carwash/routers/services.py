"""
Service catalog routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import Optional

from carwash.core.commission import validate_commission
from carwash.database import get_db
from carwash.models.service import Service, ServiceCategory
from carwash.routers.common import bad_request, get_object_or_404, like, order_column
from carwash.schemas.service import Service as ServiceSchema, ServiceCreate, ServiceUpdate

router = APIRouter(prefix="/admin/services", tags=["services"])

SORT_COLUMNS = {
    "name": Service.name,
    "category": Service.category,
    "basePrice": Service.base_price,
    "estimatedDuration": Service.estimated_duration,
    "createdAt": Service.created_at,
}


@router.get("")
async def get_services(
    search: Optional[str] = None,
    category: Optional[ServiceCategory] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
):
    """
    List services with optional search, category and active-state filters.
    """
    query = select(Service)
    pattern = like(search)
    if pattern:
        query = query.where(or_(Service.name.ilike(pattern), Service.description.ilike(pattern)))
    if category:
        query = query.where(Service.category == category)
    if status_filter == "active":
        query = query.where(Service.is_active.is_(True))
    elif status_filter == "inactive":
        query = query.where(Service.is_active.is_(False))
    query = query.order_by(order_column(SORT_COLUMNS.get(sort_by, Service.name), sort_order))

    result = await db.execute(query)
    services = result.scalars().all()
    return {
        "success": True,
        "services": [ServiceSchema.model_validate(s) for s in services],
    }


@router.get("/{service_id}")
async def get_service(service_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a specific service by ID.
    """
    service = await get_object_or_404(db, Service, service_id, "Service")
    return {"success": True, "service": ServiceSchema.model_validate(service)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_service(service: ServiceCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a new service.
    """
    result = await db.execute(select(Service).where(Service.name == service.name))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A service with this name already exists"
        )

    db_service = Service(**service.model_dump())
    db.add(db_service)
    await db.commit()
    await db.refresh(db_service)

    return {
        "success": True,
        "message": "Service created successfully",
        "service": ServiceSchema.model_validate(db_service),
    }


@router.patch("/{service_id}")
async def update_service(
    service_id: int,
    service_update: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a service. The commission pair is checked against the merged values.
    """
    db_service = await get_object_or_404(db, Service, service_id, "Service")

    update_data = service_update.model_dump(exclude_unset=True)
    washer_pct = update_data.get("washer_commission_percentage", db_service.washer_commission_percentage)
    company_pct = update_data.get("company_commission_percentage", db_service.company_commission_percentage)
    error = validate_commission(washer_pct, company_pct)
    if error:
        raise bad_request(error)

    if "name" in update_data:
        update_data["name"] = (update_data["name"] or "").strip()
        if not update_data["name"]:
            raise bad_request("Service name is required")
        result = await db.execute(
            select(Service).where(Service.name == update_data["name"], Service.id != service_id)
        )
        if result.scalar_one_or_none():
            raise bad_request("A service with this name already exists")

    for field, value in update_data.items():
        setattr(db_service, field, value)

    await db.commit()
    await db.refresh(db_service)

    return {
        "success": True,
        "message": "Service updated successfully",
        "service": ServiceSchema.model_validate(db_service),
    }


@router.delete("/{service_id}")
async def delete_service(service_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete a service.
    """
    db_service = await get_object_or_404(db, Service, service_id, "Service")
    await db.delete(db_service)
    await db.commit()
    return {"success": True, "message": "Service deleted successfully"}
