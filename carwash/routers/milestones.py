"""
Milestone routes.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from carwash.database import get_db
from carwash.models.milestone import Milestone, MilestoneType
from carwash.routers.common import get_object_or_404
from carwash.schemas.milestone import Milestone as MilestoneSchema, MilestoneCreate, MilestoneUpdate

router = APIRouter(prefix="/admin/milestones", tags=["milestones"])


@router.get("")
async def get_milestones(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    type: Optional[MilestoneType] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    List milestones.
    """
    query = select(Milestone)
    if is_active is not None:
        query = query.where(Milestone.is_active.is_(is_active))
    if type:
        query = query.where(Milestone.type == type)
    result = await db.execute(query.order_by(Milestone.created_at.desc(), Milestone.id.desc()))
    return {
        "success": True,
        "milestones": [MilestoneSchema.model_validate(m) for m in result.scalars().all()],
    }


@router.get("/{milestone_id}")
async def get_milestone(milestone_id: int, db: AsyncSession = Depends(get_db)):
    milestone = await get_object_or_404(db, Milestone, milestone_id, "Milestone")
    return {"success": True, "milestone": MilestoneSchema.model_validate(milestone)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_milestone(milestone: MilestoneCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a milestone.
    """
    data = milestone.model_dump()
    data["name"] = data["name"].strip()
    data["description"] = data["description"].strip()
    db_milestone = Milestone(**data)
    db.add(db_milestone)
    await db.commit()
    await db.refresh(db_milestone)

    return {
        "success": True,
        "message": "Milestone created successfully",
        "milestone": MilestoneSchema.model_validate(db_milestone),
    }


@router.put("/{milestone_id}")
async def update_milestone(
    milestone_id: int,
    milestone_update: MilestoneUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a milestone.
    """
    db_milestone = await get_object_or_404(db, Milestone, milestone_id, "Milestone")

    update_data = milestone_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_milestone, field, value)

    await db.commit()
    await db.refresh(db_milestone)

    return {
        "success": True,
        "message": "Milestone updated successfully",
        "milestone": MilestoneSchema.model_validate(db_milestone),
    }


@router.delete("/{milestone_id}")
async def delete_milestone(milestone_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete a milestone and its achievements.
    """
    db_milestone = await get_object_or_404(db, Milestone, milestone_id, "Milestone")
    await db.delete(db_milestone)
    await db.commit()
    return {"success": True, "message": "Milestone deleted successfully"}
