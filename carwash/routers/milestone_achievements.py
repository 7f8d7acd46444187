"""
Milestone achievement routes: checking customers, listing and claiming rewards.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional

from carwash.core.achievements import check_all_customers, check_customer_milestones, milestone_metric
from carwash.core.bonuses import BonusNotice, notify_customer_bonus
from carwash.core.conditions import evaluate_condition, period_start
from carwash.core.totals import customer_totals
from carwash.database import get_db
from carwash.models.customer import Customer
from carwash.models.milestone import Milestone, MilestoneAchievement
from carwash.notifications.sms import SMSClient, get_sms_client
from carwash.routers.common import bad_request, get_object_or_404, order_column
from carwash.schemas.milestone import (
    AchievementCheckRequest,
    MilestoneAchievement as AchievementSchema,
    QualifyingCustomersRequest,
    RewardClaim,
)
from carwash.utils import utcnow

router = APIRouter(prefix="/admin/milestone-achievements", tags=["milestone-achievements"])


def _achievement_query():
    return (
        select(MilestoneAchievement, Customer.name, Milestone.name)
        .join(Customer, Customer.id == MilestoneAchievement.customer_id)
        .join(Milestone, Milestone.id == MilestoneAchievement.milestone_id)
    )


def _serialize(row) -> AchievementSchema:
    achievement, customer_name, milestone_name = row
    return AchievementSchema.model_validate(achievement).model_copy(update={
        "customer_name": customer_name,
        "milestone_name": milestone_name,
    })


@router.get("")
async def get_achievements(
    customer_id: Optional[int] = Query(None, alias="customerId"),
    milestone_id: Optional[int] = Query(None, alias="milestoneId"),
    reward_claimed: Optional[bool] = Query(None, alias="rewardClaimed"),
    sort_order: str = Query("desc", alias="sortOrder"),
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """
    List achievements with customer and milestone names.
    """
    filters = []
    if customer_id is not None:
        filters.append(MilestoneAchievement.customer_id == customer_id)
    if milestone_id is not None:
        filters.append(MilestoneAchievement.milestone_id == milestone_id)
    if reward_claimed is not None:
        filters.append(MilestoneAchievement.reward_claimed.is_(reward_claimed))

    result = await db.execute(
        _achievement_query()
        .where(*filters)
        .order_by(order_column(MilestoneAchievement.achieved_at, sort_order), MilestoneAchievement.id)
        .limit(limit)
    )
    total = await db.scalar(select(func.count(MilestoneAchievement.id)).where(*filters))

    return {
        "success": True,
        "achievements": [_serialize(row) for row in result.all()],
        "total": total or 0,
    }


@router.post("")
async def check_achievements(
    payload: AchievementCheckRequest,
    db: AsyncSession = Depends(get_db),
    sms: SMSClient = Depends(get_sms_client),
):
    """
    Check one customer, or every customer, against the active milestones.
    """
    if payload.all_customers:
        summary = await check_all_customers(db, force_check=payload.force_check)
        for notice in summary.pop("notices"):
            await run_in_threadpool(notify_customer_bonus, sms, notice)
        return {
            "success": True,
            "message": f"{summary['newAchievements']} new milestone(s) achieved",
            **summary,
        }

    if payload.customer_id is None:
        raise bad_request("Customer ID is required")

    customer = await db.get(Customer, payload.customer_id)
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )

    check = await check_customer_milestones(db, customer, force_check=payload.force_check)
    await db.commit()

    for bonus in check.bonuses:
        await run_in_threadpool(notify_customer_bonus, sms, BonusNotice.capture(customer, bonus))

    count = len(check.new_achievements)
    return {
        "success": True,
        "message": f"{count} new milestone(s) achieved",
        "newAchievements": count,
        "achievements": [
            AchievementSchema.model_validate(a) for a in check.new_achievements
        ],
        "qualifiedMilestoneIds": check.qualified_milestone_ids,
        "customerStats": {"totalVisits": check.total_visits, "totalSpent": check.total_spent},
    }


@router.put("")
async def qualifying_customers(
    payload: QualifyingCustomersRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Customers who currently meet a milestone's condition, without recording anything.
    """
    milestone = await get_object_or_404(db, Milestone, payload.milestone_id, "Milestone")
    since = period_start((milestone.condition or {}).get("period"))

    result = await db.execute(select(Customer).order_by(Customer.name))
    qualifying = []
    for customer in result.scalars().all():
        visits, spent = await customer_totals(db, customer.id, since=since)
        actual = milestone_metric(milestone, visits, spent)
        if evaluate_condition(milestone.condition or {}, actual):
            qualifying.append({
                "id": customer.id,
                "name": customer.name,
                "phone": customer.phone,
                "totalVisits": visits,
                "totalSpent": spent,
                "value": actual,
            })

    return {"success": True, "milestoneId": milestone.id, "customers": qualifying, "total": len(qualifying)}


@router.get("/{achievement_id}")
async def get_achievement(achievement_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a specific achievement by ID.
    """
    result = await db.execute(_achievement_query().where(MilestoneAchievement.id == achievement_id))
    row = result.first()
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Achievement not found"
        )
    return {"success": True, "achievement": _serialize(row)}


@router.patch("/{achievement_id}")
async def claim_reward(
    achievement_id: int,
    payload: RewardClaim,
    db: AsyncSession = Depends(get_db),
):
    """
    Mark an achievement's reward as claimed.
    """
    if payload.claimed_by is None:
        raise bad_request("claimedBy is required")

    achievement = await get_object_or_404(db, MilestoneAchievement, achievement_id, "Achievement")
    if achievement.reward_claimed:
        raise bad_request("Reward has already been claimed")

    achievement.reward_claimed = True
    achievement.claimed_at = utcnow()
    achievement.claimed_by = payload.claimed_by
    if payload.notes is not None:
        achievement.notes = payload.notes
    await db.commit()

    return {
        "success": True,
        "message": "Reward claimed successfully",
        "achievement": AchievementSchema.model_validate(achievement),
    }
