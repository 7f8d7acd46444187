"""
Milestone achievement checks for customers.
"""
from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carwash.core.bonuses import BonusNotice, issue_bonus
from carwash.core.conditions import evaluate_condition, period_start
from carwash.core.totals import customer_totals, refresh_customer_totals
from carwash.models.bonus import Bonus, BonusType
from carwash.models.customer import Customer
from carwash.models.milestone import Milestone, MilestoneAchievement, MilestoneType

logger = logging.getLogger(__name__)


@dataclass
class AchievementCheck:
    """Outcome of checking one customer against the active milestones."""
    customer_id: int
    total_visits: int = 0
    total_spent: float = 0.0
    new_achievements: List[MilestoneAchievement] = field(default_factory=list)
    bonuses: List[Bonus] = field(default_factory=list)
    qualified_milestone_ids: List[int] = field(default_factory=list)


def milestone_metric(milestone: Milestone, visits: int, spent: float) -> float:
    if milestone.type == MilestoneType.SPENDING:
        return spent
    return visits


async def achieved_milestone_ids(db: AsyncSession, customer_id: int) -> set:
    result = await db.execute(
        select(MilestoneAchievement.milestone_id).where(MilestoneAchievement.customer_id == customer_id)
    )
    return set(result.scalars().all())


async def check_customer_milestones(
    db: AsyncSession, customer: Customer, force_check: bool = False
) -> AchievementCheck:
    """
    Record achievements for every active milestone the customer now meets.

    Milestones already achieved are skipped unless ``force_check`` is set, in
    which case they are evaluated again but never recorded twice. Rows are
    added to the session only; the caller commits.
    """
    visits, spent = await refresh_customer_totals(db, customer)
    check = AchievementCheck(customer_id=customer.id, total_visits=visits, total_spent=spent)

    result = await db.execute(select(Milestone).where(Milestone.is_active.is_(True)))
    milestones = result.scalars().all()
    achieved = await achieved_milestone_ids(db, customer.id)

    totals_by_period: Dict[Optional[str], Tuple[int, float]] = {None: (visits, spent)}

    for milestone in milestones:
        if milestone.id in achieved and not force_check:
            continue

        condition = milestone.condition or {}
        period = condition.get("period") or "all_time"
        since = period_start(period)
        if since is None:
            period_visits, period_spent = totals_by_period[None]
        else:
            if period not in totals_by_period:
                totals_by_period[period] = await customer_totals(db, customer.id, since=since)
            period_visits, period_spent = totals_by_period[period]

        actual = milestone_metric(milestone, period_visits, period_spent)
        if not evaluate_condition(condition, actual):
            continue
        check.qualified_milestone_ids.append(milestone.id)
        if milestone.id in achieved:
            continue

        achievement = MilestoneAchievement(
            customer_id=customer.id,
            milestone_id=milestone.id,
            achieved_value=actual,
            reward_claimed=False,
        )
        db.add(achievement)
        achieved.add(milestone.id)
        check.new_achievements.append(achievement)
        logger.info("Customer %s achieved milestone %s (%s)", customer.id, milestone.id, milestone.name)

        reward = milestone.reward or {}
        if reward.get("type") == "bonus" and float(reward.get("value") or 0) > 0:
            bonus = await issue_bonus(
                db,
                BonusType.CUSTOMER,
                customer.id,
                float(reward["value"]),
                reward.get("description") or f"Milestone achieved: {milestone.name}",
                milestone=milestone.name,
            )
            check.bonuses.append(bonus)

    await db.flush()
    return check


async def check_all_customers(db: AsyncSession, force_check: bool = False) -> dict:
    """
    Run the milestone check over every customer, committing per customer.

    A failure is logged and rolled back for that customer only; the sweep
    carries on with the next one. The rollback expires every loaded row, so
    bonus notices are captured as soon as each customer commits.
    """
    result = await db.execute(select(Customer.id).order_by(Customer.id))
    customer_ids = result.scalars().all()

    summary = {"customersChecked": 0, "newAchievements": 0, "failed": [], "notices": []}
    for customer_id in customer_ids:
        try:
            customer = await db.get(Customer, customer_id)
            check = await check_customer_milestones(db, customer, force_check=force_check)
            await db.commit()
            notices = [BonusNotice.capture(customer, bonus) for bonus in check.bonuses]
        except Exception:
            await db.rollback()
            logger.exception("Milestone check failed for customer %s", customer_id)
            summary["failed"].append(customer_id)
            continue
        summary["customersChecked"] += 1
        summary["newAchievements"] += len(check.new_achievements)
        summary["notices"].extend(notices)
    return summary
