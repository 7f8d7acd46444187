"""
Bonus issuance and recipient lookup.
"""
from dataclasses import dataclass
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carwash.core.stock import insufficient_stock_message
from carwash.errors import NotFoundError, ValidationError
from carwash.models.bonus import Bonus, BonusStatus, BonusType, RewardType
from carwash.models.customer import Customer
from carwash.models.inventory import InventoryItem
from carwash.models.user import User, UserRole
from carwash.notifications.sms import SMSClient

logger = logging.getLogger(__name__)


async def find_recipient(db: AsyncSession, bonus_type: BonusType, recipient_id: int):
    """The customer or washer a bonus is addressed to, or None."""
    if bonus_type == BonusType.CUSTOMER:
        return await db.get(Customer, recipient_id)
    result = await db.execute(
        select(User).where(User.id == recipient_id, User.role == UserRole.CAR_WASHER)
    )
    return result.scalar_one_or_none()


async def issue_bonus(
    db: AsyncSession,
    bonus_type: BonusType,
    recipient_id: int,
    amount: float,
    reason: str,
    milestone: Optional[str] = None,
    reward_type: RewardType = RewardType.CASH,
    item_id: Optional[int] = None,
    quantity: int = 1,
) -> Bonus:
    """
    Add a pending bonus to the session.

    Item rewards take their stock in the same session, so the decrement and the
    bonus row are committed together or not at all. Nothing is committed here.
    """
    if amount is None or amount <= 0:
        raise ValidationError("Amount must be greater than 0")

    recipient = await find_recipient(db, bonus_type, recipient_id)
    if recipient is None:
        raise ValidationError("Recipient not found")

    if reward_type == RewardType.ITEM:
        if item_id is None:
            raise ValidationError("itemId is required for item bonuses")
        if quantity is None or quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")
        result = await db.execute(
            select(InventoryItem).where(InventoryItem.id == item_id).with_for_update()
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise NotFoundError("Inventory item not found")
        if item.current_stock < quantity:
            raise ValidationError(insufficient_stock_message(item.name, item.current_stock, quantity))
        item.current_stock -= quantity
    else:
        item_id = None
        quantity = None

    bonus = Bonus(
        type=bonus_type,
        recipient_id=recipient_id,
        amount=amount,
        reason=reason.strip(),
        milestone=milestone,
        reward_type=reward_type,
        item_id=item_id,
        quantity=quantity,
        status=BonusStatus.PENDING,
    )
    db.add(bonus)
    await db.flush()
    return bonus


@dataclass(frozen=True)
class BonusNotice:
    """
    What a bonus SMS needs, read off the rows while they are still loaded.

    Notices are sent after the commit, from a worker thread, so they must not
    touch the session.
    """
    customer_id: int
    phone: str
    name: str
    bonus_id: int
    amount: float
    reason: str
    reward_type: RewardType = RewardType.CASH
    quantity: Optional[int] = None

    @classmethod
    def capture(cls, customer: Customer, bonus: Bonus) -> "BonusNotice":
        return cls(
            customer_id=customer.id,
            phone=customer.phone,
            name=customer.name,
            bonus_id=bonus.id,
            amount=bonus.amount,
            reason=bonus.reason,
            reward_type=bonus.reward_type,
            quantity=bonus.quantity,
        )


def bonus_sms_text(notice: BonusNotice) -> str:
    if notice.reward_type == RewardType.ITEM:
        reward = f"{notice.quantity} free item(s)"
    else:
        reward = f"a bonus of {notice.amount:,.2f}"
    return f"Hi {notice.name}, you have received {reward}: {notice.reason}. Thank you for choosing us!"


def notify_customer_bonus(sms: SMSClient, notice: BonusNotice) -> bool:
    """
    Text a customer about a bonus. Runs after the bonus is committed; a failed
    send is logged and reported as False, the bonus is left as it is.
    """
    try:
        sms.send(notice.phone, bonus_sms_text(notice))
    except Exception:
        logger.exception("Failed to send bonus SMS to customer %s for bonus %s", notice.customer_id, notice.bonus_id)
        return False
    return True
