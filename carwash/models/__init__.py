"""
SQLAlchemy database models.
"""
from carwash.models.user import User, UserRole, WasherProfile, AdminProfile
from carwash.models.customer import Customer
from carwash.models.vehicle import Vehicle
from carwash.models.service import Service, ServiceCategory
from carwash.models.check_in import CheckIn, CheckInService, CheckInStatus, PaymentStatus, PaymentMethod, WashType
from carwash.models.milestone import Milestone, MilestoneAchievement, MilestoneType
from carwash.models.inventory import InventoryItem, InventoryMovement, MovementType
from carwash.models.bonus import Bonus, BonusType, BonusStatus, RewardType
from carwash.models.sale import Sale, SaleItem, SaleStatus
from carwash.models.payment_request import PaymentRequest, PaymentRequestStatus
from carwash.models.tool import WorkerTool, WasherTool, ToolCharge, ToolChargeStatus
from carwash.models.expense import Expense, ExpenseType
from carwash.models.material import WasherMaterial, CheckInMaterial

__all__ = [
    "User", "UserRole", "WasherProfile", "AdminProfile",
    "Customer", "Vehicle",
    "Service", "ServiceCategory",
    "CheckIn", "CheckInService", "CheckInStatus", "PaymentStatus", "PaymentMethod", "WashType",
    "Milestone", "MilestoneAchievement", "MilestoneType",
    "InventoryItem", "InventoryMovement", "MovementType",
    "Bonus", "BonusType", "BonusStatus", "RewardType",
    "Sale", "SaleItem", "SaleStatus",
    "PaymentRequest", "PaymentRequestStatus",
    "WorkerTool", "WasherTool", "ToolCharge", "ToolChargeStatus",
    "Expense", "ExpenseType",
    "WasherMaterial", "CheckInMaterial",
]
