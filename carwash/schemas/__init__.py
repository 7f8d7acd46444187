"""
Pydantic schemas for request/response validation.
"""
from carwash.schemas.service import ServiceBase, ServiceCreate, ServiceUpdate, Service
from carwash.schemas.customer import CustomerBase, CustomerCreate, CustomerUpdate, Customer, CustomerDetail, Vehicle
from carwash.schemas.check_in import CheckInCreate, CheckInUpdate, CheckIn, CheckInCreated, KeyCodeSMS
from carwash.schemas.inventory import InventoryItemBase, InventoryItemCreate, InventoryItemUpdate, InventoryItem
from carwash.schemas.sale import SaleCreate, SaleItemCreate, Sale, SaleItem
from carwash.schemas.bonus import BonusCreate, BonusAction, Bonus
from carwash.schemas.milestone import (
    MilestoneCreate, MilestoneUpdate, Milestone, MilestoneReward,
    AchievementCheckRequest, QualifyingCustomersRequest, RewardClaim, MilestoneAchievement,
)
from carwash.schemas.user import WasherCreate, WasherUpdate, Washer, AdminCreate, AdminUpdate, Admin, NextOfKin
from carwash.schemas.payment_request import PaymentRequestCreate, PaymentRequestUpdate, PaymentRequest
from carwash.schemas.tool import (
    WorkerToolCreate, WorkerTool, WasherToolAssign, WasherToolReturn, WasherTool,
    ToolChargeCreate, ToolChargeUpdate, ToolCharge,
)
from carwash.schemas.expense import ExpenseCreate, ExpenseUpdate, Expense
from carwash.schemas.material import (
    WasherMaterialAssign, WasherMaterialQuantity, WasherMaterial,
    MaterialUse, CheckInMaterialsAssign, CheckInMaterial,
)

__all__ = [
    "ServiceBase", "ServiceCreate", "ServiceUpdate", "Service",
    "CustomerBase", "CustomerCreate", "CustomerUpdate", "Customer", "CustomerDetail", "Vehicle",
    "CheckInCreate", "CheckInUpdate", "CheckIn", "CheckInCreated", "KeyCodeSMS",
    "InventoryItemBase", "InventoryItemCreate", "InventoryItemUpdate", "InventoryItem",
    "SaleCreate", "SaleItemCreate", "Sale", "SaleItem",
    "BonusCreate", "BonusAction", "Bonus",
    "MilestoneCreate", "MilestoneUpdate", "Milestone", "MilestoneReward",
    "AchievementCheckRequest", "QualifyingCustomersRequest", "RewardClaim", "MilestoneAchievement",
    "WasherCreate", "WasherUpdate", "Washer", "AdminCreate", "AdminUpdate", "Admin", "NextOfKin",
    "PaymentRequestCreate", "PaymentRequestUpdate", "PaymentRequest",
    "WorkerToolCreate", "WorkerTool", "WasherToolAssign", "WasherToolReturn", "WasherTool",
    "ToolChargeCreate", "ToolChargeUpdate", "ToolCharge",
    "ExpenseCreate", "ExpenseUpdate", "Expense",
    "WasherMaterialAssign", "WasherMaterialQuantity", "WasherMaterial",
    "MaterialUse", "CheckInMaterialsAssign", "CheckInMaterial",
]
