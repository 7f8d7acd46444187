"""
Reporting routes: financial reports, payment reports and dashboard metrics.
"""
from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from typing import Optional

from carwash.core.reports import (
    REPORT_PERIODS,
    REPORT_TYPES,
    VIEW_MODES,
    financial_report,
    income_since,
    month_start,
    payment_report,
    recent_month_keys,
    report_range,
)
from carwash.core.stock import StockStatus, stock_status
from carwash.database import get_db
from carwash.models.bonus import Bonus
from carwash.models.check_in import CheckIn, CheckInStatus, VISIT_STATUSES
from carwash.models.customer import Customer
from carwash.models.expense import Expense
from carwash.models.inventory import InventoryItem
from carwash.models.payment_request import PaymentRequest, PaymentRequestStatus
from carwash.models.sale import Sale
from carwash.models.user import User, UserRole, WasherProfile
from carwash.routers.common import bad_request
from carwash.utils import utcnow

router = APIRouter(prefix="/admin", tags=["reports"])


@router.get("/financial-reports")
async def get_financial_report(
    period: int = Query(6, ge=1, le=36),
    db: AsyncSession = Depends(get_db),
):
    """
    Monthly revenue, expenses and profit over the last ``period`` months.
    """
    now = utcnow()
    since = month_start(recent_month_keys(period, now)[-1])

    check_ins = (await db.execute(
        select(CheckIn).where(or_(CheckIn.paid_at >= since, CheckIn.check_in_time >= since))
    )).scalars().all()
    sales = (await db.execute(select(Sale).where(Sale.created_at >= since))).scalars().all()
    payment_requests = (await db.execute(select(PaymentRequest))).scalars().all()
    bonuses = (await db.execute(select(Bonus).where(Bonus.created_at >= since))).scalars().all()
    expenses = (await db.execute(select(Expense).where(Expense.expense_date >= since))).scalars().all()

    report = financial_report(period, check_ins, sales, payment_requests, bonuses, expenses, now=now)
    return {"success": True, "period": period, "reports": report["months"], "summary": report["summary"]}


@router.get("/payment-reports")
async def get_payment_report(
    report_type: str = Query("daily", alias="reportType"),
    period: str = "week",
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    view_mode: str = Query("all", alias="viewMode"),
    db: AsyncSession = Depends(get_db),
):
    """
    Car wash and stock sale takings grouped by day, week or month.
    """
    if report_type not in REPORT_TYPES:
        raise bad_request(f"reportType must be one of: {', '.join(REPORT_TYPES)}")
    if period not in REPORT_PERIODS:
        raise bad_request(f"period must be one of: {', '.join(REPORT_PERIODS)}")
    if view_mode not in VIEW_MODES:
        raise bad_request(f"viewMode must be one of: {', '.join(VIEW_MODES)}")
    try:
        start, end = report_range(period, start_date, end_date)
    except ValueError as exc:
        raise bad_request(str(exc))

    check_ins = (await db.execute(
        select(CheckIn).where(
            CheckIn.check_in_time >= start,
            CheckIn.check_in_time < end,
            CheckIn.status != CheckInStatus.CANCELLED,
        )
    )).scalars().all()
    sales = (await db.execute(
        select(Sale).where(Sale.created_at >= start, Sale.created_at < end)
    )).scalars().all()

    report = payment_report(report_type, view_mode, check_ins, sales)
    return {
        "success": True,
        "reportType": report_type,
        "period": period,
        "viewMode": view_mode,
        "startDate": start,
        "endDate": end,
        "reports": report["groups"],
        "summary": report["summary"],
    }


@router.get("/dashboard-metrics")
async def get_dashboard_metrics(db: AsyncSession = Depends(get_db)):
    """
    Headline numbers for the admin dashboard.
    """
    now = utcnow()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    windows = {"daily": today, "weekly": now - timedelta(days=7), "monthly": now - timedelta(days=30)}
    since = min(windows.values())

    check_ins = (await db.execute(
        select(CheckIn).where(or_(CheckIn.check_in_time >= since, CheckIn.paid_at >= since))
    )).scalars().all()
    sales = (await db.execute(select(Sale).where(Sale.created_at >= since))).scalars().all()

    income = {name: income_since(start, check_ins, sales) for name, start in windows.items()}
    car_count = {
        name: await db.scalar(select(func.count(CheckIn.id)).where(CheckIn.check_in_time >= start))
        for name, start in windows.items()
    }

    active_washers = await db.scalar(
        select(func.count(User.id))
        .join(WasherProfile, WasherProfile.user_id == User.id)
        .where(User.role == UserRole.CAR_WASHER, User.is_active.is_(True), WasherProfile.is_available.is_(True))
    )
    pending_check_ins = await db.scalar(
        select(func.count(CheckIn.id)).where(
            CheckIn.check_in_time >= today,
            CheckIn.status.in_((CheckInStatus.PENDING, CheckInStatus.IN_PROGRESS)),
        )
    )
    pending_payments = await db.scalar(
        select(func.count(PaymentRequest.id)).where(PaymentRequest.status == PaymentRequestStatus.PENDING)
    )

    items = (await db.execute(select(InventoryItem).order_by(InventoryItem.name))).scalars().all()
    low_stock = [
        {"id": i.id, "name": i.name, "currentStock": i.current_stock, "minStockLevel": i.min_stock_level}
        for i in items
        if stock_status(i.current_stock, i.min_stock_level) == StockStatus.LOW
    ]

    top_washers = (await db.execute(
        select(
            User.id,
            User.name,
            func.count(CheckIn.id).label("cars"),
            func.coalesce(func.sum(CheckIn.washer_income), 0.0).label("earnings"),
        )
        .join(CheckIn, CheckIn.assigned_washer_id == User.id)
        .where(CheckIn.check_in_time >= windows["monthly"], CheckIn.status.in_(VISIT_STATUSES))
        .group_by(User.id, User.name)
        .order_by(func.coalesce(func.sum(CheckIn.washer_income), 0.0).desc())
        .limit(5)
    )).all()

    recent = (await db.execute(
        select(CheckIn, Customer.name)
        .outerjoin(Customer, Customer.id == CheckIn.customer_id)
        .order_by(CheckIn.check_in_time.desc(), CheckIn.id.desc())
        .limit(5)
    )).all()
    activities = [
        {
            "type": "check_in",
            "message": f"{c.license_plate} ({name or 'Walk-in'}) is {c.status.value.replace('_', ' ')}",
            "timestamp": c.check_in_time,
        }
        for c, name in recent
    ]
    if low_stock:
        activities.insert(0, {
            "type": "low_stock",
            "message": f"{len(low_stock)} item(s) are low on stock",
            "timestamp": now,
        })

    return {
        "success": True,
        "metrics": {
            "income": income,
            "carCount": car_count,
            "activeWashers": active_washers or 0,
            "pendingCheckIns": pending_check_ins or 0,
            "pendingPayments": pending_payments or 0,
            "lowStockItems": low_stock,
            "topWashers": [
                {"id": row.id, "name": row.name, "carsWashed": row.cars, "earnings": float(row.earnings)}
                for row in top_washers
            ],
            "recentActivities": activities,
        },
    }
