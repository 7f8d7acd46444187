"""
In-memory aggregation for the financial, payment and dashboard reports.

Functions here take rows already loaded from the database and only do
arithmetic and grouping.
"""
from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from carwash.models.bonus import BonusStatus, BonusType
from carwash.models.check_in import PaymentStatus
from carwash.models.expense import ExpenseType
from carwash.models.payment_request import PaymentRequestStatus
from carwash.models.sale import SaleStatus
from carwash.utils import as_utc, utcnow

PAYMENT_METHODS = ("cash", "card", "pos", "mobile_money")
REPORT_PERIODS = ("today", "yesterday", "week", "month", "quarter", "custom")
REPORT_TYPES = ("daily", "weekly", "monthly")
VIEW_MODES = ("all", "car-wash-only", "stock-sales-only")


def month_key(value: datetime) -> str:
    return value.strftime("%Y-%m")


def recent_month_keys(months: int, now: Optional[datetime] = None) -> List[str]:
    """Keys for the last ``months`` calendar months, newest first."""
    now = now or utcnow()
    year, month = now.year, now.month
    keys = []
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return keys


def month_start(key: str) -> datetime:
    year, month = key.split("-")
    return datetime(int(year), int(month), 1, tzinfo=timezone.utc)


def group_key(value: datetime, report_type: str) -> str:
    if report_type == "monthly":
        return month_key(value)
    if report_type == "weekly":
        monday = value.date() - timedelta(days=value.weekday())
        return monday.isoformat()
    return value.date().isoformat()


def report_range(
    period: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """Resolve a payment-report period to a [start, end) window in UTC."""
    now = now or utcnow()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "today":
        return today, now + timedelta(microseconds=1)
    if period == "yesterday":
        return today - timedelta(days=1), today
    if period == "week":
        return now - timedelta(days=7), now + timedelta(microseconds=1)
    if period == "month":
        return now - timedelta(days=30), now + timedelta(microseconds=1)
    if period == "quarter":
        return now - timedelta(days=90), now + timedelta(microseconds=1)
    if period == "custom":
        if start_date is None or end_date is None:
            raise ValueError("startDate and endDate are required for a custom period")
        if start_date > end_date:
            raise ValueError("startDate must not be after endDate")
        start = datetime.combine(start_date, datetime.min.time(), tzinfo=now.tzinfo)
        end = datetime.combine(end_date, datetime.min.time(), tzinfo=now.tzinfo) + timedelta(days=1)
        return start, end
    raise ValueError(f"Unsupported period: {period}")


def check_in_paid_time(check_in) -> datetime:
    return as_utc(check_in.paid_at) or as_utc(check_in.check_in_time)


def _empty_month(key: str) -> Dict[str, float]:
    return {
        "month": key,
        "carWashRevenue": 0.0,
        "productSalesRevenue": 0.0,
        "washerSalaries": 0.0,
        "washerBonuses": 0.0,
        "customerBonuses": 0.0,
        "operatingExpenses": 0.0,
        "transactionCount": 0,
    }


def _finish(row: Dict) -> Dict:
    row["totalRevenue"] = row["carWashRevenue"] + row["productSalesRevenue"]
    row["totalExpenses"] = (
        row["washerSalaries"] + row["washerBonuses"] + row["customerBonuses"] + row["operatingExpenses"]
    )
    row["netProfit"] = row["totalRevenue"] - row["totalExpenses"]
    row["profitMargin"] = (row["netProfit"] / row["totalRevenue"] * 100) if row["totalRevenue"] else 0.0
    row["averageTransaction"] = (
        row["totalRevenue"] / row["transactionCount"] if row["transactionCount"] else 0.0
    )
    return row


def financial_report(
    months: int,
    check_ins: Iterable,
    sales: Iterable,
    payment_requests: Iterable,
    bonuses: Iterable,
    expenses: Iterable = (),
    now: Optional[datetime] = None,
) -> Dict:
    """
    Monthly revenue, expenses and profit for the last ``months`` months.

    Car wash revenue is the company's share of paid check-ins. Salaries are
    paid payment requests plus salary expenses; bonuses count once approved or
    paid; every other recorded expense is an operating expense.
    """
    keys = recent_month_keys(months, now)
    by_month = OrderedDict((key, _empty_month(key)) for key in keys)

    def bucket(value: Optional[datetime]):
        value = as_utc(value)
        return by_month.get(month_key(value)) if value else None

    for check_in in check_ins:
        if check_in.payment_status != PaymentStatus.PAID:
            continue
        row = bucket(check_in_paid_time(check_in))
        if row is not None:
            row["carWashRevenue"] += check_in.company_income or 0.0
            row["transactionCount"] += 1

    for sale in sales:
        if sale.status != SaleStatus.COMPLETED:
            continue
        row = bucket(sale.created_at)
        if row is not None:
            row["productSalesRevenue"] += sale.total_amount
            row["transactionCount"] += 1

    pending_wages = 0.0
    for payment_request in payment_requests:
        if payment_request.status == PaymentRequestStatus.PAID:
            row = bucket(payment_request.paid_at or payment_request.created_at)
            if row is not None:
                row["washerSalaries"] += payment_request.approved_amount or payment_request.requested_amount
        elif payment_request.status in (PaymentRequestStatus.PENDING, PaymentRequestStatus.APPROVED):
            pending_wages += payment_request.approved_amount or payment_request.requested_amount

    for bonus in bonuses:
        if bonus.status not in (BonusStatus.APPROVED, BonusStatus.PAID):
            continue
        row = bucket(bonus.created_at)
        if row is None:
            continue
        if bonus.type == BonusType.WASHER:
            row["washerBonuses"] += bonus.amount
        else:
            row["customerBonuses"] += bonus.amount

    for expense in expenses:
        row = bucket(expense.expense_date)
        if row is None:
            continue
        if expense.service_type == ExpenseType.SALARY:
            row["washerSalaries"] += expense.amount
        else:
            row["operatingExpenses"] += expense.amount

    rows = [_finish(row) for row in by_month.values()]

    summary = _empty_month("total")
    del summary["month"]
    for row in rows:
        for field in summary:
            summary[field] += row[field]
    summary = _finish(summary)
    summary["totalWages"] = summary["washerSalaries"]
    summary["pendingWages"] = pending_wages

    return {"months": rows, "summary": summary}


def _empty_group(key: str) -> Dict:
    return {
        "period": key,
        "carWashRevenue": 0.0,
        "stockSalesRevenue": 0.0,
        "carWashTransactions": 0,
        "salesTransactions": 0,
        "pendingPayments": 0,
        "pendingAmount": 0.0,
        "paymentMethods": {method: 0.0 for method in PAYMENT_METHODS},
    }


def payment_report(
    report_type: str,
    view_mode: str,
    check_ins: Iterable,
    sales: Iterable,
) -> Dict:
    """
    Revenue grouped by day, week or month with a payment method breakdown.

    Paid check-ins count towards revenue; unpaid ones are reported as pending.
    """
    groups: Dict[str, Dict] = {}

    def group(value: datetime) -> Dict:
        key = group_key(as_utc(value), report_type)
        if key not in groups:
            groups[key] = _empty_group(key)
        return groups[key]

    if view_mode != "stock-sales-only":
        for check_in in check_ins:
            row = group(check_in.check_in_time)
            if check_in.payment_status == PaymentStatus.PAID:
                row["carWashRevenue"] += check_in.total_amount
                row["carWashTransactions"] += 1
                method = check_in.payment_method.value if check_in.payment_method else "cash"
                row["paymentMethods"][method] += check_in.total_amount
            else:
                row["pendingPayments"] += 1
                row["pendingAmount"] += check_in.total_amount

    if view_mode != "car-wash-only":
        for sale in sales:
            if sale.status != SaleStatus.COMPLETED:
                continue
            row = group(sale.created_at)
            row["stockSalesRevenue"] += sale.total_amount
            row["salesTransactions"] += 1
            row["paymentMethods"][sale.payment_method.value] += sale.total_amount

    rows = sorted(groups.values(), key=lambda r: r["period"], reverse=True)
    summary = _empty_group("total")
    for row in rows:
        for field in ("carWashRevenue", "stockSalesRevenue", "carWashTransactions",
                      "salesTransactions", "pendingPayments", "pendingAmount"):
            summary[field] += row[field]
        for method in PAYMENT_METHODS:
            summary["paymentMethods"][method] += row["paymentMethods"][method]
    for row in rows + [summary]:
        row["totalRevenue"] = row["carWashRevenue"] + row["stockSalesRevenue"]
        row["totalTransactions"] = row["carWashTransactions"] + row["salesTransactions"]
    del summary["period"]

    return {"groups": rows, "summary": summary}


def income_since(since: datetime, check_ins: Iterable, sales: Iterable) -> Dict[str, float]:
    car_wash = sum(
        c.total_amount for c in check_ins
        if c.payment_status == PaymentStatus.PAID and check_in_paid_time(c) >= since
    )
    stock_sales = sum(
        s.total_amount for s in sales
        if s.status == SaleStatus.COMPLETED and as_utc(s.created_at) >= since
    )
    return {
        "totalIncome": car_wash + stock_sales,
        "carWashIncome": car_wash,
        "stockSalesIncome": stock_sales,
    }
