"""
Milestone condition evaluation.

A condition is a mapping such as ``{"operator": ">=", "value": 5}`` with an
optional ``period`` restricting which visits count.
"""
from datetime import datetime, timedelta
import operator
from typing import Any, Mapping, Optional

from carwash.utils import utcnow

OPERATORS = {
    ">=": operator.ge,
    "<=": operator.le,
    "=": operator.eq,
    ">": operator.gt,
    "<": operator.lt,
}

PERIODS = ("all_time", "daily", "weekly", "monthly", "yearly")

_PERIOD_DAYS = {"weekly": 7, "monthly": 30, "yearly": 365}


def evaluate_condition(condition: Mapping[str, Any], actual: float) -> bool:
    """True when ``actual`` satisfies the condition. Unknown operators never qualify."""
    compare = OPERATORS.get(condition.get("operator"))
    if compare is None:
        return False
    try:
        threshold = float(condition.get("value"))
    except (TypeError, ValueError):
        return False
    return compare(float(actual), threshold)


def validate_condition(condition: Mapping[str, Any]) -> Optional[str]:
    """Return an error message for a malformed condition, else None."""
    if not isinstance(condition, Mapping):
        return "Invalid condition format"
    if not condition.get("operator") or condition.get("value") is None:
        return "Invalid condition format"
    if condition["operator"] not in OPERATORS:
        return f"Unsupported operator: {condition['operator']}"
    try:
        float(condition["value"])
    except (TypeError, ValueError):
        return "Condition value must be a number"
    period = condition.get("period", "all_time")
    if period not in PERIODS:
        return f"Unsupported period: {period}"
    return None


def period_start(period: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """Earliest check-in time counted for a period, or None for all time."""
    now = now or utcnow()
    if not period or period == "all_time":
        return None
    if period == "daily":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    days = _PERIOD_DAYS.get(period)
    if days is None:
        return None
    return now - timedelta(days=days)
