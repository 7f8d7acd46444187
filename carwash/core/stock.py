"""
Inventory stock rules.
"""
import enum


class StockStatus(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    GOOD = "good"


def stock_status(current_stock: int, min_stock_level: int) -> StockStatus:
    """Classify a stock level against its minimum: low, medium (up to twice the minimum) or good."""
    if current_stock <= min_stock_level:
        return StockStatus.LOW
    if current_stock <= min_stock_level * 2:
        return StockStatus.MEDIUM
    return StockStatus.GOOD


def insufficient_stock_message(name: str, available: int, requested: int) -> str:
    return f"Insufficient stock for {name}. Available: {available}, Requested: {requested}"
