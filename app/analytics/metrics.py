# app/analytics/metrics.py
from typing import Iterable

from pydantic import BaseModel, ConfigDict

from app.analytics.snapshots import OrderSnapshot


class OrderMetrics(BaseModel):
    """
    Scalar metrics for one window.
    """

    model_config = ConfigDict(frozen=True)

    total_revenue: int = 0
    total_orders: int = 0
    total_units: int = 0
    total_customers: int = 0
    avg_order_value: float = 0.0


def total_revenue(orders: Iterable[OrderSnapshot]) -> int:
    return sum(order.amount for order in orders)


def order_count(orders: Iterable[OrderSnapshot]) -> int:
    return sum(1 for _ in orders)


def distinct_customers(orders: Iterable[OrderSnapshot]) -> int:
    """Registered customers only; guest orders have no user and are skipped."""
    return len({order.user_id for order in orders if order.user_id is not None})


def total_units(orders: Iterable[OrderSnapshot]) -> int:
    return sum(item.quantity for order in orders for item in order.products)


def avg_order_value(orders: list[OrderSnapshot]) -> float:
    if not orders:
        return 0.0
    return total_revenue(orders) / len(orders)


def summarize_orders(orders: list[OrderSnapshot]) -> OrderMetrics:
    return OrderMetrics(
        total_revenue=total_revenue(orders),
        total_orders=order_count(orders),
        total_units=total_units(orders),
        total_customers=distinct_customers(orders),
        avg_order_value=avg_order_value(orders),
    )


def growth_percent(current: float, previous: float) -> float:
    """
    Percentage change from `previous` to `current`.

    A window with no baseline (previous <= 0) reports 0.0 rather than an
    infinite or undefined growth.
    """
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0
