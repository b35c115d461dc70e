# app/analytics/revenue.py
"""
Revenue analytics for one calendar year: month-by-month revenue and the
effect of coupon discounts.
"""
from datetime import datetime
from typing import Iterable

from pydantic import BaseModel

from app.analytics.periods import ONE_MICROSECOND
from app.analytics.snapshots import OrderSummary

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class MonthlyRevenue(BaseModel):
    month: int
    label: str
    revenue: int
    orders: int
    avg_order_value: float


class DiscountImpact(BaseModel):
    total_discount: int = 0
    orders_with_discount: int = 0
    avg_discount_per_order: float = 0.0


def year_bounds(year: int) -> tuple[datetime, datetime]:
    return datetime(year, 1, 1), datetime(year + 1, 1, 1) - ONE_MICROSECOND


def monthly_revenue(orders: Iterable[OrderSummary], year: int) -> list[MonthlyRevenue]:
    """Twelve entries, January first; orders from other years are ignored."""
    revenue = [0] * 12
    counts = [0] * 12
    for order in orders:
        if order.created_at.year != year:
            continue
        index = order.created_at.month - 1
        revenue[index] += order.amount
        counts[index] += 1

    return [
        MonthlyRevenue(
            month=i + 1,
            label=MONTH_LABELS[i],
            revenue=revenue[i],
            orders=counts[i],
            avg_order_value=revenue[i] / counts[i] if counts[i] else 0.0,
        )
        for i in range(12)
    ]


def discount_impact(orders: Iterable[OrderSummary]) -> DiscountImpact:
    discounts = [o.discount for o in orders if o.discount > 0]
    if not discounts:
        return DiscountImpact()
    return DiscountImpact(
        total_discount=sum(discounts),
        orders_with_discount=len(discounts),
        avg_discount_per_order=sum(discounts) / len(discounts),
    )
