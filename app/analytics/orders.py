# app/analytics/orders.py
"""
Order analytics: how orders spread over fulfilment status and over the
hours of the day.

These read every order in the window whatever its payment or fulfilment
state, so cancelled and unpaid orders show up here.
"""
from collections import defaultdict
from typing import Iterable

from pydantic import BaseModel

from app.analytics.snapshots import OrderSummary

# Lifecycle order used to sort the distribution; unknown statuses follow
ORDER_STATUSES: tuple[str, ...] = (
    "Received",
    "Processing",
    "Shipped",
    "Delivered",
    "Cancelled",
)


class StatusCount(BaseModel):
    status: str
    count: int
    total_value: int


class HourlyOrders(BaseModel):
    hour: int
    label: str
    count: int
    avg_value: float


def _status_rank(status: str) -> tuple[int, str]:
    if status in ORDER_STATUSES:
        return ORDER_STATUSES.index(status), status
    return len(ORDER_STATUSES), status


def status_distribution(orders: Iterable[OrderSummary]) -> list[StatusCount]:
    counts: dict[str, int] = defaultdict(int)
    values: dict[str, int] = defaultdict(int)
    for order in orders:
        counts[order.status] += 1
        values[order.status] += order.amount

    return [
        StatusCount(status=s, count=counts[s], total_value=values[s])
        for s in sorted(counts, key=_status_rank)
    ]


def orders_by_hour(orders: Iterable[OrderSummary]) -> list[HourlyOrders]:
    """Order count and average value for each of the 24 UTC hours."""
    counts = [0] * 24
    totals = [0] * 24
    for order in orders:
        hour = order.created_at.hour
        counts[hour] += 1
        totals[hour] += order.amount

    return [
        HourlyOrders(
            hour=h,
            label=f"{h}:00",
            count=counts[h],
            avg_value=totals[h] / counts[h] if counts[h] else 0.0,
        )
        for h in range(24)
    ]
