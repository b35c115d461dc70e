# app/analytics/customers.py
"""
Customer analytics: sign-ups per month, biggest spenders and how many
customers come back for a second order.

Only registered customers count; guest orders (user_id None) are skipped.
"""
import uuid
from collections import Counter, defaultdict
from datetime import datetime
from typing import Iterable

from pydantic import BaseModel

from app.analytics.snapshots import CustomerRef, OrderSummary

GROWTH_MONTHS = 12
TOP_CUSTOMERS_LIMIT = 10


class CustomerGrowthPoint(BaseModel):
    month: str  # "YYYY-MM"
    new_customers: int


class TopCustomer(BaseModel):
    user_id: uuid.UUID
    name: str
    email: str
    total_orders: int
    total_spent: int
    avg_order_value: float


def customer_growth(
    signups: Iterable[datetime],
    months: int = GROWTH_MONTHS,
) -> list[CustomerGrowthPoint]:
    """
    New customers per calendar month, oldest first, for the latest
    `months` months that had any sign-up.
    """
    per_month = Counter(created_at.strftime("%Y-%m") for created_at in signups)
    latest = sorted(per_month)[-months:] if months > 0 else []
    return [CustomerGrowthPoint(month=m, new_customers=per_month[m]) for m in latest]


def _orders_by_customer(
    orders: Iterable[OrderSummary],
) -> dict[uuid.UUID, list[OrderSummary]]:
    grouped: dict[uuid.UUID, list[OrderSummary]] = defaultdict(list)
    for order in orders:
        if order.user_id is not None:
            grouped[order.user_id].append(order)
    return grouped


def top_customers(
    orders: Iterable[OrderSummary],
    customers: dict[uuid.UUID, CustomerRef],
    limit: int = TOP_CUSTOMERS_LIMIT,
) -> list[TopCustomer]:
    """
    Customers ranked by total spend, highest first.

    Buyers whose profile no longer exists are left out before the limit
    is applied.
    """
    ranked: list[TopCustomer] = []
    for user_id, placed in _orders_by_customer(orders).items():
        profile = customers.get(user_id)
        if profile is None:
            continue
        spent = sum(o.amount for o in placed)
        ranked.append(
            TopCustomer(
                user_id=user_id,
                name=profile.name,
                email=profile.email,
                total_orders=len(placed),
                total_spent=spent,
                avg_order_value=spent / len(placed),
            )
        )

    ranked.sort(key=lambda c: c.total_spent, reverse=True)
    return ranked[:limit]


def retention_rate(orders: Iterable[OrderSummary]) -> float:
    """
    Share of ordering customers with more than one order, in percent,
    rounded to two decimals. 0.0 when nobody has ordered.
    """
    grouped = _orders_by_customer(orders)
    if not grouped:
        return 0.0
    repeat = sum(1 for placed in grouped.values() if len(placed) > 1)
    return round(repeat / len(grouped) * 100, 2)
