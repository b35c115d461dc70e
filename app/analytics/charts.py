# app/analytics/charts.py
"""
Revenue time series for the dashboard chart.

Each period maps to a bucket plan: the ordered labels plus a function
placing a timestamp into one of them. Buckets partition the window, so
the series always sums to the revenue of the orders inside it.
"""
from datetime import datetime, timedelta
from typing import Callable, Iterable

from pydantic import BaseModel

from app.analytics.periods import as_naive_utc, days_spanned
from app.analytics.snapshots import OrderSnapshot

HOUR_LABELS = [f"{hour}:00" for hour in range(24)]
WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_LABELS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

MONTH_WEEK_BUCKETS = 4
QUARTER_MONTH_BUCKETS = 3
# Longest range still charted one bar per day
MAX_DAILY_BUCKET_DAYS = 31

BucketIndex = Callable[[datetime], int]


class RevenueSeries(BaseModel):
    labels: list[str]
    values: list[int]


def _month_offset(start: datetime, ts: datetime) -> int:
    return (ts.year - start.year) * 12 + (ts.month - start.month)


def _hourly() -> tuple[list[str], BucketIndex]:
    return list(HOUR_LABELS), lambda ts: ts.hour


def _daily(start: datetime, end: datetime) -> tuple[list[str], BucketIndex]:
    first_day = start.date()
    day_count = (end.date() - first_day).days + 1
    labels = [
        (first_day + timedelta(days=offset)).strftime("%b %d")
        for offset in range(day_count)
    ]
    return labels, lambda ts: (ts.date() - first_day).days


def _weekly(start: datetime, bucket_count: int) -> tuple[list[str], BucketIndex]:
    labels = [f"Week {k}" for k in range(1, bucket_count + 1)]
    # The final bucket absorbs any remainder shorter than a week
    return labels, lambda ts: min((ts - start).days // 7, bucket_count - 1)


def _by_length(start: datetime, end: datetime) -> tuple[list[str], BucketIndex]:
    days = days_spanned(start, end)
    if days <= 1:
        return _hourly()
    if days <= MAX_DAILY_BUCKET_DAYS:
        return _daily(start, end)
    return _weekly(start, -(-days // 7))


def bucket_plan(
    period: str,
    start_date: datetime,
    end_date: datetime,
) -> tuple[list[str], BucketIndex]:
    """
    Labels and bucket-index function for a window.

    Named periods use fixed calendar buckets; "custom" and the trailing
    default window pick hour/day/week granularity from their length.
    """
    if period == "today":
        return _hourly()

    if period == "week":
        return list(WEEKDAY_LABELS), lambda ts: (ts.weekday() + 1) % 7

    if period == "month":
        return _weekly(start_date, MONTH_WEEK_BUCKETS)

    if period == "quarter":
        labels = [f"Month {k}" for k in range(1, QUARTER_MONTH_BUCKETS + 1)]
        return labels, lambda ts: min(
            _month_offset(start_date, ts), QUARTER_MONTH_BUCKETS - 1
        )

    if period == "year":
        return list(MONTH_LABELS), lambda ts: ts.month - 1

    return _by_length(start_date, end_date)


def build_revenue_series(
    orders: Iterable[OrderSnapshot],
    period: str,
    start_date: datetime,
    end_date: datetime,
) -> RevenueSeries:
    """
    Sum order amounts per bucket of [start_date, end_date].

    Orders created outside the window are ignored.
    """
    labels, index_of = bucket_plan(period, start_date, end_date)
    values = [0] * len(labels)

    for order in orders:
        created_at = as_naive_utc(order.created_at)
        if created_at < start_date or created_at > end_date:
            continue
        values[index_of(created_at)] += order.amount

    return RevenueSeries(labels=labels, values=values)
