# app/analytics/periods.py
"""
Period resolution: named report periods -> concrete date windows.

All datetimes are naive and read as UTC wall-clock time. Weeks start on
Sunday. A window is closed on both ends; end-of-day is 23:59:59.999999.
"""
import logging
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

PeriodName = Literal["today", "week", "month", "quarter", "year", "custom"]

NAMED_PERIODS: tuple[str, ...] = ("today", "week", "month", "quarter", "year")

# Period reported back when a request falls through to the trailing window
DEFAULT_PERIOD = "default"
DEFAULT_WINDOW_DAYS = 30

ONE_DAY = timedelta(days=1)
ONE_MICROSECOND = timedelta(microseconds=1)


class InvalidPeriodError(ValueError):
    """Raised when an explicit date range is inverted."""


class ReportWindow(BaseModel):
    """
    Current window plus the preceding comparison window.

    `period` is the effective period: "custom" requested without both
    dates resolves to DEFAULT_PERIOD.
    """

    model_config = ConfigDict(frozen=True)

    period: str
    start_date: datetime
    end_date: datetime
    previous_start_date: datetime
    previous_end_date: datetime

    @property
    def duration(self) -> timedelta:
        return self.end_date - self.start_date

    @property
    def previous_duration(self) -> timedelta:
        return self.previous_end_date - self.previous_start_date


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime | date) -> datetime:
    """
    Coerce a date or datetime to a naive UTC datetime.

    Plain dates become midnight; aware datetimes are converted to UTC.
    """
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max)


def start_of_week(value: datetime) -> datetime:
    # datetime.weekday() is Monday=0; shift so Sunday opens the week
    days_since_sunday = (value.weekday() + 1) % 7
    return start_of_day(value) - timedelta(days=days_since_sunday)


def start_of_month(value: datetime) -> datetime:
    return datetime(value.year, value.month, 1)


def add_months(value: datetime, months: int) -> datetime:
    """Shift the first-of-month `value` by `months` calendar months."""
    index = value.year * 12 + (value.month - 1) + months
    return value.replace(year=index // 12, month=index % 12 + 1, day=1)


def days_spanned(start: datetime, end: datetime) -> int:
    """Whole days covered by [start, end], rounding partial days up."""
    return math.ceil((end - start) / ONE_DAY)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _window(
    period: str,
    start: datetime,
    end: datetime,
    previous_start: datetime,
    previous_end: datetime,
) -> ReportWindow:
    return ReportWindow(
        period=period,
        start_date=start,
        end_date=end,
        previous_start_date=previous_start,
        previous_end_date=previous_end,
    )


def _calendar_window(period: str, now: datetime) -> ReportWindow:
    if period == "today":
        start = start_of_day(now)
        return _window(
            period, start, end_of_day(now), start - ONE_DAY, start - ONE_MICROSECOND
        )

    if period == "week":
        start = start_of_week(now)
        week = timedelta(days=7)
        return _window(
            period,
            start,
            start + week - ONE_MICROSECOND,
            start - week,
            start - ONE_MICROSECOND,
        )

    if period == "month":
        start = start_of_month(now)
        return _window(
            period,
            start,
            add_months(start, 1) - ONE_MICROSECOND,
            add_months(start, -1),
            start - ONE_MICROSECOND,
        )

    if period == "quarter":
        quarter = (now.month - 1) // 3
        start = datetime(now.year, quarter * 3 + 1, 1)
        return _window(
            period,
            start,
            add_months(start, 3) - ONE_MICROSECOND,
            add_months(start, -3),
            start - ONE_MICROSECOND,
        )

    # year
    start = datetime(now.year, 1, 1)
    return _window(
        period,
        start,
        datetime(now.year + 1, 1, 1) - ONE_MICROSECOND,
        datetime(now.year - 1, 1, 1),
        start - ONE_MICROSECOND,
    )


def _custom_window(custom_start: datetime, custom_end: datetime) -> ReportWindow:
    start = start_of_day(custom_start)
    end = end_of_day(custom_end)
    if start > end:
        raise InvalidPeriodError("startDate must be on or before endDate")

    # Shift the whole range back by its own length in days
    shift = timedelta(days=days_spanned(start, end))
    return _window(
        "custom",
        start,
        end,
        start_of_day(start - shift),
        end_of_day(end - shift),
    )


def _default_window(now: datetime) -> ReportWindow:
    span = timedelta(days=DEFAULT_WINDOW_DAYS)
    return _window(DEFAULT_PERIOD, now - span, now, now - 2 * span, now - span)


def resolve_period(
    period: str | None,
    custom_start: datetime | date | None = None,
    custom_end: datetime | date | None = None,
    now: datetime | None = None,
) -> ReportWindow:
    """
    Resolve `period` into the current window and the comparison window.

    Args:
        period: today | week | month | quarter | year | custom; anything
            else selects the trailing 30-day window.
        custom_start, custom_end: only read when period == "custom".
        now: reference instant, defaults to the current UTC time.

    Raises:
        InvalidPeriodError: custom range whose start is after its end.
    """
    now = as_naive_utc(now) if now is not None else utcnow()

    if period == "custom":
        if custom_start is not None and custom_end is not None:
            return _custom_window(as_naive_utc(custom_start), as_naive_utc(custom_end))
        logger.warning(
            "Custom period requested without both dates (start=%s, end=%s); "
            "using the trailing %d-day window",
            custom_start,
            custom_end,
            DEFAULT_WINDOW_DAYS,
        )
        return _default_window(now)

    if period in NAMED_PERIODS:
        return _calendar_window(period, now)

    return _default_window(now)
