# app/services/analytics_service.py
import logging
import threading
from datetime import date, datetime

from cachetools import TTLCache
from fastapi import HTTPException, status
from sqlmodel import Session

from app.analytics.breakdowns import compute_breakdown, top_products
from app.analytics.charts import build_revenue_series
from app.analytics.customers import customer_growth, retention_rate, top_customers
from app.analytics.export import render_csv
from app.analytics.metrics import growth_percent, summarize_orders
from app.analytics.orders import orders_by_hour, status_distribution
from app.analytics.periods import (
    InvalidPeriodError,
    ReportWindow,
    resolve_period,
    utcnow,
)
from app.analytics.revenue import discount_impact, monthly_revenue, year_bounds
from app.repositories.analytics_repo import AnalyticsRepository
from app.schemas.analytics import (
    AnalyticsDashboard,
    AnalyticsOverview,
    BreakdownEntry,
    CustomerAnalytics,
    CustomerGrowthRead,
    DiscountImpactRead,
    HourlyOrdersRead,
    MonthlyRevenueRead,
    OrderAnalytics,
    RevenueAnalytics,
    RevenueChart,
    StatusCountRead,
    TopCustomerRead,
    TopProductRead,
)

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Builds the admin analytics report.

    Responsibilities:
      - resolve the requested period into current/previous windows
      - fetch paid orders for both windows through the repository
      - derive overview, growth, chart and breakdowns
      - cache reports for named periods (custom ranges are always fresh)
      - map failures to a single generic HTTP error, never a partial report
      - customer, order and revenue analytics (uncached)
    """

    def __init__(
        self,
        repo: AnalyticsRepository,
        cache_ttl_seconds: int = 300,
        cache_max_entries: int = 64,
        top_products_limit: int = 5,
    ):
        self.repo = repo
        self.top_products_limit = top_products_limit
        self._cache: TTLCache | None = None
        if cache_ttl_seconds > 0:
            self._cache = TTLCache(maxsize=cache_max_entries, ttl=cache_ttl_seconds)
        self._cache_lock = threading.Lock()

    # -------- Cache --------

    def clear_cache(self) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            self._cache.clear()
        logger.info("Analytics cache cleared")

    def _cached(self, key: tuple) -> AnalyticsDashboard | None:
        if self._cache is None:
            return None
        with self._cache_lock:
            return self._cache.get(key)

    def _store(self, key: tuple, report: AnalyticsDashboard) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            self._cache[key] = report

    # -------- Reports --------

    def get_dashboard(
        self,
        session: Session,
        period: str = "month",
        start_date: datetime | date | None = None,
        end_date: datetime | date | None = None,
        now: datetime | None = None,
    ) -> AnalyticsDashboard:
        window = self._resolve(period, start_date, end_date, now)

        cache_key = (window.period, window.start_date, window.end_date)
        cacheable = window.period != "custom"
        if cacheable:
            cached = self._cached(cache_key)
            if cached is not None:
                return cached

        try:
            report = self._build_dashboard(session, window)
        except Exception:
            logger.exception(
                "Analytics report failed for period=%s window=%s..%s",
                window.period,
                window.start_date,
                window.end_date,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch analytics data",
            )

        if cacheable:
            self._store(cache_key, report)
        return report

    def export_csv(
        self,
        session: Session,
        period: str = "month",
        start_date: datetime | date | None = None,
        end_date: datetime | date | None = None,
        now: datetime | None = None,
    ) -> tuple[str, str]:
        """
        CSV rendering of the current window.

        Returns:
            (filename, csv text)
        """
        now = now or utcnow()
        window = self._resolve(period, start_date, end_date, now)

        try:
            orders = self.repo.fetch_paid_orders(
                session, window.start_date, window.end_date
            )
            content = render_csv(
                summarize_orders(orders),
                top_products(orders, limit=self.top_products_limit),
                compute_breakdown(orders, "category"),
            )
        except Exception:
            logger.exception("Analytics export failed for period=%s", window.period)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to export analytics data",
            )

        filename = f"analytics-{window.period}-{now:%Y-%m-%d}.csv"
        return filename, content

    def get_customer_analytics(self, session: Session) -> CustomerAnalytics:
        """
        All-time customer growth, top spenders and retention, over paid
        non-cancelled orders.
        """
        try:
            orders = self.repo.fetch_order_summaries(session, paid_only=True)
            buyers = {o.user_id for o in orders if o.user_id is not None}
            customers = self.repo.fetch_customers(session, buyers)
            signups = self.repo.fetch_customer_signups(session)

            return CustomerAnalytics(
                customer_growth=[
                    CustomerGrowthRead(**p.model_dump()) for p in customer_growth(signups)
                ],
                top_customers=[
                    TopCustomerRead(**c.model_dump())
                    for c in top_customers(orders, customers)
                ],
                retention_rate=retention_rate(orders),
            )
        except Exception:
            logger.exception("Customer analytics failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch customer analytics",
            )

    def get_order_analytics(
        self,
        session: Session,
        period: str = "month",
        start_date: datetime | date | None = None,
        end_date: datetime | date | None = None,
        now: datetime | None = None,
    ) -> OrderAnalytics:
        window = self._resolve(period, start_date, end_date, now)

        try:
            orders = self.repo.fetch_order_summaries(
                session, window.start_date, window.end_date
            )
            return OrderAnalytics(
                period=window.period,
                start_date=window.start_date,
                end_date=window.end_date,
                status_distribution=[
                    StatusCountRead(**s.model_dump()) for s in status_distribution(orders)
                ],
                orders_by_hour=[
                    HourlyOrdersRead(**h.model_dump()) for h in orders_by_hour(orders)
                ],
            )
        except Exception:
            logger.exception("Order analytics failed for period=%s", window.period)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch order analytics",
            )

    def get_revenue_analytics(
        self,
        session: Session,
        year: int | None = None,
        now: datetime | None = None,
    ) -> RevenueAnalytics:
        """
        Month-by-month revenue and discount totals for one calendar year
        (the current one by default).
        """
        year = year or (now or utcnow()).year
        start, end = year_bounds(year)

        try:
            orders = self.repo.fetch_order_summaries(session, start, end, paid_only=True)
            return RevenueAnalytics(
                year=year,
                monthly_revenue=[
                    MonthlyRevenueRead(**m.model_dump())
                    for m in monthly_revenue(orders, year)
                ],
                discount_impact=DiscountImpactRead(
                    **discount_impact(orders).model_dump()
                ),
            )
        except Exception:
            logger.exception("Revenue analytics failed for year=%s", year)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch revenue analytics",
            )

    # -------- Helpers --------

    @staticmethod
    def _resolve(
        period: str,
        start_date: datetime | date | None,
        end_date: datetime | date | None,
        now: datetime | None,
    ) -> ReportWindow:
        try:
            return resolve_period(period, start_date, end_date, now=now)
        except InvalidPeriodError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            )

    def _build_dashboard(
        self,
        session: Session,
        window: ReportWindow,
    ) -> AnalyticsDashboard:
        orders = self.repo.fetch_paid_orders(
            session, window.start_date, window.end_date
        )
        previous_orders = self.repo.fetch_paid_orders(
            session, window.previous_start_date, window.previous_end_date
        )

        current = summarize_orders(orders)
        previous = summarize_orders(previous_orders)

        overview = AnalyticsOverview(
            total_revenue=current.total_revenue,
            total_orders=current.total_orders,
            total_products=current.total_units,
            total_customers=current.total_customers,
            revenue_growth=growth_percent(current.total_revenue, previous.total_revenue),
            order_growth=growth_percent(current.total_orders, previous.total_orders),
            avg_order_value=current.avg_order_value,
        )

        series = build_revenue_series(
            orders, window.period, window.start_date, window.end_date
        )

        top = [
            TopProductRead(
                id=p.id,
                name=p.name,
                units_sold=p.units_sold,
                revenue=p.revenue,
                is_custom=p.is_custom,
                views=p.views,
                conversion_rate=p.conversion_rate,
            )
            for p in top_products(orders, limit=self.top_products_limit)
        ]

        return AnalyticsDashboard(
            period=window.period,
            start_date=window.start_date,
            end_date=window.end_date,
            overview=overview,
            revenue_chart=RevenueChart(labels=series.labels, series=series.values),
            top_products=top,
            category_breakdown=self._entries(compute_breakdown(orders, "category")),
            product_type_breakdown=self._entries(
                compute_breakdown(orders, "product_type")
            ),
        )

    @staticmethod
    def _entries(groups) -> list[BreakdownEntry]:
        return [
            BreakdownEntry(
                id=g.id,
                name=g.name,
                revenue=g.revenue,
                units=g.units,
                percentage_of_total=g.percentage_of_total,
            )
            for g in groups
        ]
