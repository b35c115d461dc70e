# app/routers/analytics.py
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response
from sqlmodel import Session

from app.core.auth import require_admin
from app.core.config import get_settings
from app.database import get_session
from app.repositories.analytics_repo import AnalyticsRepository
from app.schemas.analytics import (
    AnalyticsDashboard,
    CacheClearResult,
    CustomerAnalytics,
    OrderAnalytics,
    RevenueAnalytics,
)
from app.services.analytics_service import AnalyticsService

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    dependencies=[Depends(require_admin)],
)

settings = get_settings()

repo = AnalyticsRepository()
service = AnalyticsService(
    repo,
    cache_ttl_seconds=settings.ANALYTICS_CACHE_TTL_SECONDS,
    cache_max_entries=settings.ANALYTICS_CACHE_MAX_ENTRIES,
    top_products_limit=settings.ANALYTICS_TOP_PRODUCTS_LIMIT,
)


@router.get("/dashboard", response_model=AnalyticsDashboard)
def get_dashboard(
    period: str = "month",
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    session: Session = Depends(get_session),
):
    """
    Sales analytics report for the admin dashboard.

    Query params:
      - period: today | week | month | quarter | year | custom
        (anything else: trailing 30 days)
      - startDate / endDate: ISO date or datetime, used when period=custom

    Only accessible to users with role='admin'.
    """
    return service.get_dashboard(session, period, start_date, end_date)


@router.get("/export")
def export_analytics(
    period: str = "month",
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    session: Session = Depends(get_session),
):
    """
    Same window as /dashboard, rendered as a CSV attachment.
    """
    filename, content = service.export_csv(session, period, start_date, end_date)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.delete("/cache", response_model=CacheClearResult)
def clear_cache():
    """
    Drop cached reports so the next request re-reads orders.
    """
    service.clear_cache()
    return CacheClearResult(message="Analytics cache cleared")


@router.get("/customers", response_model=CustomerAnalytics)
def get_customer_analytics(session: Session = Depends(get_session)):
    """
    Customer sign-ups per month, top 10 customers by spend and the
    repeat-customer rate.
    """
    return service.get_customer_analytics(session)


@router.get("/orders", response_model=OrderAnalytics)
def get_order_analytics(
    period: str = "month",
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    session: Session = Depends(get_session),
):
    """
    Order status distribution and orders per hour of day.

    Takes the same period / startDate / endDate params as /dashboard.
    """
    return service.get_order_analytics(session, period, start_date, end_date)


@router.get("/revenue", response_model=RevenueAnalytics)
def get_revenue_analytics(
    year: int | None = Query(None, ge=1970, le=2100),
    session: Session = Depends(get_session),
):
    """
    Monthly revenue and coupon discount totals for `year`
    (defaults to the current year).
    """
    return service.get_revenue_analytics(session, year)
