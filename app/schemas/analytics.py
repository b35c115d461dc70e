# app/schemas/analytics.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class AnalyticsOverview(SQLModel):
    """
    Headline metrics for the selected window.
    """
    model_config = ConfigDict(extra="forbid")

    total_revenue: int
    total_orders: int
    total_products: int = Field(description="Units sold in the window")
    total_customers: int
    revenue_growth: float = Field(description="% vs previous window")
    order_growth: float = Field(description="% vs previous window")
    avg_order_value: float
    conversion_rate: float | None = Field(
        default=None,
        description="Not tracked yet; always null",
    )


class RevenueChart(SQLModel):
    model_config = ConfigDict(extra="forbid")

    labels: list[str]
    series: list[int]


class TopProductRead(SQLModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    units_sold: int
    revenue: int
    is_custom: bool
    views: int | None = None
    conversion_rate: float | None = None


class BreakdownEntry(SQLModel):
    """
    One category / product type slice of the window's revenue.
    """
    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    revenue: int
    units: int
    percentage_of_total: float


class AnalyticsDashboard(SQLModel):
    """
    Full payload for the admin analytics dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    period: str
    start_date: datetime
    end_date: datetime
    overview: AnalyticsOverview
    revenue_chart: RevenueChart
    top_products: list[TopProductRead]
    category_breakdown: list[BreakdownEntry]
    product_type_breakdown: list[BreakdownEntry]


class CacheClearResult(SQLModel):
    message: str


# ---- Customer analytics ----


class CustomerGrowthRead(SQLModel):
    month: str
    new_customers: int


class TopCustomerRead(SQLModel):
    user_id: uuid.UUID
    name: str
    email: str
    total_orders: int
    total_spent: int
    avg_order_value: float


class CustomerAnalytics(SQLModel):
    """
    All-time customer picture over paid, non-cancelled orders.
    """
    model_config = ConfigDict(extra="forbid")

    customer_growth: list[CustomerGrowthRead]
    top_customers: list[TopCustomerRead]
    retention_rate: float = Field(description="% of ordering customers with 2+ orders")


# ---- Order analytics ----


class StatusCountRead(SQLModel):
    status: str
    count: int
    total_value: int


class HourlyOrdersRead(SQLModel):
    hour: int
    label: str
    count: int
    avg_value: float


class OrderAnalytics(SQLModel):
    """
    Every order in the window, whatever its payment or fulfilment state.
    """
    model_config = ConfigDict(extra="forbid")

    period: str
    start_date: datetime
    end_date: datetime
    status_distribution: list[StatusCountRead]
    orders_by_hour: list[HourlyOrdersRead]


# ---- Revenue analytics ----


class MonthlyRevenueRead(SQLModel):
    month: int
    label: str
    revenue: int
    orders: int
    avg_order_value: float


class DiscountImpactRead(SQLModel):
    total_discount: int
    orders_with_discount: int
    avg_discount_per_order: float


class RevenueAnalytics(SQLModel):
    model_config = ConfigDict(extra="forbid")

    year: int
    monthly_revenue: list[MonthlyRevenueRead]
    discount_impact: DiscountImpactRead
