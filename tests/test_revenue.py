# tests/test_revenue.py
from datetime import datetime

from app.analytics.revenue import discount_impact, monthly_revenue, year_bounds


def test_year_bounds():
    start, end = year_bounds(2025)

    assert start == datetime(2025, 1, 1)
    assert end == datetime(2025, 12, 31, 23, 59, 59, 999999)


def test_monthly_revenue(factories):
    orders = [
        factories.make_summary(datetime(2025, 1, 5), 300),
        factories.make_summary(datetime(2025, 1, 20), 500),
        factories.make_summary(datetime(2025, 12, 31, 23, 59), 200),
        factories.make_summary(datetime(2024, 12, 31), 9999),
    ]

    months = monthly_revenue(orders, 2025)

    assert len(months) == 12
    assert [m.label for m in months][:3] == ["Jan", "Feb", "Mar"]
    assert (months[0].revenue, months[0].orders, months[0].avg_order_value) == (800, 2, 400)
    assert months[1].revenue == 0
    assert months[1].avg_order_value == 0
    assert months[11].revenue == 200
    assert sum(m.revenue for m in months) == 1000


def test_discount_impact(factories):
    t = datetime(2025, 5, 1)
    orders = [
        factories.make_summary(t, 900, discount=100),
        factories.make_summary(t, 450, discount=50),
        factories.make_summary(t, 300),
    ]

    impact = discount_impact(orders)

    assert impact.total_discount == 150
    assert impact.orders_with_discount == 2
    assert impact.avg_discount_per_order == 75


def test_discount_impact_without_discounts(factories):
    impact = discount_impact([factories.make_summary(datetime(2025, 5, 1), 300)])

    assert impact.total_discount == 0
    assert impact.orders_with_discount == 0
    assert impact.avg_discount_per_order == 0
