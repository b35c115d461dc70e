# tests/test_export.py
from datetime import datetime

from app.analytics.breakdowns import compute_breakdown, top_products
from app.analytics.export import render_csv
from app.analytics.metrics import summarize_orders

T = datetime(2025, 5, 14, 12)


def test_render_csv_sections(factories):
    tee = factories.catalog_product("Akatsuki Cloud Tee", 300, "Naruto")
    orders = [
        factories.make_order(
            T, 800, [factories.catalog_item(tee, 2), factories.custom_item(price=200)]
        ),
        factories.make_order(T, 300, [factories.catalog_item(tee)]),
    ]

    text = render_csv(
        summarize_orders(orders),
        top_products(orders),
        compute_breakdown(orders, "category"),
    )
    lines = text.splitlines()

    assert lines[:5] == [
        "Metric,Value",
        "Total Revenue,1100",
        "Total Orders,2",
        "Average Order Value,550.00",
        "Total Customers,0",
    ]
    top_start = lines.index("Top Products")
    assert lines[top_start - 1] == ""
    assert lines[top_start + 1] == "Product,Revenue,Units Sold"
    assert lines[top_start + 2] == "Akatsuki Cloud Tee,900,3"
    assert lines[top_start + 3] == "Custom Design T-Shirts,200,1"

    cat_start = lines.index("Category Breakdown")
    assert lines[cat_start + 1] == "Category,Revenue,Percentage"
    assert lines[cat_start + 2] == "Naruto,900,81.8%"
    assert lines[cat_start + 3] == "Custom Designs,200,18.2%"


def test_render_csv_quotes_names_with_commas(factories):
    tee = factories.catalog_product("Tee, Limited", 100)
    orders = [factories.make_order(T, 100, [factories.catalog_item(tee)])]

    text = render_csv(summarize_orders(orders), top_products(orders), [])

    assert '"Tee, Limited",100,1' in text.splitlines()


def test_render_csv_empty_window():
    text = render_csv(summarize_orders([]), [], [])
    lines = text.splitlines()

    assert "Average Order Value,0.00" in lines
    assert lines[-1] == "Category,Revenue,Percentage"
