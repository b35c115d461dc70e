# app/analytics/export.py
import csv
import io

from app.analytics.breakdowns import GroupResult, TopProduct
from app.analytics.metrics import OrderMetrics


def render_csv(
    metrics: OrderMetrics,
    products: list[TopProduct],
    categories: list[GroupResult],
) -> str:
    """
    Render the overview, top products and category breakdown as one CSV
    document with blank-line separated sections.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["Metric", "Value"])
    writer.writerow(["Total Revenue", metrics.total_revenue])
    writer.writerow(["Total Orders", metrics.total_orders])
    writer.writerow(["Average Order Value", f"{metrics.avg_order_value:.2f}"])
    writer.writerow(["Total Customers", metrics.total_customers])

    writer.writerow([])
    writer.writerow(["Top Products"])
    writer.writerow(["Product", "Revenue", "Units Sold"])
    for product in products:
        writer.writerow([product.name, product.revenue, product.units_sold])

    writer.writerow([])
    writer.writerow(["Category Breakdown"])
    writer.writerow(["Category", "Revenue", "Percentage"])
    for category in categories:
        writer.writerow(
            [category.name, category.revenue, f"{category.percentage_of_total:.1f}%"]
        )

    return buffer.getvalue()
