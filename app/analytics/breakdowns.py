# app/analytics/breakdowns.py
"""
Revenue breakdowns by product, category and product type.

Every line item lands in exactly one group per dimension. Custom-design
items (no catalog product) always go to a dedicated custom group.
"""
import re
from typing import Iterable, Literal

from pydantic import BaseModel

from app.analytics.snapshots import (
    LegacyProductType,
    LineItem,
    OrderSnapshot,
    ProductTypeRef,
    ProductTypeReference,
)

Dimension = Literal["product", "category", "product_type"]

# (key, display name) of the custom-design group per dimension
CUSTOM_GROUPS: dict[str, tuple[str, str]] = {
    "product": ("custom-design", "Custom Design T-Shirts"),
    "category": ("custom-designs", "Custom Designs"),
    "product_type": ("custom-tshirt", "Custom T-Shirt"),
}

UNCATEGORIZED = ("uncategorized", "Uncategorized")
OTHER_PRODUCT_TYPE = ("other", "Other")

# Display names for pre-migration product type labels, keyed by the
# normalized label.
LEGACY_PRODUCT_TYPE_NAMES: dict[str, str] = {
    "tshirt": "T-Shirt",
    "vest": "Vest",
    "hoodie": "Hoodie",
    "oversizedtee": "Oversized Tee",
    "acidwash": "Acid Wash",
    "tanktop": "Tank Top",
    "longsleeve": "Long Sleeve",
    "croptop": "Crop Top",
    "other": "Other",
}

_LABEL_SEPARATORS = re.compile(r"[\s\-]+")


class GroupResult(BaseModel):
    id: str
    name: str
    revenue: int
    units: int
    percentage_of_total: float


class TopProduct(BaseModel):
    """
    Best-selling product of a window.

    `views` and `conversion_rate` stay None until storefront view
    tracking exists.
    """

    id: str
    name: str
    units_sold: int
    revenue: int
    is_custom: bool
    views: int | None = None
    conversion_rate: float | None = None


class GroupAccumulator(BaseModel):
    name: str
    revenue: int = 0
    units: int = 0
    is_custom: bool = False


def normalize_product_type(ref: ProductTypeRef | None) -> tuple[str, str]:
    """
    Single resolution point for both product type representations.

    Returns (group key, display name).
    """
    if ref is None:
        return OTHER_PRODUCT_TYPE

    if isinstance(ref, ProductTypeReference):
        return str(ref.id), ref.display_name

    if isinstance(ref, LegacyProductType):
        key = _LABEL_SEPARATORS.sub("", ref.label.strip().lower())
        if not key:
            return OTHER_PRODUCT_TYPE
        return key, LEGACY_PRODUCT_TYPE_NAMES.get(key, ref.label.strip().title())

    raise TypeError(f"Unsupported product type reference: {ref!r}")


def _group_of(item: LineItem, dimension: str) -> tuple[str, str]:
    if item.is_custom_design:
        return CUSTOM_GROUPS[dimension]

    product = item.product

    if dimension == "product":
        if product is None:
            return str(item.product_id), item.name or "Unknown product"
        return str(product.id), product.name

    if dimension == "category":
        if product is None or product.category is None:
            return UNCATEGORIZED
        return str(product.category.id), product.category.name

    if dimension == "product_type":
        if product is None:
            return OTHER_PRODUCT_TYPE
        return normalize_product_type(product.product_type)

    raise ValueError(f"Unknown breakdown dimension: {dimension}")


def _accumulate(
    orders: Iterable[OrderSnapshot],
    dimension: str,
) -> tuple[dict[str, GroupAccumulator], int]:
    groups: dict[str, GroupAccumulator] = {}
    grand_total = 0

    for order in orders:
        for item in order.products:
            key, name = _group_of(item, dimension)
            group = groups.setdefault(
                key, GroupAccumulator(name=name, is_custom=item.is_custom_design)
            )
            revenue = item.revenue
            group.revenue += revenue
            group.units += item.quantity
            grand_total += revenue

    return groups, grand_total


def _ranked(groups: dict[str, GroupAccumulator]) -> list[tuple[str, GroupAccumulator]]:
    # sorted() is stable: equal revenues keep first-seen order
    return sorted(groups.items(), key=lambda entry: entry[1].revenue, reverse=True)


def compute_breakdown(
    orders: Iterable[OrderSnapshot],
    dimension: Dimension,
) -> list[GroupResult]:
    """
    Revenue, units and share of total per group, highest revenue first.
    """
    groups, grand_total = _accumulate(orders, dimension)

    results: list[GroupResult] = []
    for key, group in _ranked(groups):
        share = group.revenue / grand_total * 100 if grand_total > 0 else 0.0
        results.append(
            GroupResult(
                id=key,
                name=group.name,
                revenue=group.revenue,
                units=group.units,
                percentage_of_total=share,
            )
        )
    return results


def top_products(
    orders: Iterable[OrderSnapshot],
    limit: int = 5,
) -> list[TopProduct]:
    groups, _ = _accumulate(orders, "product")
    return [
        TopProduct(
            id=key,
            name=group.name,
            units_sold=group.units,
            revenue=group.revenue,
            is_custom=group.is_custom,
        )
        for key, group in _ranked(groups)[:limit]
    ]
