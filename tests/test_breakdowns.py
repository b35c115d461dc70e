# tests/test_breakdowns.py
import uuid
from datetime import datetime

import pytest

from app.analytics.breakdowns import (
    compute_breakdown,
    normalize_product_type,
    top_products,
)
from app.analytics.snapshots import (
    LegacyProductType,
    LineItem,
    ProductTypeReference,
)

T = datetime(2025, 5, 14, 12)


@pytest.fixture()
def tshirt_type():
    return ProductTypeReference(id=uuid.uuid4(), display_name="T-Shirt")


@pytest.fixture()
def mixed_order(factories, tshirt_type):
    tee = factories.catalog_product(price=300, product_type=tshirt_type)
    order = factories.make_order(
        T, 800, [factories.catalog_item(tee, 2), factories.custom_item(price=200)]
    )
    return tee, order


def test_mixed_order_top_products(mixed_order):
    tee, order = mixed_order

    top = top_products([order])

    assert [(p.name, p.revenue, p.units_sold, p.is_custom) for p in top] == [
        ("Akatsuki Cloud Tee", 600, 2, False),
        ("Custom Design T-Shirts", 200, 1, True),
    ]
    assert top[0].id == str(tee.id)
    assert top[1].id == "custom-design"
    assert sum(p.revenue for p in top) == 800


def test_engagement_metrics_are_not_invented(mixed_order):
    _, order = mixed_order
    for product in top_products([order]):
        assert product.views is None
        assert product.conversion_rate is None


def test_catalog_revenue_uses_catalog_price(factories):
    tee = factories.catalog_product(price=300)
    stale_line = LineItem(product_id=tee.id, product=tee, price=999, count=1)
    order = factories.make_order(T, 300, [stale_line])

    assert top_products([order])[0].revenue == 300


@pytest.mark.parametrize(
    "dimension,key,name",
    [
        ("product", "custom-design", "Custom Design T-Shirts"),
        ("category", "custom-designs", "Custom Designs"),
        ("product_type", "custom-tshirt", "Custom T-Shirt"),
    ],
)
def test_custom_items_go_to_custom_group(factories, dimension, key, name):
    flagged = factories.custom_item(price=100)
    only_customization = LineItem(price=50, customization={"backDesign": {}})
    no_reference = LineItem(price=25, count=2)
    order = factories.make_order(T, 200, [flagged, only_customization, no_reference])

    groups = compute_breakdown([order], dimension)

    assert len(groups) == 1
    assert (groups[0].id, groups[0].name) == (key, name)
    assert groups[0].revenue == 200
    assert groups[0].units == 4
    assert groups[0].percentage_of_total == 100


def test_category_breakdown(factories):
    naruto = factories.catalog_product("Itachi Tee", 400, "Naruto")
    one_piece = factories.catalog_product("Luffy Gear 5 Tee", 300, "One Piece")
    no_category = factories.catalog_product("Plain Black Tee", 100, None)
    orders = [
        factories.make_order(T, 800, [factories.catalog_item(naruto, 2)]),
        factories.make_order(
            T, 400, [factories.catalog_item(one_piece), factories.catalog_item(no_category)]
        ),
        factories.make_order(T, 200, [factories.custom_item(price=200)]),
    ]

    groups = compute_breakdown(orders, "category")

    assert [(g.name, g.revenue, g.units) for g in groups] == [
        ("Naruto", 800, 2),
        ("One Piece", 300, 1),
        ("Custom Designs", 200, 1),
        ("Uncategorized", 100, 1),
    ]
    assert sum(g.percentage_of_total for g in groups) == pytest.approx(100)
    assert groups[0].percentage_of_total == pytest.approx(800 / 1400 * 100)


def test_product_type_breakdown_merges_reference_and_legacy(factories, tshirt_type):
    modern = factories.catalog_product("Zoro Tee", 300, product_type=tshirt_type)
    legacy = factories.catalog_product(
        "Old Zoro Tee", 200, product_type=LegacyProductType(label="T-shirt")
    )
    legacy_spaced = factories.catalog_product(
        "Older Zoro Tee", 100, product_type=LegacyProductType(label="t shirt")
    )
    hoodie = factories.catalog_product(
        "Akatsuki Hoodie", 900, product_type=LegacyProductType(label="Hoodie")
    )
    untyped = factories.catalog_product("Mystery Tee", 50)
    order = factories.make_order(
        T,
        1550,
        [
            factories.catalog_item(modern),
            factories.catalog_item(legacy),
            factories.catalog_item(legacy_spaced),
            factories.catalog_item(hoodie),
            factories.catalog_item(untyped),
        ],
    )

    groups = {g.id: g for g in compute_breakdown([order], "product_type")}

    assert groups["hoodie"].name == "Hoodie"
    assert groups["tshirt"].name == "T-Shirt"
    assert groups["tshirt"].revenue == 300
    assert groups[str(tshirt_type.id)].revenue == 300
    assert groups["other"].name == "Other"


def test_missing_catalog_row_is_kept(factories):
    orphan = LineItem(product_id=uuid.uuid4(), name="Deleted Tee", price=150, count=2)
    order = factories.make_order(T, 300, [orphan])

    product = compute_breakdown([order], "product")[0]
    assert (product.name, product.revenue) == ("Deleted Tee", 300)
    assert compute_breakdown([order], "category")[0].name == "Uncategorized"
    assert compute_breakdown([order], "product_type")[0].name == "Other"


def test_zero_revenue_gives_zero_percentages(factories):
    freebie = factories.catalog_product("Sticker Tee", 0)
    order = factories.make_order(T, 0, [factories.catalog_item(freebie, 3)])

    groups = compute_breakdown([order], "category")

    assert groups[0].units == 3
    assert all(g.percentage_of_total == 0 for g in groups)


def test_no_orders_gives_empty_breakdown():
    assert compute_breakdown([], "category") == []
    assert top_products([]) == []


def test_top_products_limit_and_order(factories):
    items = [
        factories.catalog_item(factories.catalog_product(f"Tee {i}", price=100 * i))
        for i in range(1, 8)
    ]
    order = factories.make_order(T, 2800, items)

    top = top_products([order], limit=5)

    assert [p.name for p in top] == ["Tee 7", "Tee 6", "Tee 5", "Tee 4", "Tee 3"]


@pytest.mark.parametrize(
    "label,expected",
    [
        ("tshirt", ("tshirt", "T-Shirt")),
        ("T-Shirt", ("tshirt", "T-Shirt")),
        ("Oversized Tee", ("oversizedtee", "Oversized Tee")),
        ("acid-wash", ("acidwash", "Acid Wash")),
        ("kimono", ("kimono", "Kimono")),
        ("  ", ("other", "Other")),
    ],
)
def test_normalize_legacy_product_type(label, expected):
    assert normalize_product_type(LegacyProductType(label=label)) == expected


def test_normalize_reference_product_type(tshirt_type):
    assert normalize_product_type(tshirt_type) == (str(tshirt_type.id), "T-Shirt")
    assert normalize_product_type(None) == ("other", "Other")
