# app/repositories/analytics_repo.py
import uuid
from collections import defaultdict
from datetime import datetime

from sqlmodel import Session, col, select

from app.analytics.periods import as_naive_utc
from app.analytics.snapshots import (
    CatalogProduct,
    CategoryRef,
    CustomerRef,
    LegacyProductType,
    LineItem,
    OrderSnapshot,
    OrderSummary,
    ProductTypeRef,
    ProductTypeReference,
)
from app.models.order import Order, OrderItem
from app.models.product import Category, Product, ProductType
from app.models.user import User

PAID = "Paid"
CANCELLED = "Cancelled"


class AnalyticsRepository:
    """
    Read-only queries feeding the analytics report.

    Orders are returned as OrderSnapshot so the aggregation code never
    holds a session. Related rows are loaded with one IN query per
    table.
    """

    def fetch_paid_orders(
        self,
        session: Session,
        start_date: datetime,
        end_date: datetime,
    ) -> list[OrderSnapshot]:
        """
        Paid, non-cancelled orders created within [start_date, end_date]
        (both inclusive), oldest first.
        """
        stmt = (
            select(Order)
            .where(
                Order.created_at >= start_date,
                Order.created_at <= end_date,
                Order.payment_status == PAID,
                Order.status != CANCELLED,
            )
            .order_by(Order.created_at)
        )
        orders = list(session.exec(stmt).all())
        if not orders:
            return []

        items_by_order = self._items_by_order(session, [o.id for o in orders])
        product_ids = {
            it.product_id
            for items in items_by_order.values()
            for it in items
            if it.product_id is not None
        }
        catalog = self._catalog_products(session, product_ids)

        return [
            OrderSnapshot(
                id=o.id,
                created_at=as_naive_utc(o.created_at),
                payment_status=o.payment_status,
                amount=o.amount,
                user_id=o.user_id,
                products=[
                    self._to_line_item(it, catalog)
                    for it in items_by_order.get(o.id, [])
                ],
            )
            for o in orders
        ]

    def fetch_order_summaries(
        self,
        session: Session,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        paid_only: bool = False,
    ) -> list[OrderSummary]:
        """
        Order headers (no items), oldest first.

        Without bounds every order is returned. `paid_only` applies the
        same paid, non-cancelled rule as fetch_paid_orders.
        """
        stmt = select(Order)
        if start_date is not None:
            stmt = stmt.where(Order.created_at >= start_date)
        if end_date is not None:
            stmt = stmt.where(Order.created_at <= end_date)
        if paid_only:
            stmt = stmt.where(
                Order.payment_status == PAID,
                Order.status != CANCELLED,
            )
        stmt = stmt.order_by(Order.created_at)

        return [
            OrderSummary(
                id=o.id,
                created_at=as_naive_utc(o.created_at),
                amount=o.amount,
                discount=o.discount or 0,
                status=o.status,
                payment_status=o.payment_status,
                user_id=o.user_id,
            )
            for o in session.exec(stmt).all()
        ]

    def fetch_customer_signups(self, session: Session) -> list[datetime]:
        """Account creation times of customers (admins excluded)."""
        stmt = select(User.created_at).where(User.role == "user")
        return [as_naive_utc(created_at) for created_at in session.exec(stmt).all()]

    def fetch_customers(
        self,
        session: Session,
        user_ids: set[uuid.UUID],
    ) -> dict[uuid.UUID, CustomerRef]:
        if not user_ids:
            return {}
        stmt = select(User).where(col(User.id).in_(user_ids))
        return {
            u.id: CustomerRef(id=u.id, name=u.name, email=u.email)
            for u in session.exec(stmt).all()
        }

    # ---- helpers ----

    def _items_by_order(
        self,
        session: Session,
        order_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, list[OrderItem]]:
        stmt = select(OrderItem).where(col(OrderItem.order_id).in_(order_ids))
        grouped: dict[uuid.UUID, list[OrderItem]] = defaultdict(list)
        for item in session.exec(stmt).all():
            grouped[item.order_id].append(item)
        return grouped

    def _catalog_products(
        self,
        session: Session,
        product_ids: set[uuid.UUID],
    ) -> dict[uuid.UUID, CatalogProduct]:
        if not product_ids:
            return {}

        products = session.exec(
            select(Product).where(col(Product.id).in_(product_ids))
        ).all()

        category_ids = {p.category_id for p in products if p.category_id}
        type_ids = {p.product_type_id for p in products if p.product_type_id}

        categories: dict[uuid.UUID, Category] = {}
        if category_ids:
            stmt = select(Category).where(col(Category.id).in_(category_ids))
            categories = {c.id: c for c in session.exec(stmt).all()}

        product_types: dict[uuid.UUID, ProductType] = {}
        if type_ids:
            stmt = select(ProductType).where(col(ProductType.id).in_(type_ids))
            product_types = {t.id: t for t in session.exec(stmt).all()}

        catalog: dict[uuid.UUID, CatalogProduct] = {}
        for p in products:
            category = categories.get(p.category_id) if p.category_id else None
            catalog[p.id] = CatalogProduct(
                id=p.id,
                name=p.name,
                price=p.price,
                category=(
                    CategoryRef(id=category.id, name=category.name)
                    if category is not None
                    else None
                ),
                product_type=self._product_type_ref(p, product_types),
            )
        return catalog

    @staticmethod
    def _product_type_ref(
        product: Product,
        product_types: dict[uuid.UUID, ProductType],
    ) -> ProductTypeRef | None:
        if product.product_type_id is not None:
            row = product_types.get(product.product_type_id)
            if row is not None:
                return ProductTypeReference(id=row.id, display_name=row.display_name)
        if product.legacy_product_type:
            return LegacyProductType(label=product.legacy_product_type)
        return None

    @staticmethod
    def _to_line_item(
        item: OrderItem,
        catalog: dict[uuid.UUID, CatalogProduct],
    ) -> LineItem:
        return LineItem(
            product_id=item.product_id,
            product=catalog.get(item.product_id) if item.product_id else None,
            name=item.name,
            price=item.price,
            count=item.count,
            is_custom=item.is_custom,
            customization=item.customization,
        )
