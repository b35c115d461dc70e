# app/analytics/snapshots.py
"""
Read-only order snapshots consumed by the analytics functions.

The repository flattens orders, items, products, categories and product
types into these models so the aggregation code never touches a session.
"""
import uuid
from datetime import datetime
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class CategoryRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    name: str


class ProductTypeReference(BaseModel):
    """Product type stored as a row in `product_types`."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["reference"] = "reference"
    id: uuid.UUID
    display_name: str


class LegacyProductType(BaseModel):
    """Free-text product type left over from before types were normalized."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["legacy"] = "legacy"
    label: str


ProductTypeRef = Union[ProductTypeReference, LegacyProductType]


class CatalogProduct(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    name: str
    price: int
    category: CategoryRef | None = None
    product_type: ProductTypeRef | None = None


class LineItem(BaseModel):
    """
    One order line.

    `product_id` is the stored reference; `product` is the resolved
    catalog row and is None when the row no longer exists.
    """

    model_config = ConfigDict(frozen=True)

    product_id: uuid.UUID | None = None
    product: CatalogProduct | None = None
    name: str | None = None
    price: int = 0
    count: int | None = 1
    is_custom: bool = False
    customization: dict[str, Any] | None = None

    @property
    def quantity(self) -> int:
        # Missing or zero counts were written by old checkouts; they mean 1.
        return self.count or 1

    @property
    def is_custom_design(self) -> bool:
        return (
            self.is_custom
            or self.customization is not None
            or self.product_id is None
        )

    @property
    def unit_price(self) -> int:
        if not self.is_custom_design and self.product is not None:
            return self.product.price
        return self.price

    @property
    def revenue(self) -> int:
        return self.unit_price * self.quantity


class OrderSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    created_at: datetime
    payment_status: str = "Paid"
    amount: int
    user_id: uuid.UUID | None = None
    products: list[LineItem] = Field(default_factory=list)


class OrderSummary(BaseModel):
    """Order header without line items, for customer and order analytics."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    created_at: datetime
    amount: int
    discount: int = 0
    status: str = "Received"
    payment_status: str = "Paid"
    user_id: uuid.UUID | None = None


class CustomerRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    name: str
    email: str
