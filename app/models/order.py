# app/models/order.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order, as written by checkout.

    Analytics only reads this table; it never mutates orders.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # None for guest checkouts
    user_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="users.id",
        index=True,
    )

    # Final charged amount, integer currency units
    amount: int = Field(ge=0)

    # Coupon discount already subtracted from `amount`
    discount: int = Field(default=0, ge=0)

    # Pending | Paid | Failed | Refunded
    payment_status: str = Field(
        default="Pending",
        index=True,
    )

    # Received | Processing | Shipped | Delivered | Cancelled
    status: str = Field(
        default="Received",
        index=True,
    )

    # Plain DateTime column: timestamps are stored as naive UTC
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
        sa_column=Column(DateTime, nullable=False, index=True),
        description="Creation timestamp (naive UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    Either references a catalog product (`product_id`) or is a custom
    design (`is_custom` / `customization`, no product reference). Custom
    items carry their own `price`.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="products.id",
        index=True,
    )

    name: str | None = None

    # Unit price at time of order
    price: int = Field(default=0, ge=0)

    # NULL means 1 (older orders did not store it)
    count: int | None = Field(default=1)

    size: str | None = None

    is_custom: bool = Field(default=False)

    customization: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Front/back design placement for custom t-shirts",
    )
