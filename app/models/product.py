# app/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Catalog category (e.g. "Naruto", "One Piece").
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=32, unique=True)
    slug: str = Field(max_length=64, unique=True, index=True)
    is_active: bool = Field(default=True)


class ProductType(SQLModel, table=True):
    """
    Garment type (T-Shirt, Hoodie, Oversized Tee, ...).

    `display_name` is what reports show; `name` is the stable key.
    """

    __tablename__ = "product_types"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=32, unique=True)
    slug: str = Field(max_length=64, unique=True, index=True)
    display_name: str
    is_active: bool = Field(default=True)


class Product(SQLModel, table=True):
    """
    Catalog product.

    Product type is either a reference to `product_types`
    (`product_type_id`) or, for products created before types were
    normalized, a free-text label in `legacy_product_type`.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
    )

    # Integer currency units (e.g. INR)
    price: int = Field(ge=0)

    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    product_type_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="product_types.id",
        index=True,
    )

    legacy_product_type: str | None = Field(
        default=None,
        description="Pre-migration product type label, e.g. 't-shirt'",
    )

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
        sa_column=Column(DateTime, nullable=False),
        description="Creation timestamp (naive UTC)",
    )
