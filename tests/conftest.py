# tests/conftest.py
import os
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

# Settings are read at import time by app.database / app.routers; set them first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-secret")

from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel, Session, create_engine  # noqa: E402

from app.analytics.snapshots import (  # noqa: E402
    CatalogProduct,
    CategoryRef,
    LineItem,
    OrderSnapshot,
    OrderSummary,
    ProductTypeRef,
)
from app.database import get_session  # noqa: E402
from app.models.user import User  # noqa: E402

JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(engine):
    from app.main import app
    from app.routers import analytics as analytics_router

    def _session_override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session_override
    analytics_router.service.clear_cache()
    yield TestClient(app)
    app.dependency_overrides.clear()
    analytics_router.service.clear_cache()


def _token_for(user_id: uuid.UUID, email: str) -> str:
    claims = {
        "sub": str(user_id),
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    return jwt.encode(claims, JWT_SECRET, algorithm="HS256")


@pytest.fixture()
def admin_headers(session):
    admin = User(id=uuid.uuid4(), email="admin@shop.test", name="admin", role="admin")
    session.add(admin)
    session.commit()
    return {"Authorization": f"Bearer {_token_for(admin.id, admin.email)}"}


@pytest.fixture()
def customer_headers(session):
    customer = User(id=uuid.uuid4(), email="otaku@shop.test", name="otaku")
    session.add(customer)
    session.commit()
    return {"Authorization": f"Bearer {_token_for(customer.id, customer.email)}"}


# ---- snapshot factories ----


def catalog_product(
    name: str = "Akatsuki Cloud Tee",
    price: int = 300,
    category: str | None = "Naruto",
    product_type: ProductTypeRef | None = None,
) -> CatalogProduct:
    return CatalogProduct(
        id=uuid.uuid4(),
        name=name,
        price=price,
        category=CategoryRef(id=uuid.uuid4(), name=category) if category else None,
        product_type=product_type,
    )


def catalog_item(product: CatalogProduct, count: int | None = 1) -> LineItem:
    return LineItem(
        product_id=product.id,
        product=product,
        name=product.name,
        price=product.price,
        count=count,
    )


def custom_item(price: int = 200, count: int | None = 1) -> LineItem:
    return LineItem(
        name="Custom T-Shirt",
        price=price,
        count=count,
        is_custom=True,
        customization={"frontDesign": {"designId": "d-1", "position": "center"}},
    )


def make_order(
    created_at: datetime,
    amount: int,
    products: list[LineItem] | None = None,
    user_id: uuid.UUID | None = None,
) -> OrderSnapshot:
    return OrderSnapshot(
        id=uuid.uuid4(),
        created_at=created_at,
        amount=amount,
        user_id=user_id,
        products=products or [],
    )


def make_summary(
    created_at: datetime,
    amount: int,
    user_id: uuid.UUID | None = None,
    status: str = "Received",
    discount: int = 0,
) -> OrderSummary:
    return OrderSummary(
        id=uuid.uuid4(),
        created_at=created_at,
        amount=amount,
        discount=discount,
        status=status,
        user_id=user_id,
    )


@pytest.fixture()
def factories():
    """Snapshot builders, exposed as a fixture so test modules need no imports."""
    return SimpleNamespace(
        catalog_product=catalog_product,
        catalog_item=catalog_item,
        custom_item=custom_item,
        make_order=make_order,
        make_summary=make_summary,
    )
