# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Storefront account mirrored from Supabase Auth.

    `id` is the Supabase auth user id (JWT "sub"). Only `role` matters
    to the analytics API: "admin" may read reports, "user" may not.
    Guest checkouts have no row; their orders carry user_id=None and are
    not counted as customers.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(primary_key=True, index=True)

    email: str = Field(unique=True, index=True)

    # First part of the email until the customer sets a name
    name: str = Field(max_length=50)

    # user | admin
    role: str = Field(default="user", index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
        sa_column=Column(DateTime, nullable=False),
        description="Creation timestamp (naive UTC)",
    )
