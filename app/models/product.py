# app/models/product.py
import uuid
from datetime import datetime

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field

from app.models.user import utcnow


class Category(SQLModel, table=True):
    """
    Menu category (e.g. "Burgers", "Desserts").
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        unique=True,
        index=True,
    )

    description: str | None = Field(default=None, max_length=500)

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Product(SQLModel, table=True):
    """
    Menu item.

    `prices` is a JSON object: {"quarter": float?, "half": float?, "full": float}.
    `category` mirrors Category.name for display; `category_id` is the real FK.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=255, index=True)

    description: str

    prices: dict = Field(sa_column=Column(JSON, nullable=False))

    image: str = Field(max_length=500)

    category: str = Field(max_length=100, index=True)

    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        ondelete="RESTRICT",
        index=True,
    )

    is_available: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
