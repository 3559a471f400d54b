# app/schemas/product.py
import json
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.common import ActionResult

Portion = Literal["quarter", "half", "full"]


class PriceOptions(SQLModel):
    """
    Portion prices. `full` is mandatory; quarter/half are offered only when set.
    """

    model_config = ConfigDict(extra="forbid")

    quarter: float | None = Field(default=None, ge=0)
    half: float | None = Field(default=None, ge=0)
    full: float = Field(ge=0)

    def price_for(self, portion: Portion) -> float | None:
        """Price of a portion, or None when the portion is not offered."""
        if portion == "quarter":
            return self.quarter
        if portion == "half":
            return self.half
        return self.full


class ProductForm(SQLModel):
    """
    Admin form for creating or editing a product.

    `prices` arrives as JSON text in form posts, e.g. '{"half": 5, "full": 9}'.
    `category` is the category *name*; it must exist.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str
    prices: PriceOptions
    image: str
    category: str

    @field_validator("prices", mode="before")
    @classmethod
    def parse_prices(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                raise ValueError("Prices must be valid JSON")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if len(v) > 255:
            raise ValueError("Name must be at most 255 characters")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Description is required")
        return v

    @field_validator("image", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str
    prices: PriceOptions
    image: str
    category: str
    category_id: uuid.UUID
    is_available: bool
    created_at: datetime


class ProductToggleResult(ActionResult):
    is_available: bool | None = None


class ProductImageResult(ActionResult):
    image: str | None = None
