# app/schemas/pages.py
from sqlmodel import SQLModel

from app.schemas.auth import SessionClaims
from app.schemas.cart import CartSummary
from app.schemas.category import CategoryRead
from app.schemas.product import ProductRead
from app.schemas.stats import AdminDashboardStats


class HomeView(SQLModel):
    user: SessionClaims
    featured: list[ProductRead]


class MenuView(SQLModel):
    """
    Menu page: active categories for the filter bar plus the matching items.
    """

    categories: list[CategoryRead]
    items: list[ProductRead]
    query: str | None = None
    selected_category: str | None = None


class CartView(SQLModel):
    user: SessionClaims
    cart: CartSummary


class AuthPageView(SQLModel):
    """
    Describes an auth form: where it posts and which fields it sends.
    """

    page: str
    action: str
    fields: list[str]
    callback_url: str | None = None
    token: str | None = None
    error: str | None = None


class AdminDashboardView(SQLModel):
    user: SessionClaims
    stats: AdminDashboardStats
