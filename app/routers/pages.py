# app/routers/pages.py
"""
Page views.

Each route returns the view model a browser front-end renders. These are the
navigable paths the route gate inspects; the JSON actions live under the API
prefix.
"""

from fastapi import APIRouter, Cookie, Depends, Query
from sqlmodel import Session

from app.core.auth import require_admin, require_auth
from app.core.config import get_settings
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.stats_repo import StatsRepository
from app.routers.cart import CART_COOKIE
from app.routers.cart import service as cart_service
from app.schemas.auth import SessionClaims
from app.schemas.pages import (
    AdminDashboardView,
    AuthPageView,
    CartView,
    HomeView,
    MenuView,
)
from app.services.menu_service import MenuService
from app.services.stats_service import StatsService

settings = get_settings()

router = APIRouter(tags=["Pages"])

menu_service = MenuService(ProductRepository(), CategoryRepository())
stats_service = StatsService(StatsRepository())

AUTH_ACTIONS = f"{settings.API_V1_STR}/auth"


# -------- Protected pages --------


@router.get("/", response_model=HomeView)
def home(
    claims: SessionClaims = Depends(require_auth),
    session: Session = Depends(get_session),
):
    return HomeView(user=claims, featured=menu_service.featured(session))


@router.get("/menu", response_model=MenuView)
def menu(
    q: str | None = None,
    category: str | None = None,
    claims: SessionClaims = Depends(require_auth),
    session: Session = Depends(get_session),
):
    """
    Menu with optional search (`q`) and category filter.
    """
    categories, items = menu_service.menu(session, query=q, category=category)
    return MenuView(
        categories=categories,
        items=items,
        query=q,
        selected_category=category,
    )


@router.get("/cart", response_model=CartView)
def cart_page(
    claims: SessionClaims = Depends(require_auth),
    cart: str | None = Cookie(None, alias=CART_COOKIE),
):
    return CartView(
        user=claims,
        cart=cart_service.summarize(cart_service.decode(cart)),
    )


@router.get("/admin", response_model=AdminDashboardView)
def admin_dashboard(
    claims: SessionClaims = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """
    Dashboard counters (admin only).
    """
    return AdminDashboardView(
        user=claims,
        stats=stats_service.get_admin_dashboard_stats(session),
    )


# -------- Auth pages --------


@router.get("/login", response_model=AuthPageView)
def login_page(callback_url: str | None = Query(None, alias="callbackUrl")):
    return AuthPageView(
        page="login",
        action=f"{AUTH_ACTIONS}/login",
        fields=["email", "password"],
        callback_url=callback_url,
    )


@router.get("/signup", response_model=AuthPageView)
def signup_page():
    return AuthPageView(
        page="signup",
        action=f"{AUTH_ACTIONS}/register",
        fields=["name", "email", "phone", "password"],
    )


@router.get("/verify-otp", response_model=AuthPageView)
def verify_otp_page():
    return AuthPageView(
        page="verify-otp",
        action=f"{AUTH_ACTIONS}/verify-otp",
        fields=["pin"],
    )


@router.get("/forgot-password", response_model=AuthPageView)
def forgot_password_page():
    return AuthPageView(
        page="forgot-password",
        action=f"{AUTH_ACTIONS}/forgot-password",
        fields=["email"],
    )


@router.get("/reset-password", response_model=AuthPageView)
def reset_password_page(token: str | None = None):
    """
    Landing page of the emailed reset link.
    """
    return AuthPageView(
        page="reset-password",
        action=f"{AUTH_ACTIONS}/reset-password",
        fields=["password", "token"],
        token=token,
        error=None if token else "Invalid or missing reset token",
    )
