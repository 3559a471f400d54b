# app/routers/cart.py
import uuid

from fastapi import APIRouter, Cookie, Depends, Form, Response
from sqlmodel import Session

from app.core.actions import action_failure
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartActionResult, CartLine, CartSummary
from app.schemas.product import Portion
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

service = CartService(ProductRepository())

CART_COOKIE = "_cart"
CART_MAX_AGE = 30 * 24 * 60 * 60


def _store(response: Response, lines: list[CartLine]) -> CartActionResult:
    if lines:
        response.set_cookie(
            CART_COOKIE,
            service.encode(lines),
            max_age=CART_MAX_AGE,
            samesite="lax",
        )
    else:
        response.delete_cookie(CART_COOKIE)
    return CartActionResult(success=True, cart=service.summarize(lines))


def _failure(exc: Exception, fallback: str) -> CartActionResult:
    failure = action_failure(exc, fallback)
    return CartActionResult(success=False, message=failure.message)


@router.get("", response_model=CartSummary)
def get_cart(cart: str | None = Cookie(None, alias=CART_COOKIE)):
    """
    Current cart with subtotal, delivery fee, tax and grand total.
    """
    return service.summarize(service.decode(cart))


@router.post("/items", response_model=CartActionResult)
def add_to_cart(
    response: Response,
    product_id: uuid.UUID = Form(...),
    portion: Portion = Form("full"),
    cart: str | None = Cookie(None, alias=CART_COOKIE),
    session: Session = Depends(get_session),
):
    """
    Add one unit of a product portion to the cart.
    """
    try:
        lines = service.add_item(session, service.decode(cart), product_id, portion)
    except Exception as exc:
        return _failure(exc, "Failed to add item to cart")
    return _store(response, lines)


@router.patch("/items/{item_id}", response_model=CartActionResult)
def update_quantity(
    item_id: str,
    response: Response,
    quantity: int = Form(...),
    cart: str | None = Cookie(None, alias=CART_COOKIE),
):
    """
    Set the quantity of a cart line. Zero or less removes it.
    """
    try:
        lines = service.update_quantity(service.decode(cart), item_id, quantity)
    except Exception as exc:
        return _failure(exc, "Failed to update cart")
    return _store(response, lines)


@router.delete("/items/{item_id}", response_model=CartActionResult)
def remove_item(
    item_id: str,
    response: Response,
    cart: str | None = Cookie(None, alias=CART_COOKIE),
):
    try:
        lines = service.remove_item(service.decode(cart), item_id)
    except Exception as exc:
        return _failure(exc, "Failed to remove item")
    return _store(response, lines)


@router.delete("", response_model=CartActionResult)
def clear_cart(response: Response):
    """Empty the cart."""
    return _store(response, [])
