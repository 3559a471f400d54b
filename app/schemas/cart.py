# app/schemas/cart.py
import uuid

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from app.schemas.common import ActionResult
from app.schemas.product import Portion


class CartLine(SQLModel):
    """
    One line of the client-held cart, as stored in the `_cart` cookie.

    `id` is "<product_id>-<portion>" so each portion of a product is its own
    line. `price` is a snapshot taken when the line was first added.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    product_id: uuid.UUID
    portion: Portion
    name: str
    price: float
    image: str
    quantity: int = Field(gt=0)


class CartLineRead(CartLine):
    line_total: float


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartLineRead]
    total_items: int
    subtotal: float
    delivery_fee: float
    tax: float
    grand_total: float


class CartActionResult(ActionResult):
    cart: CartSummary | None = None
