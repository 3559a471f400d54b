# app/services/cart_service.py
import base64
import binascii
import json
import logging
import uuid

from pydantic import ValidationError
from sqlmodel import Session

from app.core.actions import ActionError
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartLine, CartLineRead, CartSummary
from app.schemas.product import Portion, PriceOptions

logger = logging.getLogger(__name__)

DELIVERY_FEE = 3.99
TAX_RATE = 0.08


def line_id(product_id: uuid.UUID, portion: Portion) -> str:
    return f"{product_id}-{portion}"


class CartService:
    """
    Cart operations over the client-held cart.

    Nothing is persisted server side: the router decodes the `_cart` cookie,
    calls one of these methods, and writes the returned lines back.

    Rules:
      - adding the same product + portion again increments its quantity
      - the product must exist, be available, and price the chosen portion
      - setting a quantity <= 0 removes the line
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    # ---- cookie codec ----

    @staticmethod
    def decode(raw: str | None) -> list[CartLine]:
        """
        Parse the cookie value. A missing or tampered cookie is an empty cart.
        """
        if not raw:
            return []
        try:
            padded = raw + "=" * (-len(raw) % 4)
            data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
            return [CartLine.model_validate(item) for item in data]
        except (binascii.Error, UnicodeError, ValueError, TypeError, ValidationError):
            logger.info("Discarding unreadable cart cookie")
            return []

    @staticmethod
    def encode(lines: list[CartLine]) -> str:
        payload = json.dumps([line.model_dump(mode="json") for line in lines])
        return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")

    # ---- operations ----

    def add_item(
        self,
        session: Session,
        lines: list[CartLine],
        product_id: uuid.UUID,
        portion: Portion,
    ) -> list[CartLine]:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise ActionError("Product not found")
        if not product.is_available:
            raise ActionError("Product is not available")

        price = PriceOptions.model_validate(product.prices).price_for(portion)
        if price is None:
            raise ActionError(f"{portion.capitalize()} portion is not offered for this item")

        key = line_id(product.id, portion)
        for line in lines:
            if line.id == key:
                line.quantity += 1
                return lines

        lines.append(
            CartLine(
                id=key,
                product_id=product.id,
                portion=portion,
                name=f"{product.name} ({portion.capitalize()})",
                price=price,
                image=product.image,
                quantity=1,
            )
        )
        return lines

    def update_quantity(
        self,
        lines: list[CartLine],
        item_id: str,
        quantity: int,
    ) -> list[CartLine]:
        if not any(line.id == item_id for line in lines):
            raise ActionError("Item not in cart")
        if quantity <= 0:
            return self.remove_item(lines, item_id)

        for line in lines:
            if line.id == item_id:
                line.quantity = quantity
        return lines

    def remove_item(self, lines: list[CartLine], item_id: str) -> list[CartLine]:
        remaining = [line for line in lines if line.id != item_id]
        if len(remaining) == len(lines):
            raise ActionError("Item not found in cart")
        return remaining

    @staticmethod
    def summarize(lines: list[CartLine]) -> CartSummary:
        """
        Totals as shown on the cart page:
          - delivery fee only when something is in the cart
          - tax on the subtotal
        """
        items: list[CartLineRead] = []
        total_items = 0
        subtotal = 0.0

        for line in lines:
            line_total = line.price * line.quantity
            total_items += line.quantity
            subtotal += line_total
            items.append(
                CartLineRead(**line.model_dump(), line_total=round(line_total, 2))
            )

        delivery_fee = DELIVERY_FEE if subtotal > 0 else 0.0
        tax = subtotal * TAX_RATE

        return CartSummary(
            items=items,
            total_items=total_items,
            subtotal=round(subtotal, 2),
            delivery_fee=delivery_fee,
            tax=round(tax, 2),
            grand_total=round(subtotal + delivery_fee + tax, 2),
        )
