# app/services/menu_service.py
from sqlmodel import Session

from app.models.product import Category, Product
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository

FEATURED_LIMIT = 6


class MenuService:
    """
    Read-side helpers for the storefront pages.
    """

    def __init__(self, product_repo: ProductRepository, category_repo: CategoryRepository):
        self.product_repo = product_repo
        self.category_repo = category_repo

    @staticmethod
    def filter_items(
        products: list[Product],
        query: str | None = None,
        category: str | None = None,
    ) -> list[Product]:
        """
        Case-insensitive substring match on name or description, and exact
        category match when a category is selected.
        """
        needle = (query or "").strip().lower()

        def matches(product: Product) -> bool:
            if category and product.category != category:
                return False
            if not needle:
                return True
            return needle in product.name.lower() or needle in product.description.lower()

        return [p for p in products if matches(p)]

    def menu(
        self,
        session: Session,
        query: str | None = None,
        category: str | None = None,
    ) -> tuple[list[Category], list[Product]]:
        categories = [c for c in self.category_repo.list(session) if c.is_active]
        items = self.filter_items(self.product_repo.list(session), query, category)
        return categories, items

    def featured(self, session: Session) -> list[Product]:
        return self.product_repo.list(session, only_available=True)[:FEATURED_LIMIT]
