# app/repositories/product_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.product import Product
from app.models.user import utcnow


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list(
        self,
        session: Session,
        only_available: bool = False,
    ) -> list[Product]:
        stmt = select(Product)
        if only_available:
            stmt = stmt.where(Product.is_available == True)  # noqa: E712
        return session.exec(stmt).all()

    def count_for_category(self, session: Session, category_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(Product)
            .where(Product.category_id == category_id)
        )
        return int(session.exec(stmt).one() or 0)

    def rename_category(self, session: Session, category_id: uuid.UUID, name: str) -> None:
        """Rewrite the denormalized category name. Does not commit."""
        stmt = select(Product).where(Product.category_id == category_id)
        for product in session.exec(stmt).all():
            product.category = name
            product.updated_at = utcnow()
            session.add(product)

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        product.updated_at = utcnow()
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
