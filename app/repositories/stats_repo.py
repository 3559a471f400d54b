# app/repositories/stats_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.product import Category, Product
from app.models.user import User


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboard.
    """

    def count_products(self, session: Session, only_available: bool = False) -> int:
        stmt = select(func.count()).select_from(Product)
        if only_available:
            stmt = stmt.where(Product.is_available == True)  # noqa: E712
        # SQLModel's Session.exec() -> ScalarResult -> use .one()
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_categories(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Category)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_customers(self, session: Session) -> int:
        """Active accounts with role='user'."""
        stmt = (
            select(func.count())
            .select_from(User)
            .where(User.role == "user", User.is_active == True)  # noqa: E712
        )
        value = session.exec(stmt).one()
        return int(value or 0)
