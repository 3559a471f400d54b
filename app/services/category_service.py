# app/services/category_service.py
import logging
import uuid

from sqlmodel import Session

from app.core.actions import ActionError
from app.models.product import Category
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.category import CategoryForm

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Business logic for menu categories.

    Admin-only operations are gated by the router (`ensure_admin`).
    """

    def __init__(self, repo: CategoryRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.list(session)

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise ActionError("Category not found")
        return category

    def create_category(self, session: Session, form: CategoryForm) -> Category:
        if self.repo.get_by_name(session, form.name):
            raise ActionError("Category name already exists")

        category = self.repo.create(
            session,
            Category(name=form.name, description=form.description or ""),
        )
        logger.info("Category %s created (%s)", category.id, category.name)
        return category

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        form: CategoryForm,
        is_active: bool | None = None,
    ) -> Category:
        """
        Rename / re-describe a category. The new name must not belong to
        another category.
        """
        category = self.get_category(session, category_id)

        existing = self.repo.get_by_name(session, form.name)
        if existing and existing.id != category.id:
            raise ActionError("Category name already exists")

        if category.name != form.name:
            # Products carry the category name; keep them in step.
            self.product_repo.rename_category(session, category.id, form.name)

        category.name = form.name
        category.description = form.description or ""
        if is_active is not None:
            category.is_active = is_active
        return self.repo.update(session, category)

    def delete_category(self, session: Session, category_id: uuid.UUID) -> None:
        category = self.get_category(session, category_id)
        if self.product_repo.count_for_category(session, category.id) > 0:
            raise ActionError("Cannot delete category with associated products")
        self.repo.delete(session, category)
        logger.info("Category %s deleted", category_id)

    def toggle_category(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.get_category(session, category_id)
        category.is_active = not category.is_active
        return self.repo.update(session, category)
