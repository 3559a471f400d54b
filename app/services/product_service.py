# app/services/product_service.py
import logging
import uuid

from sqlmodel import Session

from app.core.actions import ActionError
from app.core.storage_utils import delete_public_url, upload_to_storage
from app.models.product import Product
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import ProductForm

logger = logging.getLogger(__name__)


# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class ProductService:
    """
    Business logic for menu products.

    Responsibilities:
      - resolve the category name to an existing Category
      - keep the denormalized `category` name in sync with `category_id`
      - image upload/delete orchestration with Supabase Storage
    """

    def __init__(self, repo: ProductRepository, category_repo: CategoryRepository):
        self.repo = repo
        self.category_repo = category_repo

    # ----- Helpers -----

    def _resolve_category(self, session: Session, name: str):
        category = self.category_repo.get_by_name(session, name)
        if category is None:
            raise ActionError(f"Category '{name}' not found")
        return category

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise ActionError("Unsupported image type. Allowed: JPEG, PNG, WEBP.")

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise ActionError("Image too large (max 5MB).")

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    @staticmethod
    def _discard_image(url: str) -> None:
        """
        Best-effort removal of an image from Storage. The product row is
        already committed, so a storage failure is only logged.
        """
        try:
            delete_public_url(url)
        except Exception:
            logger.warning("Could not delete image %s from storage", url, exc_info=True)

    # ----- Products -----

    def list_products(self, session: Session, only_available: bool = False) -> list[Product]:
        return self.repo.list(session, only_available=only_available)

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise ActionError("Product not found")
        return product

    def create_product(self, session: Session, form: ProductForm) -> Product:
        category = self._resolve_category(session, form.category)

        product = Product(
            name=form.name,
            description=form.description,
            prices=form.prices.model_dump(exclude_none=True),
            image=form.image,
            category=category.name,
            category_id=category.id,
        )
        product = self.repo.create(session, product)
        logger.info("Product %s created in category %s", product.id, category.name)
        return product

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        form: ProductForm,
    ) -> Product:
        """
        Replace the editable fields of a product. Availability is left alone;
        it has its own toggle.
        """
        product = self.get_product(session, product_id)
        category = self._resolve_category(session, form.category)

        product.name = form.name
        product.description = form.description
        product.prices = form.prices.model_dump(exclude_none=True)
        product.image = form.image
        product.category = category.name
        product.category_id = category.id

        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Delete a product and, if its image lives in our bucket, the image.
        """
        product = self.get_product(session, product_id)
        image = product.image

        self.repo.delete(session, product)
        self._discard_image(image)
        logger.info("Product %s deleted", product_id)

    def toggle_availability(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.get_product(session, product_id)
        product.is_available = not product.is_available
        return self.repo.update(session, product)

    # ----- Image -----

    def set_image(
        self,
        session: Session,
        product_id: uuid.UUID,
        content_type: str,
        file_bytes: bytes,
    ) -> Product:
        """
        Upload or replace the product image.

        - Validates content type + size.
        - Saves the new URL, then tries to delete the previous image if it was ours.
        - Uploads to a deterministic path: products/<product_id>/image.<ext>
        """
        product = self.get_product(session, product_id)
        ext = self._validate_and_get_ext(content_type, file_bytes)

        previous = product.image
        new_url = upload_to_storage(
            f"products/{product.id}/image.{ext}", file_bytes, content_type
        )

        product.image = new_url
        product = self.repo.update(session, product)

        if previous and previous != new_url:
            self._discard_image(previous)
        return product
