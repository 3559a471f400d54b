# app/routers/products.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from sqlmodel import Session

from app.core.actions import ActionError, action_failure
from app.core.auth import ensure_admin, require_admin
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.common import ActionResult
from app.schemas.product import (
    ProductForm,
    ProductImageResult,
    ProductRead,
    ProductToggleResult,
)
from app.services.product_service import MAX_IMAGE_BYTES, ProductService

router = APIRouter(prefix="/products", tags=["Products"])

service = ProductService(ProductRepository(), CategoryRepository())


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    only_available: bool = False,
):
    """
    List products (public, default ordering).

    - `only_available=True` hides products switched off by an admin.
    """
    return service.list_products(session, only_available=only_available)


# -------- Admin endpoints --------


@router.get(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id (admin edit form).
    """
    try:
        return service.get_product(session, product_id)
    except ActionError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)


@router.post("", response_model=ActionResult)
def create_product(
    request: Request,
    name: str | None = Form(None),
    description: str | None = Form(None),
    prices: str | None = Form(None),
    image: str | None = Form(None),
    category: str | None = Form(None),
    session: Session = Depends(get_session),
):
    """
    Create a product (admin only). `prices` is JSON text.
    """
    try:
        ensure_admin(request)
        form = ProductForm(
            name=name,
            description=description,
            prices=prices,
            image=image,
            category=category,
        )
        service.create_product(session, form)
    except Exception as exc:
        return action_failure(exc, "Failed to create product")
    return ActionResult(success=True, message="Product created successfully")


@router.put("/{product_id}", response_model=ActionResult)
def update_product(
    product_id: uuid.UUID,
    request: Request,
    name: str | None = Form(None),
    description: str | None = Form(None),
    prices: str | None = Form(None),
    image: str | None = Form(None),
    category: str | None = Form(None),
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    try:
        ensure_admin(request)
        form = ProductForm(
            name=name,
            description=description,
            prices=prices,
            image=image,
            category=category,
        )
        service.update_product(session, product_id, form)
    except Exception as exc:
        return action_failure(exc, "Failed to update product")
    return ActionResult(success=True, message="Product updated successfully")


@router.delete("/{product_id}", response_model=ActionResult)
def delete_product(
    product_id: uuid.UUID,
    request: Request,
    session: Session = Depends(get_session),
):
    try:
        ensure_admin(request)
        service.delete_product(session, product_id)
    except Exception as exc:
        return action_failure(exc, "Failed to delete product")
    return ActionResult(success=True)


@router.post("/{product_id}/toggle-availability", response_model=ProductToggleResult)
def toggle_availability(
    product_id: uuid.UUID,
    request: Request,
    session: Session = Depends(get_session),
):
    """
    Flip `is_available` (admin only). Returns the new state.
    """
    try:
        ensure_admin(request)
        product = service.toggle_availability(session, product_id)
    except Exception as exc:
        failure = action_failure(exc, "Failed to change product availability")
        return ProductToggleResult(success=False, message=failure.message)
    return ProductToggleResult(success=True, is_available=product.is_available)


@router.post(
    "/{product_id}/image",
    response_model=ProductImageResult,
    summary="Upload or replace the image of a product",
)
def upload_image(
    product_id: uuid.UUID,
    request: Request,
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
):
    """
    Upload a new product image (admin only).

    - Accepts JPEG, PNG, WEBP up to 5MB.
    - Overwrites any previous image.
    """
    try:
        ensure_admin(request)
        if not file.content_type:
            raise ActionError("Missing content-type for uploaded file")
        product = service.set_image(
            session=session,
            product_id=product_id,
            content_type=file.content_type,
            file_bytes=file.file.read(MAX_IMAGE_BYTES + 1),
        )
    except Exception as exc:
        failure = action_failure(exc, "Failed to upload image")
        return ProductImageResult(success=False, message=failure.message)
    return ProductImageResult(success=True, image=product.image)
