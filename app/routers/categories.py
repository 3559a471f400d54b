# app/routers/categories.py
import uuid

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from sqlmodel import Session

from app.core.actions import ActionError, action_failure
from app.core.auth import ensure_admin, require_admin
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.category import CategoryForm, CategoryRead, CategoryToggleResult
from app.schemas.common import ActionResult
from app.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])

service = CategoryService(CategoryRepository(), ProductRepository())


# -------- Public endpoints --------


@router.get("", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """
    List all categories ordered by name (public).
    """
    return service.list_categories(session)


# -------- Admin endpoints --------


@router.get(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def get_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    try:
        return service.get_category(session, category_id)
    except ActionError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)


@router.post("", response_model=ActionResult)
def create_category(
    request: Request,
    name: str | None = Form(None),
    description: str | None = Form(None),
    session: Session = Depends(get_session),
):
    try:
        ensure_admin(request)
        form = CategoryForm(name=name, description=description)
        service.create_category(session, form)
    except Exception as exc:
        return action_failure(exc, "Failed to create category")
    return ActionResult(success=True, message="Category created successfully")


@router.put("/{category_id}", response_model=ActionResult)
def update_category(
    category_id: uuid.UUID,
    request: Request,
    name: str | None = Form(None),
    description: str | None = Form(None),
    is_active: bool | None = Form(None),
    session: Session = Depends(get_session),
):
    try:
        ensure_admin(request)
        form = CategoryForm(name=name, description=description)
        service.update_category(session, category_id, form, is_active=is_active)
    except Exception as exc:
        return action_failure(exc, "Failed to update category")
    return ActionResult(success=True, message="Category updated successfully")


@router.delete("/{category_id}", response_model=ActionResult)
def delete_category(
    category_id: uuid.UUID,
    request: Request,
    session: Session = Depends(get_session),
):
    """
    Delete a category. Refused while any product still references it.
    """
    try:
        ensure_admin(request)
        service.delete_category(session, category_id)
    except Exception as exc:
        return action_failure(exc, "Failed to delete category")
    return ActionResult(success=True)


@router.post("/{category_id}/toggle", response_model=CategoryToggleResult)
def toggle_category(
    category_id: uuid.UUID,
    request: Request,
    session: Session = Depends(get_session),
):
    try:
        ensure_admin(request)
        category = service.toggle_category(session, category_id)
    except Exception as exc:
        failure = action_failure(exc, "Failed to toggle category status")
        return CategoryToggleResult(success=False, message=failure.message)
    return CategoryToggleResult(success=True, is_active=category.is_active)
