"""Category API routes — reads for any signed-in user, writes for admins."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from app.application.services.category_service import CategoryService
from app.core.responses import envelope
from app.domain.schemas.auth import TokenClaims
from app.domain.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from app.interfaces.api.deps import get_current_user, require_admin
from app.interfaces.deps import get_category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_category(
    request: Request,
    body: CategoryCreate,
    admin: TokenClaims = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
):
    return envelope(request, {"id": category_service.create_category(admin.user_id, body)})


@router.get("/list")
def list_categories(
    request: Request,
    user: TokenClaims = Depends(get_current_user),
    category_service: CategoryService = Depends(get_category_service),
):
    categories = category_service.get_categories()
    return envelope(request, [CategoryRead.model_validate(c) for c in categories])


@router.get("/search")
def search_categories(
    request: Request,
    search_term: str = Query(""),
    sort_by: Optional[str] = Query(None),
    sort_order: Optional[str] = Query(None),
    user: TokenClaims = Depends(get_current_user),
    category_service: CategoryService = Depends(get_category_service),
):
    categories = category_service.search_categories(search_term, sort_by, sort_order)
    return envelope(request, [CategoryRead.model_validate(c) for c in categories])


@router.get("/id/{category_id}")
def get_category_by_id(
    request: Request,
    category_id: UUID,
    user: TokenClaims = Depends(get_current_user),
    category_service: CategoryService = Depends(get_category_service),
):
    return envelope(request, CategoryRead.model_validate(category_service.get_category_by_id(category_id)))


@router.get("/slug/{slug}")
def get_category_by_slug(
    request: Request,
    slug: str,
    user: TokenClaims = Depends(get_current_user),
    category_service: CategoryService = Depends(get_category_service),
):
    return envelope(request, CategoryRead.model_validate(category_service.get_category_by_slug(slug)))


@router.patch("/{category_id}/toggle")
def toggle_category(
    request: Request,
    category_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
):
    return envelope(request, category_service.toggle_category_active_status(admin.user_id, category_id))


@router.put("/{category_id}")
def update_category(
    request: Request,
    category_id: UUID,
    body: CategoryUpdate,
    admin: TokenClaims = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
):
    return envelope(request, {"id": category_service.update_category(admin.user_id, category_id, body)})


@router.delete("/{category_id}")
def delete_category(
    request: Request,
    category_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
):
    return envelope(request, {"id": category_service.delete_category(admin.user_id, category_id)})
