"""User API routes — profile, admin management, search and soft delete."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from app.application.services.auth_service import AuthService
from app.application.services.user_service import UserService
from app.core.responses import envelope
from app.domain.schemas.auth import RegisterRequest, TokenClaims
from app.domain.schemas.user import UserUpdate
from app.interfaces.api.deps import get_current_user, require_admin
from app.interfaces.deps import get_auth_service, get_user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me")
def get_me(
    request: Request,
    user: TokenClaims = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    return envelope(request, user_service.get_user_by_id(user.user_id))


@router.patch("/me")
def update_me(
    request: Request,
    body: UserUpdate,
    user: TokenClaims = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    # account status is only changed by admins
    changes = body.model_copy(update={"status": None})
    return envelope(request, user_service.update_user(user.user_id, changes, performed_by=user.user_id))


@router.get("/list")
def list_users(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    return envelope(request, user_service.get_users(page, limit))


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_user(
    request: Request,
    body: RegisterRequest,
    admin: TokenClaims = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service),
):
    return envelope(request, auth_service.register(body, performed_by=admin.user_id))


@router.get("/search")
def search_users(
    request: Request,
    query: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    """Username substring, or exact email / full name / phone."""
    return envelope(request, user_service.search_users(query, page, limit), page=page, limit=limit)


@router.get("/{user_id}")
def get_user(
    request: Request,
    user_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    return envelope(request, user_service.get_user_by_id(user_id))


@router.patch("/{user_id}")
def update_user(
    request: Request,
    user_id: UUID,
    body: UserUpdate,
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    return envelope(request, user_service.update_user(user_id, body, performed_by=admin.user_id))


@router.delete("/{user_id}")
def delete_user(
    request: Request,
    user_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    return envelope(request, {"id": user_service.delete_user(user_id, performed_by=admin.user_id)})


@router.post("/restore/{user_id}")
def restore_user(
    request: Request,
    user_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    return envelope(request, {"id": user_service.restore_user(user_id, performed_by=admin.user_id)})
