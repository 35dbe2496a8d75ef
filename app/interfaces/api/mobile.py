"""Mobile API routes — citizen-only, tokens in the body, bearer auth.

Every route answers 404 unless the request carries the mobile key header.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request

from app.application.services.auth_service import AuthService
from app.application.services.user_service import UserService
from app.core.responses import envelope
from app.domain.schemas.auth import LoginRequest, RefreshRequest, TokenClaims
from app.interfaces.api.deps import get_current_mobile_user, require_mobile_client
from app.interfaces.deps import get_auth_service, get_user_service

router = APIRouter(prefix="/m", tags=["Mobile"], dependencies=[Depends(require_mobile_client)])


@router.post("/auth/login")
def mobile_login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    return envelope(request, auth_service.login(body.identifier, body.password, channel="mobile"))


@router.post("/auth/refresh")
def mobile_refresh(
    request: Request,
    body: Optional[RefreshRequest] = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
):
    token = body.refresh_token if body else None
    return envelope(request, auth_service.refresh_token(token))


@router.get("/users/me")
def mobile_me(
    request: Request,
    user: TokenClaims = Depends(get_current_mobile_user),
    user_service: UserService = Depends(get_user_service),
):
    return envelope(request, user_service.get_user_by_id(user.user_id))
