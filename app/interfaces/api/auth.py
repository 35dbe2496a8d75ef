"""Auth API routes — web login, refresh, session and logout.

Web clients receive both tokens as HTTP-only cookies.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response

from app.config import get_settings
from app.application.services.auth_service import AuthService
from app.core.responses import envelope
from app.domain.schemas.auth import LoginRequest, LoginResponse, RefreshRequest, TokenClaims
from app.interfaces.api.deps import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, get_current_user
from app.interfaces.deps import get_auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


def set_auth_cookies(response: Response, tokens: LoginResponse) -> None:
    settings = get_settings()
    common = {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "lax",
        "domain": settings.APP_DOMAIN,
        "path": "/",
    }
    response.set_cookie(ACCESS_TOKEN_COOKIE, tokens.token, max_age=60 * settings.JWT_EXPIRY, **common)
    response.set_cookie(
        REFRESH_TOKEN_COOKIE, tokens.refresh_token, max_age=60 * settings.JWT_REFRESH_EXPIRY, **common
    )


def clear_auth_cookies(response: Response) -> None:
    settings = get_settings()
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(name, domain=settings.APP_DOMAIN, path="/")


@router.post("/login")
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    tokens = auth_service.login(body.identifier, body.password, channel="web")
    set_auth_cookies(response, tokens)
    return envelope(request, tokens)


@router.post("/refresh")
def refresh(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Rotate the refresh token from the cookie, or from the body when no cookie is sent."""
    token = request.cookies.get(REFRESH_TOKEN_COOKIE) or (body.refresh_token if body else None)
    tokens = auth_service.refresh_token(token)
    set_auth_cookies(response, tokens)
    return envelope(request, tokens)


@router.post("/session")
def session(request: Request, user: TokenClaims = Depends(get_current_user)):
    return envelope(request, {"id": user.user_id, "role": user.role, "username": user.username})


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
):
    token = request.cookies.get(REFRESH_TOKEN_COOKIE) or (body.refresh_token if body else None)
    auth_service.logout(token)
    clear_auth_cookies(response)
    return envelope(request, {"message": "logged out"})
