"""FastAPI dependencies — JWT auth, role gate and mobile client check."""

from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import get_settings
from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.application.services.auth_service import ACCESS, AuthService
from app.domain.schemas.auth import TokenClaims
from app.interfaces.deps import get_auth_service

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"

security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    """Validate the access token from the bearer header or the access_token cookie."""
    token = credentials.credentials if credentials else request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        raise UnauthorizedException("Unauthorized")
    return auth_service.validate_token(token, expected_type=ACCESS)


def get_current_mobile_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    """Mobile clients must send a bearer token; cookies are not consulted."""
    if not credentials:
        raise UnauthorizedException("Invalid authorization header format")
    return auth_service.validate_token(credentials.credentials, expected_type=ACCESS)


def require_roles(*roles: str) -> Callable[..., TokenClaims]:
    """Allow only tokens whose role claim is one of `roles`."""

    def checker(user: TokenClaims = Depends(get_current_user)) -> TokenClaims:
        if user.role not in roles:
            raise ForbiddenException("you do not have permission to access this resource")
        return user

    return checker


require_admin = require_roles("admin")


def require_mobile_client(request: Request) -> None:
    """Hide mobile routes from anything that does not present the mobile key."""
    settings = get_settings()
    key = request.headers.get(settings.MOBILE_KEY_HEADER)
    if not settings.MOBILE_KEY or key != settings.MOBILE_KEY:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
