"""Auth service — login with lockout, JWT issue/validation and refresh rotation."""

import uuid
from datetime import timedelta
from typing import Callable, Literal, Optional
from uuid import UUID

import pydantic
import structlog
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from app.core.crypto import hash_password, verify_password
from app.core.exceptions import (
    AccountLockedError,
    ExpiredTokenError,
    ForbiddenException,
    InvalidTokenError,
    InvalidTokenTypeError,
    UnauthorizedException,
)
from app.core.tasks import TaskQueue
from app.core.timeutil import as_utc, utcnow
from app.domain.models.audit_log import LogAction, LogEntity
from app.domain.models.role import RoleType
from app.domain.models.user import User
from app.domain.schemas.auth import LoginResponse, RegisterRequest, TokenClaims, UserInfo
from app.domain.schemas.user import UserCreate, UserProfile
from app.application.services.audit_service import AuditLogger
from app.application.services.user_service import UserService
from app.infrastructure.repositories.refresh_token_repository import SQLAlchemyRefreshTokenRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

logger = structlog.get_logger(__name__)

ACCESS = "access"
REFRESH = "refresh"

Channel = Literal["web", "mobile"]

INVALID_CREDENTIALS = "invalid credentials"


class AuthService:
    def __init__(
        self,
        user_service: UserService,
        refresh_tokens: SQLAlchemyRefreshTokenRepository,
        audit: AuditLogger,
        tasks: TaskQueue,
        session_factory: Callable[[], Session],
        secret: str,
        algorithm: str = "HS256",
        issuer: str = "lapor-warga",
        access_expiry_minutes: int = 15,
        refresh_expiry_minutes: int = 720,
    ):
        self.user_service = user_service
        self.refresh_tokens = refresh_tokens
        self.audit = audit
        self.tasks = tasks
        self.session_factory = session_factory
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.access_expiry = timedelta(minutes=access_expiry_minutes)
        self.refresh_expiry = timedelta(minutes=refresh_expiry_minutes)

    # Tokens

    def _encode(self, profile: UserProfile, token_type: str, expires_in: timedelta, jti: Optional[str] = None) -> str:
        now = utcnow()
        claims = {
            "user_id": str(profile.id),
            "username": profile.username,
            "email": profile.email,
            "role": profile.role,
            "token_type": token_type,
            "iss": self.issuer,
            "sub": str(profile.id),
            "iat": now,
            "nbf": now,
            "exp": now + expires_in,
        }
        if jti:
            claims["jti"] = jti
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def generate_token(self, profile: UserProfile) -> str:
        return self._encode(profile, ACCESS, self.access_expiry)

    def generate_refresh_token(self, profile: UserProfile) -> str:
        """Issue a refresh token and record its jti so it can be rotated or revoked."""
        jti = uuid.uuid4().hex
        self.refresh_tokens.create(
            {"jti": jti, "user_id": profile.id, "expires_at": utcnow() + self.refresh_expiry}
        )
        return self._encode(profile, REFRESH, self.refresh_expiry, jti=jti)

    def validate_token(self, token: str, expected_type: Optional[str] = None) -> TokenClaims:
        if not token:
            raise UnauthorizedException("Unauthorized")
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm], issuer=self.issuer)
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError("token has expired") from exc
        except JWTError as exc:
            raise InvalidTokenError("invalid token") from exc

        try:
            claims = TokenClaims.model_validate(payload)
        except pydantic.ValidationError as exc:
            raise InvalidTokenError("invalid token claims") from exc

        if expected_type and claims.token_type != expected_type:
            raise InvalidTokenTypeError("invalid token type")
        return claims

    def _issue_pair(self, user: User) -> LoginResponse:
        profile = self.user_service.to_profile(user)
        return LoginResponse(
            token=self.generate_token(profile),
            refresh_token=self.generate_refresh_token(profile),
            user=UserInfo(
                id=profile.id,
                username=profile.username,
                email=profile.email,
                fullname=profile.fullname,
                role=profile.role,
            ),
        )

    # Flows

    def login(self, identifier: str, password: str, channel: Channel = "web") -> LoginResponse:
        user = self.user_service.find_by_identifier(identifier)
        if not user:
            raise UnauthorizedException(INVALID_CREDENTIALS)

        is_citizen = user.role_name == RoleType.citizen.value
        if channel == "mobile" and not is_citizen:
            raise ForbiddenException("only citizen can login to this route")
        if channel == "web" and is_citizen:
            raise ForbiddenException("citizen cannot login to this route")

        if user.status == "suspended":
            raise ForbiddenException("account is suspended")

        if self.user_service.is_locked(user):
            raise AccountLockedError(details={"locked_until": as_utc(user.locked_until).isoformat()})

        if not verify_password(password, user.password_hash):
            self.user_service.increment_failed_logins(user)
            logger.info("Login failed", user_id=str(user.id), channel=channel)
            raise UnauthorizedException(INVALID_CREDENTIALS)

        user = self.user_service.reset_failed_logins(user)
        response = self._issue_pair(user)

        user_id = user.id
        self.tasks.submit(lambda: self._record_last_login(user_id))
        self.audit.log(LogEntity.users, LogAction.login, user_id, user_id, metadata={"channel": channel})
        logger.info("Login succeeded", user_id=str(user_id), channel=channel)
        return response

    def _record_last_login(self, user_id: UUID) -> None:
        with self.session_factory() as db:
            SQLAlchemyUserRepository(db).touch_last_login(user_id, utcnow())

    def refresh_token(self, token: str) -> LoginResponse:
        """Rotate a refresh token: the presented one is revoked, a new pair is issued."""
        claims = self.validate_token(token, expected_type=REFRESH)

        record = self.refresh_tokens.get_by_jti(claims.jti) if claims.jti else None
        if record is None or record.revoked_at is not None:
            raise InvalidTokenError("refresh token has been revoked")
        if as_utc(record.expires_at) <= utcnow():
            raise ExpiredTokenError("token has expired")

        user = self.user_service.users.get_active_by_id(claims.user_id)
        if not user:
            raise UnauthorizedException("user not found")
        if user.status == "suspended":
            raise ForbiddenException("account is suspended")

        if not self.refresh_tokens.revoke(record.jti, utcnow()):
            raise InvalidTokenError("refresh token has been revoked")
        return self._issue_pair(user)

    def logout(self, refresh_token: Optional[str], performed_by: Optional[UUID] = None) -> None:
        """Revoke the presented refresh token if it is still valid."""
        if refresh_token:
            try:
                claims = self.validate_token(refresh_token, expected_type=REFRESH)
            except UnauthorizedException as exc:
                logger.info("Logout with unusable refresh token", reason=exc.message)
            else:
                if claims.jti:
                    self.refresh_tokens.revoke(claims.jti, utcnow())
                performed_by = performed_by or claims.user_id

        if performed_by:
            self.audit.log(LogEntity.users, LogAction.logout, performed_by, performed_by)

    def register(self, body: RegisterRequest, performed_by: Optional[UUID] = None) -> UserProfile:
        return self.user_service.create_user(
            UserCreate(
                username=body.username,
                email=body.email,
                full_name=body.fullname,
                phone_number=body.phone_number,
                password_hash=hash_password(body.password),
                role=body.role,
            ),
            performed_by=performed_by,
        )
