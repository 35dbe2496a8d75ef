"""
API Dependencies — wires repositories and services per request.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.crypto import FieldCipher
from app.core.tasks import TaskQueue
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.repositories.area_repository import SQLAlchemyAreaRepository
from app.infrastructure.repositories.category_repository import SQLAlchemyCategoryRepository
from app.infrastructure.repositories.refresh_token_repository import SQLAlchemyRefreshTokenRepository
from app.infrastructure.repositories.role_repository import SQLAlchemyRoleRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from app.application.services.area_service import AreaService
from app.application.services.audit_service import AuditLogger
from app.application.services.auth_service import AuthService
from app.application.services.category_service import CategoryService
from app.application.services.role_service import RoleService
from app.application.services.user_service import UserService


@lru_cache
def get_cipher() -> FieldCipher:
    return FieldCipher(get_settings().ENC_KEY)


@lru_cache
def get_task_queue() -> TaskQueue:
    settings = get_settings()
    return TaskQueue(maxsize=settings.AUDIT_QUEUE_SIZE, workers=settings.AUDIT_WORKERS, name="audit")


def get_audit_logger() -> AuditLogger:
    return AuditLogger(get_task_queue(), SessionLocal)


def build_user_service(db: Session) -> UserService:
    settings = get_settings()
    return UserService(
        users=SQLAlchemyUserRepository(db),
        roles=SQLAlchemyRoleRepository(db),
        cipher=get_cipher(),
        audit=get_audit_logger(),
        max_failed_logins=settings.MAX_FAILED_LOGINS,
        lockout_minutes=settings.LOCKOUT_MINUTES,
    )


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return build_user_service(db)


def get_auth_service(
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> AuthService:
    settings = get_settings()
    return AuthService(
        user_service=user_service,
        refresh_tokens=SQLAlchemyRefreshTokenRepository(db),
        audit=get_audit_logger(),
        tasks=get_task_queue(),
        session_factory=SessionLocal,
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        issuer=settings.JWT_ISSUER,
        access_expiry_minutes=settings.JWT_EXPIRY,
        refresh_expiry_minutes=settings.JWT_REFRESH_EXPIRY,
    )


def get_role_service(db: Session = Depends(get_db)) -> RoleService:
    return RoleService(SQLAlchemyRoleRepository(db), SQLAlchemyUserRepository(db), get_audit_logger())


def get_area_service(db: Session = Depends(get_db)) -> AreaService:
    return AreaService(SQLAlchemyAreaRepository(db), get_audit_logger())


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(SQLAlchemyCategoryRepository(db), get_audit_logger())
