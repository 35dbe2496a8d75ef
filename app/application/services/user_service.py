"""User service — account lifecycle with encrypted, hash-indexed PII.

Email, full name and phone never touch the database in plaintext. Writes
store a lookup hash plus AES-GCM ciphertext per field; reads decrypt, and
a single undecryptable field fails the whole read rather than returning a
partially blank profile.
"""

import uuid
from datetime import timedelta
from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from app.core.crypto import FieldCipher, hash_password, hash_value
from app.core.exceptions import ConflictError, EntityNotFoundException, ValidationError
from app.core.timeutil import as_utc, utcnow
from app.domain.models.audit_log import LogAction, LogEntity
from app.domain.models.role import Role, RoleType
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.user import UserCreate, UserList, UserProfile, UserUpdate
from app.application.services.audit_service import AuditLogger
from app.infrastructure.repositories.role_repository import SQLAlchemyRoleRepository

logger = structlog.get_logger(__name__)

BUILTIN_ROLES = {
    RoleType.citizen.value: "Citizen reporting issues in their area",
    RoleType.official.value: "Municipal official handling reports",
    RoleType.admin.value: "System administrator",
}

USER_EXISTS_MESSAGE = "user with this email or username already exist"


class UserService:
    def __init__(
        self,
        users: UserRepository,
        roles: SQLAlchemyRoleRepository,
        cipher: FieldCipher,
        audit: AuditLogger,
        max_failed_logins: int = 3,
        lockout_minutes: int = 15,
    ):
        self.users = users
        self.roles = roles
        self.cipher = cipher
        self.audit = audit
        self.max_failed_logins = max_failed_logins
        self.lockout_minutes = lockout_minutes

    # Reads

    def to_profile(self, user: User) -> UserProfile:
        return UserProfile(
            id=user.id,
            email=self.cipher.decrypt(user.email_enc),
            fullname=self.cipher.decrypt(user.fullname_enc),
            phone=self.cipher.decrypt(user.phone_enc),
            username=user.username,
            role=user.role_name,
            credibility_score=user.credibility_score or 0,
            status=user.status,
            is_email_verified=bool(user.is_email_verified),
            is_phone_verified=bool(user.is_phone_verified),
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def find_by_identifier(self, identifier: str) -> Optional[User]:
        """Resolve an active user by UUID, then email hash, then username."""
        identifier = (identifier or "").strip()
        if not identifier:
            return None

        try:
            user_id = UUID(identifier)
        except ValueError:
            user_id = None
        if user_id is not None:
            user = self.users.get_active_by_id(user_id)
            if user:
                return user

        return self.users.get_by_email_hash(hash_value(identifier)) or self.users.get_by_username(identifier)

    def get_active_user(self, user_id: UUID) -> User:
        user = self.users.get_active_by_id(user_id)
        if not user:
            raise EntityNotFoundException("user not found")
        return user

    def get_user_by_id(self, user_id: UUID) -> UserProfile:
        return self.to_profile(self.get_active_user(user_id))

    def get_user_by_identifier(self, identifier: str) -> UserProfile:
        user = self.find_by_identifier(identifier)
        if not user:
            raise EntityNotFoundException("user not found")
        return self.to_profile(user)

    def get_users(self, page: int = 1, limit: int = 10) -> UserList:
        users = self.users.list_active(skip=(page - 1) * limit, limit=limit)
        return UserList(
            items=[self.to_profile(u) for u in users],
            total=self.users.count_active(),
            page=page,
            limit=limit,
        )

    def search_users(self, query: str, page: int = 1, limit: int = 10) -> UserList:
        term = (query or "").strip()
        if not term:
            raise ValidationError("query field is required")

        term_hash = hash_value(term)
        users = self.users.search(term, term_hash, skip=(page - 1) * limit, limit=limit)
        return UserList(
            items=[self.to_profile(u) for u in users],
            total=self.users.count_search(term, term_hash),
            page=page,
            limit=limit,
        )

    # Writes

    def resolve_role(self, name: Optional[str]) -> Role:
        """Look up a role by name, creating built-in roles on first use."""
        role_name = (name or RoleType.citizen.value).strip().lower()
        role = self.roles.get_by_name(role_name)
        if role:
            return role
        if role_name not in BUILTIN_ROLES:
            raise ValidationError("role name does not exist")

        try:
            role = self.roles.create({"name": role_name, "description": BUILTIN_ROLES[role_name]})
        except IntegrityError:
            # created concurrently
            self.roles.db.rollback()
            return self.roles.get_by_name(role_name)
        logger.info("Built-in role created", role=role_name)
        return role

    def create_user(self, data: UserCreate, performed_by: Optional[UUID] = None) -> UserProfile:
        email_hash = hash_value(data.email)
        if self.users.find_conflict(email_hash, data.username):
            raise ConflictError(USER_EXISTS_MESSAGE)

        role = self.resolve_role(data.role)
        try:
            user = self.users.create(
                {
                    "id": uuid.uuid4(),
                    "username": data.username,
                    "email_hash": email_hash,
                    "email_enc": self.cipher.encrypt(data.email),
                    "fullname_hash": hash_value(data.full_name),
                    "fullname_enc": self.cipher.encrypt(data.full_name),
                    "phone_hash": hash_value(data.phone_number),
                    "phone_enc": self.cipher.encrypt(data.phone_number),
                    "password_hash": data.password_hash,
                    "role_id": role.id,
                }
            )
        except IntegrityError as exc:
            self.users.db.rollback()
            raise ConflictError(USER_EXISTS_MESSAGE) from exc

        logger.info("User created", user_id=str(user.id), role=role.name)
        self.audit.log(LogEntity.users, LogAction.create, user.id, performed_by or user.id)
        return self.to_profile(user)

    def update_user(self, user_id: UUID, data: UserUpdate, performed_by: UUID) -> UserProfile:
        user = self.get_active_user(user_id)
        current = self.to_profile(user)

        email = data.email if data.email is not None else current.email
        username = data.username if data.username is not None else current.username
        fullname = data.full_name if data.full_name is not None else current.fullname
        phone = data.phone_number if data.phone_number is not None else current.phone

        email_hash = hash_value(email)
        if email_hash != user.email_hash or username != user.username:
            if self.users.find_conflict(email_hash, username, exclude_id=user.id):
                raise ConflictError(USER_EXISTS_MESSAGE)

        changes = {
            "username": username,
            "email_hash": email_hash,
            "email_enc": self.cipher.encrypt(email),
            "fullname_hash": hash_value(fullname),
            "fullname_enc": self.cipher.encrypt(fullname),
            "phone_hash": hash_value(phone),
            "phone_enc": self.cipher.encrypt(phone),
            "updated_by": performed_by,
        }
        if data.status is not None:
            changes["status"] = data.status

        try:
            user = self.users.update(user, changes)
        except IntegrityError as exc:
            self.users.db.rollback()
            raise ConflictError(USER_EXISTS_MESSAGE) from exc

        self.audit.log(LogEntity.users, LogAction.update, user.id, performed_by)
        return self.to_profile(user)

    def delete_user(self, user_id: UUID, performed_by: UUID) -> UUID:
        user = self.get_active_user(user_id)
        self.users.update(user, {"deleted_at": utcnow(), "deleted_by": performed_by})
        self.audit.log(LogEntity.users, LogAction.delete, user.id, performed_by)
        return user.id

    def restore_user(self, user_id: UUID, performed_by: UUID) -> UUID:
        user = self.users.get_by_id(user_id)
        if not user or user.deleted_at is None:
            raise EntityNotFoundException("user not found")
        if self.users.find_conflict(user.email_hash, user.username, exclude_id=user.id):
            raise ConflictError(USER_EXISTS_MESSAGE)

        try:
            self.users.update(user, {"deleted_at": None, "deleted_by": None, "updated_by": performed_by})
        except IntegrityError as exc:
            self.users.db.rollback()
            raise ConflictError(USER_EXISTS_MESSAGE) from exc

        self.audit.log(LogEntity.users, LogAction.restore, user.id, performed_by)
        return user.id

    # Login bookkeeping

    def is_locked(self, user: User) -> bool:
        locked_until = as_utc(user.locked_until)
        return locked_until is not None and locked_until > utcnow()

    def increment_failed_logins(self, user: User) -> User:
        """Count a failed login. Reaching the limit locks the account and restarts the count."""
        self.users.increment_failed_logins(user.id)
        locked_until = utcnow() + timedelta(minutes=self.lockout_minutes)
        if self.users.lock_if_exceeded(user.id, self.max_failed_logins, locked_until):
            logger.warning("Account locked", user_id=str(user.id), locked_until=locked_until.isoformat())
        self.users.db.refresh(user)
        return user

    def reset_failed_logins(self, user: User) -> User:
        if not user.failed_login_count and user.locked_until is None:
            return user
        return self.users.update(user, {"failed_login_count": 0, "locked_until": None})

    def initialize_root_user(
        self,
        username: str,
        password: str,
        email: str,
        fullname: str,
        phone: str = "",
    ) -> Optional[UserProfile]:
        """Create the bootstrap admin account. Returns None when it already exists."""
        missing = [
            name
            for name, value in (
                ("ROOT_USERNAME", username),
                ("ROOT_PASSWORD", password),
                ("ROOT_EMAIL", email),
                ("ROOT_FULLNAME", fullname),
            )
            if not value
        ]
        if missing:
            raise ValidationError(
                "root user settings are incomplete", details={"missing": missing}
            )

        if self.users.get_by_username(username) or self.users.get_by_email_hash(hash_value(email)):
            logger.info("Root user already exists", username=username)
            return None

        profile = self.create_user(
            UserCreate(
                username=username,
                email=email,
                full_name=fullname,
                phone_number=phone or None,
                password_hash=hash_password(password),
                role=RoleType.admin.value,
            )
        )
        logger.info("Root user created", username=username)
        return profile
