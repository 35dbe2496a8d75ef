"""Role service — role CRUD and user role assignment. Every mutation is audited."""

from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictError, EntityNotFoundException, ValidationError
from app.domain.models.audit_log import LogAction, LogEntity
from app.domain.models.role import Role
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.role import RoleCreate, RoleUpdate
from app.application.services.audit_service import AuditLogger
from app.infrastructure.repositories.role_repository import SQLAlchemyRoleRepository

ROLE_EXISTS_MESSAGE = "role name already exist"


class RoleService:
    def __init__(self, roles: SQLAlchemyRoleRepository, users: UserRepository, audit: AuditLogger):
        self.roles = roles
        self.users = users
        self.audit = audit

    def check_role_exists(self, name: str) -> bool:
        return self.roles.get_by_name(name) is not None

    def list_all_roles(self) -> List[Role]:
        return self.roles.list()

    def get_role_by_id(self, role_id: UUID) -> Role:
        role = self.roles.get_by_id(role_id)
        if not role:
            raise EntityNotFoundException("role does not exist")
        return role

    def get_role_by_name(self, name: str) -> Role:
        role = self.roles.get_by_name(name)
        if not role:
            raise EntityNotFoundException("role does not exist")
        return role

    def create_role(self, performed_by: UUID, body: RoleCreate) -> UUID:
        if self.check_role_exists(body.name):
            raise ConflictError(ROLE_EXISTS_MESSAGE)
        try:
            role = self.roles.create(body)
        except IntegrityError as exc:
            self.roles.db.rollback()
            raise ConflictError(ROLE_EXISTS_MESSAGE) from exc

        self.audit.log(LogEntity.roles, LogAction.create, role.id, performed_by)
        return role.id

    def update_role(self, performed_by: UUID, role_id: UUID, body: RoleUpdate) -> Role:
        role = self.get_role_by_id(role_id)
        if role.name != body.name and self.check_role_exists(body.name):
            raise ConflictError(ROLE_EXISTS_MESSAGE)
        try:
            role = self.roles.update(role, body)
        except IntegrityError as exc:
            self.roles.db.rollback()
            raise ConflictError(ROLE_EXISTS_MESSAGE) from exc

        self.audit.log(LogEntity.roles, LogAction.update, role.id, performed_by)
        return role

    def remove_role(self, performed_by: UUID, role_id: UUID) -> UUID:
        role = self.get_role_by_id(role_id)
        self.roles.delete(role.id)
        self.audit.log(LogEntity.roles, LogAction.delete, role_id, performed_by)
        return role_id

    def assign_role_to_user(self, performed_by: UUID, user_id: UUID, role_name: str) -> None:
        if not role_name:
            raise ValidationError("role name is required")
        role = self.roles.get_by_name(role_name)
        if not role:
            raise ValidationError("role name does not exist")
        user = self.users.get_active_by_id(user_id)
        if not user:
            raise EntityNotFoundException("user not found")

        self.users.update(user, {"role_id": role.id, "updated_by": performed_by})
        self.audit.log(
            LogEntity.roles, LogAction.assign, role.id, performed_by, metadata={"user_id": str(user_id)}
        )

    def remove_user_role(self, performed_by: UUID, user_id: UUID) -> None:
        user = self.users.get_active_by_id(user_id)
        if not user:
            raise EntityNotFoundException("user not found")

        self.users.update(user, {"role_id": None, "updated_by": performed_by})
        self.audit.log(LogEntity.roles, LogAction.delete, user_id, performed_by)

    def has_role(self, user_id: UUID, role_name: str) -> bool:
        user = self.users.get_active_by_id(user_id)
        return user is not None and user.role_name == role_name
