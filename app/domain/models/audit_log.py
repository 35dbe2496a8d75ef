"""Audit log — append-only record of who did what to which entity."""

import enum
import uuid

from sqlalchemy import JSON, Column, DateTime, String, Uuid
from sqlalchemy.sql import func

from app.core.timeutil import utcnow
from app.infrastructure.database import Base


class LogEntity(str, enum.Enum):
    users = "users"
    roles = "roles"
    areas = "areas"
    categories = "categories"


class LogAction(str, enum.Enum):
    create = "create"
    update = "update"
    delete = "delete"
    restore = "restore"
    assign = "assign"
    login = "login"
    logout = "logout"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    entity_name = Column(String(50), nullable=False, index=True)
    action = Column(String(20), nullable=False)
    entity_id = Column(Uuid, nullable=True)
    performed_by = Column(Uuid, nullable=True, index=True)
    details = Column("metadata", JSON, nullable=True)  # "metadata" is reserved on declarative classes
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)

    def __repr__(self):
        return f"<AuditLog {self.entity_name}.{self.action}>"
