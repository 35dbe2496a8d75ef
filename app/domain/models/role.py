"""Role domain model — maps to the 'roles' table."""

import enum
import uuid

from sqlalchemy import Column, DateTime, String, Text, Uuid
from sqlalchemy.sql import func

from app.infrastructure.database import Base


class RoleType(str, enum.Enum):
    citizen = "citizen"
    official = "official"
    admin = "admin"


class Role(Base):
    __tablename__ = "roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(20), unique=True, nullable=False)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Role {self.name}>"
