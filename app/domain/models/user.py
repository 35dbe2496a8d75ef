"""User domain model — maps to the 'users' table.

PII is never stored in plaintext: each field has a lookup hash column and
an AES-GCM ciphertext column.
"""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    SmallInteger,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.domain.models.role import Role  # noqa: F401  registers the relationship target
from app.infrastructure.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(50), nullable=False, index=True)

    email_hash = Column(String(64), nullable=False, default="", index=True)
    email_enc = Column(LargeBinary, nullable=True)
    fullname_hash = Column(String(64), nullable=False, default="", index=True)
    fullname_enc = Column(LargeBinary, nullable=True)
    phone_hash = Column(String(64), nullable=False, default="", index=True)
    phone_enc = Column(LargeBinary, nullable=True)

    password_hash = Column(String(255), nullable=False)
    role_id = Column(Uuid, ForeignKey("roles.id", ondelete="SET NULL"), nullable=True)

    credibility_score = Column(SmallInteger, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="active")  # active, suspended
    is_email_verified = Column(Boolean, nullable=False, default=False)
    is_phone_verified = Column(Boolean, nullable=False, default=False)
    failed_login_count = Column(Integer, nullable=False, default=0)
    locked_until = Column(DateTime(timezone=True), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    updated_by = Column(Uuid, nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(Uuid, nullable=True)

    role = relationship("Role", lazy="joined")

    __table_args__ = (
        # unique among non-deleted rows only
        Index(
            "uq_users_username_active",
            "username",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index(
            "uq_users_email_hash_active",
            "email_hash",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    @property
    def role_name(self) -> str:
        return self.role.name if self.role else ""

    def __repr__(self):
        return f"<User {self.username}>"
