"""Report category domain model — maps to the 'categories' table."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Uuid, text
from sqlalchemy.sql import func

from app.infrastructure.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, index=True)
    icon = Column(String(100), nullable=True)
    color = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(
            "uq_categories_name_slug_active",
            "name",
            "slug",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    def __repr__(self):
        return f"<Category {self.slug}>"
