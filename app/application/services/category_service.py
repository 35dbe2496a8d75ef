"""Category service — report categories with soft delete and whitelisted sorting."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictError, EntityNotFoundException
from app.core.timeutil import utcnow
from app.domain.models.audit_log import LogAction, LogEntity
from app.domain.models.category import Category
from app.domain.schemas.category import CategoryCreate, CategoryStatus, CategoryUpdate
from app.application.services.audit_service import AuditLogger
from app.infrastructure.repositories.category_repository import (
    SORTABLE_COLUMNS,
    SQLAlchemyCategoryRepository,
)

CATEGORY_EXISTS_MESSAGE = "category already exist"
DEFAULT_SORT_BY = "name"
DEFAULT_SORT_ORDER = "asc"


class CategoryService:
    def __init__(self, categories: SQLAlchemyCategoryRepository, audit: AuditLogger):
        self.categories = categories
        self.audit = audit

    def check_category_exist(self, name: str, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        return self.categories.find_existing(name, slug, exclude_id=exclude_id) is not None

    def create_category(self, performed_by: UUID, body: CategoryCreate) -> UUID:
        if self.check_category_exist(body.name, body.slug):
            raise ConflictError(CATEGORY_EXISTS_MESSAGE)
        try:
            category = self.categories.create(body.model_dump())
        except IntegrityError as exc:
            self.categories.db.rollback()
            raise ConflictError(CATEGORY_EXISTS_MESSAGE) from exc

        self.audit.log(LogEntity.categories, LogAction.create, category.id, performed_by)
        return category.id

    def get_categories(self) -> List[Category]:
        return self.categories.list()

    def get_category_by_id(self, category_id: UUID) -> Category:
        category = self.categories.get_by_id(category_id)
        if not category:
            raise EntityNotFoundException("category not found")
        return category

    def get_category_by_slug(self, slug: str) -> Category:
        category = self.categories.get_by_slug(slug)
        if not category:
            raise EntityNotFoundException("category not found")
        return category

    def search_categories(
        self,
        search_term: str = "",
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> List[Category]:
        """Unknown sort columns and directions fall back to name / asc."""
        sort_by = (sort_by or "").lower()
        sort_order = (sort_order or "").lower()
        if sort_by not in SORTABLE_COLUMNS:
            sort_by = DEFAULT_SORT_BY
        if sort_order not in ("asc", "desc"):
            sort_order = DEFAULT_SORT_ORDER
        return self.categories.search((search_term or "").strip(), sort_by, sort_order)

    def toggle_category_active_status(self, performed_by: UUID, category_id: UUID) -> CategoryStatus:
        category = self.get_category_by_id(category_id)
        category = self.categories.update(category, {"is_active": not category.is_active})
        self.audit.log(
            LogEntity.categories,
            LogAction.update,
            category.id,
            performed_by,
            metadata={"id": str(category.id), "is_active": category.is_active},
        )
        return CategoryStatus(id=category.id, is_active=category.is_active)

    def update_category(self, performed_by: UUID, category_id: UUID, body: CategoryUpdate) -> UUID:
        category = self.get_category_by_id(category_id)
        if self.check_category_exist(body.name, body.slug, exclude_id=category.id):
            raise ConflictError(CATEGORY_EXISTS_MESSAGE)
        try:
            category = self.categories.update(category, body.model_dump())
        except IntegrityError as exc:
            self.categories.db.rollback()
            raise ConflictError(CATEGORY_EXISTS_MESSAGE) from exc

        self.audit.log(LogEntity.categories, LogAction.update, category.id, performed_by)
        return category.id

    def delete_category(self, performed_by: UUID, category_id: UUID) -> UUID:
        category = self.get_category_by_id(category_id)
        self.categories.update(category, {"deleted_at": utcnow()})
        self.audit.log(LogEntity.categories, LogAction.delete, category_id, performed_by)
        return category_id
