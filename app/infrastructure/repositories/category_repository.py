"""
SQLAlchemy Implementation of Category Repository.
Soft-deleted categories are invisible to every read.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from app.domain.models.category import Category
from app.infrastructure.repositories.base_repository import LIKE_ESCAPE, SQLAlchemyRepository, contains_pattern

SORTABLE_COLUMNS = {
    "name": Category.name,
    "slug": Category.slug,
    "icon": Category.icon,
    "color": Category.color,
    "is_active": Category.is_active,
    "sort_order": Category.sort_order,
}


class SQLAlchemyCategoryRepository(SQLAlchemyRepository[Category]):

    def __init__(self, db: Session):
        super().__init__(db, Category)

    def _active(self) -> Query:
        return self.db.query(Category).filter(Category.deleted_at.is_(None))

    def get_by_id(self, id: UUID) -> Optional[Category]:
        return self._active().filter(Category.id == id).first()

    def get_by_slug(self, slug: str) -> Optional[Category]:
        return self._active().filter(Category.slug == slug).first()

    def find_existing(self, name: str, slug: str, exclude_id: Optional[UUID] = None) -> Optional[Category]:
        query = self._active().filter(or_(Category.name == name, Category.slug == slug))
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first()

    def list(self, skip: int = 0, limit: int = 100) -> List[Category]:
        return (
            self._active()
            .order_by(Category.sort_order, Category.name)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def search(self, term: str, sort_by: str = "name", sort_order: str = "asc") -> List[Category]:
        """Case-insensitive match on name or slug. sort_by must be a key of SORTABLE_COLUMNS."""
        query = self._active()
        if term:
            pattern = contains_pattern(term)
            query = query.filter(
                or_(Category.name.ilike(pattern, escape=LIKE_ESCAPE), Category.slug.ilike(pattern, escape=LIKE_ESCAPE))
            )

        column = SORTABLE_COLUMNS[sort_by]
        ordering = column.desc() if sort_order == "desc" else column.asc()
        return query.order_by(ordering, Category.id).all()
