"""
SQLAlchemy Implementation of User Repository.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.repositories.base_repository import LIKE_ESCAPE, SQLAlchemyRepository, contains_pattern


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def _active(self) -> Query:
        return self.db.query(User).filter(User.deleted_at.is_(None))

    def get_active_by_id(self, id: UUID) -> Optional[User]:
        return self._active().filter(User.id == id).first()

    def get_by_email_hash(self, email_hash: str) -> Optional[User]:
        if not email_hash:
            return None
        return self._active().filter(User.email_hash == email_hash).first()

    def get_by_username(self, username: str) -> Optional[User]:
        return self._active().filter(User.username == username).first()

    def find_conflict(self, email_hash: str, username: str, exclude_id: Optional[UUID] = None) -> Optional[User]:
        conditions = [User.username == username]
        if email_hash:
            conditions.append(User.email_hash == email_hash)

        query = self._active().filter(or_(*conditions))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first()

    def list_active(self, skip: int = 0, limit: int = 10) -> List[User]:
        return self._active().order_by(User.created_at.desc(), User.username).offset(skip).limit(limit).all()

    def count_active(self) -> int:
        return self._active().count()

    def _search(self, term: str, term_hash: str) -> Query:
        return self._active().filter(
            or_(
                User.username.ilike(contains_pattern(term), escape=LIKE_ESCAPE),
                User.email_hash == term_hash,
                User.fullname_hash == term_hash,
                User.phone_hash == term_hash,
            )
        )

    def search(self, term: str, term_hash: str, skip: int = 0, limit: int = 10) -> List[User]:
        return self._search(term, term_hash).order_by(User.username).offset(skip).limit(limit).all()

    def count_search(self, term: str, term_hash: str) -> int:
        return self._search(term, term_hash).count()

    def touch_last_login(self, id: UUID, when: datetime) -> None:
        self.db.query(User).filter(User.id == id).update(
            {User.last_login_at: when}, synchronize_session=False
        )
        self.db.commit()

    def increment_failed_logins(self, id: UUID) -> None:
        self.db.query(User).filter(User.id == id).update(
            {User.failed_login_count: func.coalesce(User.failed_login_count, 0) + 1},
            synchronize_session=False,
        )
        self.db.commit()

    def lock_if_exceeded(self, id: UUID, max_attempts: int, until: datetime) -> bool:
        locked = (
            self.db.query(User)
            .filter(User.id == id, User.failed_login_count >= max_attempts)
            .update({User.failed_login_count: 0, User.locked_until: until}, synchronize_session=False)
        )
        self.db.commit()
        return locked > 0
