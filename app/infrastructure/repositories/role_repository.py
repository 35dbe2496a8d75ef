"""
SQLAlchemy Implementation of Role Repository.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from app.domain.models.role import Role
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyRoleRepository(SQLAlchemyRepository[Role]):

    def __init__(self, db: Session):
        super().__init__(db, Role)

    def get_by_name(self, name: str) -> Optional[Role]:
        return self.db.query(Role).filter(Role.name == name).first()

    def list(self, skip: int = 0, limit: int = 100) -> List[Role]:
        return self.db.query(Role).order_by(Role.name).offset(skip).limit(limit).all()
