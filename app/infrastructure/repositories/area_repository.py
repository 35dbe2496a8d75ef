"""
SQLAlchemy Implementation of Area Repository.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from app.domain.models.area import Area
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyAreaRepository(SQLAlchemyRepository[Area]):

    def __init__(self, db: Session):
        super().__init__(db, Area)

    def get_by_name_and_code(self, name: str, area_code: str) -> Optional[Area]:
        return (
            self.db.query(Area)
            .filter(Area.name == name, Area.area_code == area_code)
            .first()
        )

    def list(self, skip: int = 0, limit: int = 100) -> List[Area]:
        return self.db.query(Area).order_by(Area.area_code, Area.name).offset(skip).limit(limit).all()
