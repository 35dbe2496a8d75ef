"""
SQLAlchemy Implementation of AuditLog Repository.
Audit entries are only ever created and listed.
"""

from typing import List

from sqlalchemy.orm import Session

from app.domain.models.audit_log import AuditLog
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyAuditLogRepository(SQLAlchemyRepository[AuditLog]):

    def __init__(self, db: Session):
        super().__init__(db, AuditLog)

    def list(self, skip: int = 0, limit: int = 100) -> List[AuditLog]:
        return (
            self.db.query(AuditLog)
            .order_by(AuditLog.created_at.desc(), AuditLog.id)
            .offset(skip)
            .limit(limit)
            .all()
        )
