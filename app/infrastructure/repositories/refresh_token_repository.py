"""
SQLAlchemy Implementation of RefreshToken Repository.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.domain.models.refresh_token import RefreshToken
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyRefreshTokenRepository(SQLAlchemyRepository[RefreshToken]):

    def __init__(self, db: Session):
        super().__init__(db, RefreshToken)

    def get_by_jti(self, jti: str) -> Optional[RefreshToken]:
        return self.db.get(RefreshToken, jti)

    def revoke(self, jti: str, when: datetime) -> bool:
        """Revoke a token that is still live. False when it was already revoked."""
        revoked = (
            self.db.query(RefreshToken)
            .filter(RefreshToken.jti == jti, RefreshToken.revoked_at.is_(None))
            .update({RefreshToken.revoked_at: when}, synchronize_session=False)
        )
        self.db.commit()
        return revoked > 0
