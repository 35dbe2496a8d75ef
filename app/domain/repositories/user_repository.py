"""
User Repository Interface.
Lookups take PII hashes, never plaintext.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from app.domain.repositories.base import BaseRepository
from app.domain.models.user import User


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_active_by_id(self, id: UUID) -> Optional[User]:
        """Get a non-deleted user by ID."""
        ...

    def get_by_email_hash(self, email_hash: str) -> Optional[User]:
        ...

    def get_by_username(self, username: str) -> Optional[User]:
        ...

    def find_conflict(self, email_hash: str, username: str, exclude_id: Optional[UUID] = None) -> Optional[User]:
        """Get an active user sharing the email hash or the username."""
        ...

    def list_active(self, skip: int = 0, limit: int = 10) -> List[User]:
        ...

    def count_active(self) -> int:
        ...

    def search(self, term: str, term_hash: str, skip: int = 0, limit: int = 10) -> List[User]:
        """Username substring match, or exact hash match on email, full name or phone."""
        ...

    def count_search(self, term: str, term_hash: str) -> int:
        ...

    def touch_last_login(self, id: UUID, when: datetime) -> None:
        ...

    def increment_failed_logins(self, id: UUID) -> None:
        """Atomically add one to the failed login counter."""
        ...

    def lock_if_exceeded(self, id: UUID, max_attempts: int, until: datetime) -> bool:
        """Lock the account and restart the counter once it reaches `max_attempts`."""
        ...
