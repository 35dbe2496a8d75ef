"""Audit service — fire-and-forget audit trail writes and paginated reads.

log() only enqueues; the insert happens on a TaskQueue worker with its
own session, so a slow or failing audit table never delays or breaks the
request that triggered it.
"""

from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from app.core.tasks import TaskQueue
from app.core.timeutil import utcnow
from app.domain.models.audit_log import LogAction, LogEntity
from app.domain.schemas.audit_log import AuditLogRead
from app.infrastructure.repositories.audit_log_repository import SQLAlchemyAuditLogRepository

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], Session]


class AuditLogger:
    """Enqueues audit writes on a bounded background queue."""

    def __init__(self, tasks: TaskQueue, session_factory: SessionFactory):
        self.tasks = tasks
        self.session_factory = session_factory

    def log(
        self,
        entity_name: LogEntity,
        action: LogAction,
        entity_id: Optional[UUID],
        performed_by: Optional[UUID],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        entry = {
            "entity_name": LogEntity(entity_name).value,
            "action": LogAction(action).value,
            "entity_id": entity_id,
            "performed_by": performed_by,
            "details": metadata,
            "created_at": utcnow(),
        }
        self.tasks.submit(lambda: self._write(entry))

    def _write(self, entry: Dict[str, Any]) -> None:
        with self.session_factory() as db:
            SQLAlchemyAuditLogRepository(db).create(entry)
        logger.debug("Audit log written", entity=entry["entity_name"], action=entry["action"])


def list_logs(db: Session, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    """Newest-first page of audit logs."""
    repo = SQLAlchemyAuditLogRepository(db)
    logs = repo.list(skip=(page - 1) * limit, limit=limit)
    items: List[AuditLogRead] = [
        AuditLogRead(
            id=log.id,
            entity_name=log.entity_name,
            action=log.action,
            entity_id=log.entity_id,
            performed_by=log.performed_by,
            metadata=log.details,
            created_at=log.created_at,
        )
        for log in logs
    ]
    return {"items": items, "total": repo.count(), "page": page, "limit": limit}
