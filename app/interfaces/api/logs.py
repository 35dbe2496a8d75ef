"""Audit log API routes — admin only, newest first."""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.application.services.audit_service import list_logs
from app.core.responses import envelope
from app.infrastructure.database import get_db
from app.interfaces.api.deps import require_admin

router = APIRouter(prefix="/logs", tags=["Logs"], dependencies=[Depends(require_admin)])


@router.get("/list")
def get_logs(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return envelope(request, list_logs(db, page, limit))
