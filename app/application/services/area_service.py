"""Area service — administrative boundaries backed by validated GeoJSON."""

import json
from typing import Dict, List, Optional, Union
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictError, EntityNotFoundException, ValidationError
from app.core.geometry import simplify_geometry, validate_and_normalize
from app.domain.models.audit_log import LogAction, LogEntity
from app.domain.schemas.area import AreaBoundary, AreaCreate, AreaStatus, AreaWithGeometry
from app.application.services.audit_service import AuditLogger
from app.infrastructure.repositories.area_repository import SQLAlchemyAreaRepository

logger = structlog.get_logger(__name__)

AREA_TOLERANCES: Dict[str, float] = {
    "simple": 0.001,
    "detail": 0.0001,
    "off": 0.0,
}

AREA_EXISTS_MESSAGE = "area already exist"


def resolve_tolerance(name: Optional[str]) -> float:
    key = (name or "simple").strip().lower()
    if key not in AREA_TOLERANCES:
        raise ValidationError(
            "invalid tolerance, must be one of: simple, detail, off",
            details={"tolerance": name},
        )
    return AREA_TOLERANCES[key]


class AreaService:
    def __init__(self, areas: SQLAlchemyAreaRepository, audit: AuditLogger):
        self.areas = areas
        self.audit = audit

    def create_area(self, performed_by: UUID, body: AreaCreate) -> UUID:
        if self.areas.get_by_name_and_code(body.name, body.area_code):
            raise ConflictError(AREA_EXISTS_MESSAGE)

        raw: Union[str, dict] = body.geojson
        boundary = validate_and_normalize(raw if isinstance(raw, str) else json.dumps(raw))

        try:
            area = self.areas.create(
                {
                    "name": body.name,
                    "description": body.description or None,
                    "area_type": body.area_type,
                    "area_code": body.area_code,
                    "boundary": boundary,
                    "created_by": performed_by,
                }
            )
        except IntegrityError as exc:
            self.areas.db.rollback()
            raise ConflictError(AREA_EXISTS_MESSAGE) from exc

        logger.info("Area created", area_id=str(area.id), area_code=area.area_code)
        self.audit.log(LogEntity.areas, LogAction.create, area.id, performed_by)
        return area.id

    def get_areas(self, page: int = 1, limit: int = 10, tolerance: Optional[str] = "simple") -> List[AreaWithGeometry]:
        epsilon = resolve_tolerance(tolerance)
        areas = self.areas.list(skip=(page - 1) * limit, limit=limit)
        return [
            AreaWithGeometry(
                id=area.id,
                name=area.name,
                description=area.description,
                area_type=area.area_type,
                area_code=area.area_code,
                is_active=area.is_active,
                created_by=area.created_by,
                created_at=area.created_at,
                geometry=simplify_geometry(area.boundary, epsilon),
            )
            for area in areas
        ]

    def get_area_boundary(self, area_id: UUID) -> AreaBoundary:
        area = self.areas.get_by_id(area_id)
        if not area:
            raise EntityNotFoundException("area not found")
        return AreaBoundary(id=area.id, name=area.name, boundary=json.loads(area.boundary))

    def toggle_area_active_status(self, performed_by: UUID, area_id: UUID) -> AreaStatus:
        area = self.areas.get_by_id(area_id)
        if not area:
            raise EntityNotFoundException("area not found")

        area = self.areas.update(area, {"is_active": not area.is_active})
        status = AreaStatus(id=area.id, is_active=area.is_active)
        self.audit.log(
            LogEntity.areas,
            LogAction.update,
            area.id,
            performed_by,
            metadata={"id": str(area.id), "is_active": area.is_active},
        )
        return status
