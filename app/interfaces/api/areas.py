"""Area API routes — admin only."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from app.application.services.area_service import AreaService
from app.core.responses import envelope
from app.domain.schemas.area import AreaCreate
from app.domain.schemas.auth import TokenClaims
from app.interfaces.api.deps import require_admin
from app.interfaces.deps import get_area_service

router = APIRouter(prefix="/areas", tags=["Areas"])


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_area(
    request: Request,
    body: AreaCreate,
    admin: TokenClaims = Depends(require_admin),
    area_service: AreaService = Depends(get_area_service),
):
    return envelope(request, {"id": area_service.create_area(admin.user_id, body)})


@router.get("/list")
def list_areas(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    tolerance: str = Query("simple"),
    admin: TokenClaims = Depends(require_admin),
    area_service: AreaService = Depends(get_area_service),
):
    """`tolerance` is simple, detail or off."""
    areas = area_service.get_areas(page, limit, tolerance)
    return envelope(request, areas, page=page, limit=limit, tolerance=tolerance)


@router.get("/{area_id}/boundary")
def get_area_boundary(
    request: Request,
    area_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    area_service: AreaService = Depends(get_area_service),
):
    return envelope(request, area_service.get_area_boundary(area_id))


@router.patch("/{area_id}/toggle")
def toggle_area(
    request: Request,
    area_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    area_service: AreaService = Depends(get_area_service),
):
    return envelope(request, area_service.toggle_area_active_status(admin.user_id, area_id))
