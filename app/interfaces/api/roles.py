"""Role API routes — admin only."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from app.application.services.role_service import RoleService
from app.core.responses import envelope
from app.domain.schemas.auth import TokenClaims
from app.domain.schemas.role import AssignRoleRequest, RoleCreate, RoleRead, RoleUpdate
from app.interfaces.api.deps import require_admin
from app.interfaces.deps import get_role_service

router = APIRouter(prefix="/roles", tags=["Roles"], dependencies=[Depends(require_admin)])


@router.get("/list")
def list_roles(request: Request, role_service: RoleService = Depends(get_role_service)):
    roles = role_service.list_all_roles()
    return envelope(request, [RoleRead.model_validate(r) for r in roles])


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_role(
    request: Request,
    body: RoleCreate,
    admin: TokenClaims = Depends(require_admin),
    role_service: RoleService = Depends(get_role_service),
):
    return envelope(request, {"id": role_service.create_role(admin.user_id, body)})


@router.post("/assign/{user_id}")
def assign_role(
    request: Request,
    user_id: UUID,
    body: AssignRoleRequest,
    admin: TokenClaims = Depends(require_admin),
    role_service: RoleService = Depends(get_role_service),
):
    role_service.assign_role_to_user(admin.user_id, user_id, body.role_name)
    return envelope(request, {"user_id": user_id, "role": body.role_name})


@router.delete("/assign/{user_id}")
def remove_user_role(
    request: Request,
    user_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    role_service: RoleService = Depends(get_role_service),
):
    role_service.remove_user_role(admin.user_id, user_id)
    return envelope(request, {"user_id": user_id})


@router.get("/id/{role_id}")
def get_role_by_id(request: Request, role_id: UUID, role_service: RoleService = Depends(get_role_service)):
    return envelope(request, RoleRead.model_validate(role_service.get_role_by_id(role_id)))


@router.get("/name/{name}")
def get_role_by_name(request: Request, name: str, role_service: RoleService = Depends(get_role_service)):
    return envelope(request, RoleRead.model_validate(role_service.get_role_by_name(name)))


@router.put("/{role_id}")
def update_role(
    request: Request,
    role_id: UUID,
    body: RoleUpdate,
    admin: TokenClaims = Depends(require_admin),
    role_service: RoleService = Depends(get_role_service),
):
    role = role_service.update_role(admin.user_id, role_id, body)
    return envelope(request, RoleRead.model_validate(role))


@router.delete("/{role_id}")
def delete_role(
    request: Request,
    role_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    role_service: RoleService = Depends(get_role_service),
):
    return envelope(request, {"id": role_service.remove_role(admin.user_id, role_id)})
