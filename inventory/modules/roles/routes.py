from fastapi import APIRouter, Depends
from inventory.database.supabase_client import get_supabase
from inventory.modules.roles.schemas import (
    PermissionResponse, PermissionsByModuleResponse,
    RolePermissionAssign, RolePermissionResponse, RolePermissionWithDetailsResponse,
    RoleWithPermissionsResponse, BulkPermissionUpdate, BulkPermissionAssignResponse
)
from inventory.modules.roles.service import RoleService, PermissionService, group_permissions_by_module
from inventory.core.authorization import AuthorizationGate
from inventory.core.dependencies import require_permission, get_authorization_gate
from inventory.core.session import Role, SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/roles", tags=["roles"])

MANAGE_ROLES = "users.manage_roles"


def get_role_service(supabase: Client = Depends(get_supabase)) -> RoleService:
    return RoleService(supabase)


def get_permission_service(supabase: Client = Depends(get_supabase)) -> PermissionService:
    return PermissionService(supabase)


# Permission endpoints
@router.get("/permissions", response_model=List[PermissionResponse])
async def list_permissions(
    module: Optional[str] = None,
    session: SessionContext = Depends(require_permission(MANAGE_ROLES)),
    service: PermissionService = Depends(get_permission_service)
):
    """List all permissions ordered by module"""
    return service.list_permissions(module=module)


@router.get("/permissions/by-module", response_model=PermissionsByModuleResponse)
async def list_permissions_by_module(
    session: SessionContext = Depends(require_permission(MANAGE_ROLES)),
    service: PermissionService = Depends(get_permission_service)
):
    """Permissions grouped by module"""
    return PermissionsByModuleResponse(modules=group_permissions_by_module(service.list_permissions()))


@router.get("/permissions/{permission_id}", response_model=PermissionResponse)
async def get_permission(
    permission_id: str,
    session: SessionContext = Depends(require_permission(MANAGE_ROLES)),
    service: PermissionService = Depends(get_permission_service)
):
    """Get permission by ID"""
    return service.get_permission_by_id(permission_id)


# Role-Permission association endpoints
@router.get("/mappings", response_model=List[RolePermissionWithDetailsResponse])
async def list_role_permissions(
    role: Optional[Role] = None,
    session: SessionContext = Depends(require_permission(MANAGE_ROLES)),
    service: RoleService = Depends(get_role_service)
):
    """List role -> permission mappings, optionally for one role"""
    return service.list_role_permissions(role)


@router.get("/{role}/permissions", response_model=RoleWithPermissionsResponse)
async def get_role_permissions(
    role: Role,
    session: SessionContext = Depends(require_permission(MANAGE_ROLES)),
    service: RoleService = Depends(get_role_service)
):
    """Get all permissions for a role"""
    return service.get_role_with_permissions(role)


@router.post("/{role}/permissions", response_model=RolePermissionResponse, status_code=201)
async def assign_permission_to_role(
    role: Role,
    permission_assign: RolePermissionAssign,
    session: SessionContext = Depends(require_permission(MANAGE_ROLES)),
    service: RoleService = Depends(get_role_service),
    gate: AuthorizationGate = Depends(get_authorization_gate)
):
    """Assign a permission to a role"""
    result = service.assign_permission_to_role(role, permission_assign.permission_id)
    gate.invalidate()
    return result


@router.delete("/{role}/permissions/{permission_id}", status_code=204)
async def remove_permission_from_role(
    role: Role,
    permission_id: str,
    session: SessionContext = Depends(require_permission(MANAGE_ROLES)),
    service: RoleService = Depends(get_role_service),
    gate: AuthorizationGate = Depends(get_authorization_gate)
):
    """Remove a permission from a role"""
    service.remove_permission_from_role(role, permission_id)
    gate.invalidate()
    return None


@router.put("/{role}/permissions", response_model=BulkPermissionAssignResponse)
async def bulk_update_role_permissions(
    role: Role,
    bulk_data: BulkPermissionUpdate,
    session: SessionContext = Depends(require_permission(MANAGE_ROLES)),
    service: RoleService = Depends(get_role_service),
    gate: AuthorizationGate = Depends(get_authorization_gate)
):
    """Replace all permissions for a role"""
    result = service.bulk_update_role_permissions(role, bulk_data.permission_ids)
    gate.invalidate()
    return result
