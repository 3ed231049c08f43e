from fastapi import APIRouter, Depends, HTTPException, status
from inventory.database.supabase_client import get_supabase
from inventory.modules.users.schemas import UserWithRoleResponse, UserRoleResponse, UserRoleUpdate
from inventory.modules.users.service import UserService
from inventory.core.authorization import AuthorizationGate
from inventory.core.dependencies import require_permission, get_authorization_gate
from inventory.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("", response_model=List[UserWithRoleResponse])
async def list_users(
    limit: Optional[int] = None,
    offset: int = 0,
    session: SessionContext = Depends(require_permission("users.view")),
    service: UserService = Depends(get_user_service)
):
    """List users with their roles"""
    return service.list_users(limit=limit, offset=offset)


@router.get("/{user_id}", response_model=UserWithRoleResponse)
async def get_user(
    user_id: str,
    session: SessionContext = Depends(require_permission("users.view")),
    service: UserService = Depends(get_user_service)
):
    """Get user by ID"""
    return service.get_user_by_id(user_id)


@router.put("/{user_id}/role", response_model=UserRoleResponse)
async def update_user_role(
    user_id: str,
    role_data: UserRoleUpdate,
    session: SessionContext = Depends(require_permission("users.manage_roles")),
    service: UserService = Depends(get_user_service),
    gate: AuthorizationGate = Depends(get_authorization_gate)
):
    """Replace a user's role; the user's cached permissions are dropped"""
    result = service.update_user_role(user_id, role_data.role, assigned_by=session.identity.id)
    gate.invalidate(user_id)
    return result


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    session: SessionContext = Depends(require_permission("users.delete")),
    service: UserService = Depends(get_user_service),
    gate: AuthorizationGate = Depends(get_authorization_gate)
):
    """Delete user profile and role assignments"""
    if user_id == session.identity.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")
    if not service.delete_user(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    gate.invalidate(user_id)
    return None
