from supabase import Client
from inventory.modules.roles.schemas import (
    PermissionResponse, RolePermissionResponse, RolePermissionWithDetailsResponse,
    RoleWithPermissionsResponse, BulkPermissionAssignResponse
)
from inventory.core.session import Role
from typing import Dict, List, Optional
from fastapi import HTTPException


def group_permissions_by_module(permissions: List[PermissionResponse]) -> Dict[str, List[PermissionResponse]]:
    """Group permissions by module, keeping the incoming order inside each group"""
    grouped: Dict[str, List[PermissionResponse]] = {}
    for permission in permissions:
        grouped.setdefault(permission.module, []).append(permission)
    return grouped


class PermissionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_permission_by_id(self, permission_id: str) -> PermissionResponse:
        """Get permission by ID"""
        try:
            result = self.supabase.table("permissions")\
                .select("*")\
                .eq("id", permission_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Permission not found")

            return PermissionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_permissions(self, module: Optional[str] = None) -> List[PermissionResponse]:
        """List permissions ordered by module, optionally filtered to one module"""
        try:
            query = self.supabase.table("permissions").select("*")
            if module:
                query = query.eq("module", module)
            result = query.order("module").order("action").execute()
            return [PermissionResponse(**permission) for permission in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))


class RoleService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_role_permissions(self, role: Optional[Role] = None) -> List[RolePermissionWithDetailsResponse]:
        """List role -> permission mappings with permission details"""
        try:
            query = self.supabase.table("role_permissions").select("*, permissions(*)")
            if role is not None:
                query = query.eq("role", role.value)
            result = query.order("role").execute()
            return [RolePermissionWithDetailsResponse(**item) for item in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_role_permissions(self, role: Role) -> List[PermissionResponse]:
        """Get all permissions granted to a role"""
        return [item.permissions for item in self.list_role_permissions(role) if item.permissions]

    def get_role_with_permissions(self, role: Role) -> RoleWithPermissionsResponse:
        return RoleWithPermissionsResponse(role=role, permissions=self.get_role_permissions(role))

    def assign_permission_to_role(self, role: Role, permission_id: str) -> RolePermissionResponse:
        """Grant a permission to a role"""
        try:
            PermissionService(self.supabase).get_permission_by_id(permission_id)

            existing = self.supabase.table("role_permissions")\
                .select("*")\
                .eq("role", role.value)\
                .eq("permission_id", permission_id)\
                .execute()

            if existing.data:
                raise HTTPException(status_code=400, detail="Permission already assigned to role")

            result = self.supabase.table("role_permissions").insert({
                "role": role.value,
                "permission_id": permission_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to assign permission")

            return RolePermissionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_permission_from_role(self, role: Role, permission_id: str) -> bool:
        """Revoke a permission from a role"""
        try:
            result = self.supabase.table("role_permissions")\
                .delete()\
                .eq("role", role.value)\
                .eq("permission_id", permission_id)\
                .execute()

            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def bulk_update_role_permissions(self, role: Role, permission_ids: List[str]) -> BulkPermissionAssignResponse:
        """Replace all permissions of a role"""
        try:
            permission_ids = list(dict.fromkeys(permission_ids))

            # Verify all permissions exist
            permission_service = PermissionService(self.supabase)
            for permission_id in permission_ids:
                permission_service.get_permission_by_id(permission_id)

            self.supabase.table("role_permissions")\
                .delete()\
                .eq("role", role.value)\
                .execute()

            assigned_permissions = []
            if permission_ids:
                insert_data = [
                    {"role": role.value, "permission_id": pid}
                    for pid in permission_ids
                ]

                result = self.supabase.table("role_permissions").insert(insert_data).execute()
                if result.data:
                    assigned_permissions = [RolePermissionResponse(**item) for item in result.data]

            return BulkPermissionAssignResponse(
                role=role,
                assigned_count=len(assigned_permissions),
                skipped_count=0,
                assigned_permissions=assigned_permissions,
                message=f"Updated role with {len(assigned_permissions)} permissions"
            )
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
