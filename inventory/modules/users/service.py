import logging
from datetime import datetime, timezone
from supabase import Client
from inventory.modules.users.schemas import UserResponse, UserRoleResponse, UserWithRoleResponse
from inventory.core.session import Role, resolve_role
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def _with_role(profile: dict) -> UserWithRoleResponse:
    role_rows = profile.get("user_roles") or []
    return UserWithRoleResponse(
        **{k: v for k, v in profile.items() if k != "user_roles"},
        role=resolve_role(row["role"] for row in role_rows if row.get("role")),
        user_roles=[UserRoleResponse(**row) for row in role_rows]
    )


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_users(self, limit: Optional[int] = None, offset: int = 0) -> List[UserWithRoleResponse]:
        """List user profiles with their role assignments, newest first"""
        try:
            query = self.supabase.table("profiles")\
                .select("*, user_roles(*)")\
                .order("created_at", desc=True)
            if limit is not None:
                query = query.limit(limit).offset(offset)
            result = query.execute()
            return [_with_role(profile) for profile in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_user_by_id(self, user_id: str) -> UserWithRoleResponse:
        """Get user profile with role by ID"""
        try:
            result = self.supabase.table("profiles")\
                .select("*, user_roles(*)")\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return _with_role(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_user_role(self, user_id: str, role: Role, assigned_by: Optional[str]) -> UserRoleResponse:
        """Replace the user's role assignments with a single role"""
        try:
            self.supabase.table("user_roles")\
                .delete()\
                .eq("user_id", user_id)\
                .execute()

            result = self.supabase.table("user_roles").insert({
                "user_id": user_id,
                "role": role.value,
                "assigned_by": assigned_by,
                "assigned_at": datetime.now(timezone.utc).isoformat()
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to update user role")

            logger.info(f"Role of user {user_id} set to {role.value} by {assigned_by}")
            return UserRoleResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_user(self, user_id: str) -> bool:
        """Delete user role assignments and profile. The auth.users row needs the service-role admin API."""
        try:
            self.supabase.table("user_roles")\
                .delete()\
                .eq("user_id", user_id)\
                .execute()

            result = self.supabase.table("profiles")\
                .delete()\
                .eq("id", user_id)\
                .execute()

            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
