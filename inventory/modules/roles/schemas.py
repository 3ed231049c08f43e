from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import datetime
from inventory.core.session import Role


class PermissionResponse(BaseModel):
    id: str
    name: str
    module: str
    action: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PermissionsByModuleResponse(BaseModel):
    modules: Dict[str, List[PermissionResponse]]


class RolePermissionAssign(BaseModel):
    permission_id: str


class RolePermissionResponse(BaseModel):
    id: str
    role: Role
    permission_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RolePermissionWithDetailsResponse(BaseModel):
    id: str
    role: Role
    permission_id: str
    permissions: Optional[PermissionResponse] = None

    class Config:
        from_attributes = True


class RoleWithPermissionsResponse(BaseModel):
    role: Role
    permissions: List[PermissionResponse]


class BulkPermissionUpdate(BaseModel):
    permission_ids: List[str]


class BulkPermissionAssignResponse(BaseModel):
    role: Role
    assigned_count: int
    skipped_count: int
    assigned_permissions: List[RolePermissionResponse]
    message: str
