from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from inventory.core.session import Role


class UserRoleResponse(BaseModel):
    id: str
    user_id: str
    role: Role
    assigned_by: Optional[str] = None
    assigned_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserWithRoleResponse(UserResponse):
    role: Optional[Role] = None
    user_roles: List[UserRoleResponse] = []


class UserRoleUpdate(BaseModel):
    role: Role
