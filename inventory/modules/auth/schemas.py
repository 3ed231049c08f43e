from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    needs_confirmation: bool
    message: str


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    role: Optional[str] = None
    is_admin: bool = False
    permissions: List[str]


class PermissionCheckResponse(BaseModel):
    permissions: List[str]
    mode: str
    granted: bool
    pending: bool
