from fastapi import APIRouter, Depends, HTTPException, Query
from inventory.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    CurrentUserResponse, PermissionCheckResponse
)
from inventory.modules.auth.service import AuthService
from inventory.core.authorization import AuthorizationGate
from inventory.core.dependencies import (
    get_auth_service, get_authorization_gate, get_current_token, get_session
)
from inventory.core.session import SessionContext
from typing import List, Literal

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    session: SessionContext = Depends(get_session),
    service: AuthService = Depends(get_auth_service)
):
    """Logout; clears the session so the user's cached permissions are dropped"""
    session.sign_out()
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    session: SessionContext = Depends(get_session),
    gate: AuthorizationGate = Depends(get_authorization_gate)
):
    """Get current authenticated user, role and effective permissions (for frontend UI)."""
    identity = session.identity
    return CurrentUserResponse(
        id=identity.id,
        email=identity.email,
        role=session.role.value if session.role else None,
        is_admin=session.is_admin,
        permissions=sorted(gate.effective_permissions(identity))
    )


@router.get("/permissions/check", response_model=PermissionCheckResponse)
async def check_permissions(
    names: List[str] = Query(...),
    mode: Literal["one", "any", "all"] = "one",
    session: SessionContext = Depends(get_session),
    gate: AuthorizationGate = Depends(get_authorization_gate)
):
    """Non-blocking capability check; clients poll while `pending` is true."""
    if any(not name for name in names):
        raise HTTPException(status_code=400, detail="Permission names must be non-empty")
    if mode == "one" and len(names) != 1:
        raise HTTPException(status_code=400, detail="mode=one takes exactly one permission name")
    if mode == "one":
        decision = gate.has_permission(session.identity, names[0])
    elif mode == "any":
        decision = gate.has_any_permission(session.identity, names)
    else:
        decision = gate.has_all_permissions(session.identity, names)
    return PermissionCheckResponse(
        permissions=names,
        mode=mode,
        granted=decision.granted,
        pending=decision.pending
    )
