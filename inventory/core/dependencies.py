"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from inventory.database.supabase_client import get_supabase
from inventory.modules.auth.service import AuthService
from inventory.core.authorization import AuthorizationGate, PermissionDecision, SupabasePermissionQuery
from inventory.core.session import Identity, SessionContext
from supabase import Client
from typing import Callable, List, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()

_gate: Optional[AuthorizationGate] = None


def get_authorization_gate() -> AuthorizationGate:
    """Process-wide gate; its cache is keyed by identity so it is shared across requests."""
    global _gate
    if _gate is None:
        _gate = AuthorizationGate(SupabasePermissionQuery(get_supabase()))
    return _gate


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_session(
    user_data: dict = Depends(get_current_user_id),
    auth_service: AuthService = Depends(get_auth_service),
    gate: AuthorizationGate = Depends(get_authorization_gate)
) -> SessionContext:
    """Build the request's session: identity first, then its role."""
    session = SessionContext()
    gate.bind(session)
    session.sign_in(
        Identity(id=user_data["id"], email=user_data.get("email")),
        role_lookup=auth_service.get_user_role
    )
    return session


def _guard(describe: str, decide: Callable[[AuthorizationGate, Optional[Identity]], PermissionDecision]):
    def check_permission(
        session: SessionContext = Depends(get_session),
        gate: AuthorizationGate = Depends(get_authorization_gate)
    ) -> SessionContext:
        """Dependency to check if user has the required permission(s)"""
        decision = decide(gate, session.identity)
        if not decision.granted:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {describe}"
            )
        return session
    return check_permission


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    return _guard(
        required_permission,
        lambda gate, identity: gate.has_permission(identity, required_permission, wait=True)
    )


def require_any_permission(required_permissions: List[str]):
    return _guard(
        " or ".join(required_permissions),
        lambda gate, identity: gate.has_any_permission(identity, required_permissions, wait=True)
    )


def require_all_permissions(required_permissions: List[str]):
    return _guard(
        " and ".join(required_permissions),
        lambda gate, identity: gate.has_all_permissions(identity, required_permissions, wait=True)
    )
