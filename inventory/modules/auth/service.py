import hashlib
import logging
import time
from supabase import Client
from inventory.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from inventory.core.session import Role, resolve_role
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def _token_cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth"""
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name.strip()

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email.strip(),
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                needs_confirmation=not getattr(auth_response.user, "email_confirmed_at", None),
                message="User registered successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            logger.error(f"Sign up error: {error_message}")
            lowered = error_message.lower()
            if "already registered" in lowered or "already exists" in lowered:
                raise HTTPException(status_code=400, detail="Email is already registered. Use another email or sign in")
            if "password should be at least" in lowered:
                raise HTTPException(status_code=400, detail="Password must be at least 6 characters")
            if "unable to validate email address" in lowered:
                raise HTTPException(status_code=400, detail="Invalid email format")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email.strip(),
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            logger.error(f"Sign in error: {error_message}")
            lowered = error_message.lower()
            if "invalid login credentials" in lowered:
                raise HTTPException(status_code=401, detail="Invalid email or password")
            if "email not confirmed" in lowered:
                raise HTTPException(status_code=401, detail="Email not confirmed. Please check your inbox")
            if "too many requests" in lowered:
                raise HTTPException(status_code=429, detail="Too many attempts. Please try again later")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = _token_cache_key(token)
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "created_at": user.created_at,
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def get_user_role(self, user_id: str) -> Optional[Role]:
        """Resolve the user's role from user_roles; highest privilege wins when several rows exist."""
        try:
            result = self.supabase.table("user_roles")\
                .select("role")\
                .eq("user_id", user_id)\
                .execute()
            return resolve_role(row["role"] for row in (result.data or []) if row.get("role"))
        except Exception as e:
            logger.error(f"Error checking role for user {user_id}: {e}")
            return None

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth and forget the cached token lookup"""
        _AUTH_USER_CACHE.pop(_token_cache_key(token), None)
        try:
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.error(f"Sign out error: {e}")
            return False
