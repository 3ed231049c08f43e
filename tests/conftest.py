"""
Shared pytest configuration.

Provides an in-memory Supabase seeded with the permission matrix, a gate reading from it,
and a TestClient whose bearer token is simply the user id.
"""

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from inventory.config.permissions_config import PERMISSION_MATRIX
from inventory.core import dependencies
from inventory.core.authorization import AuthorizationGate, SupabasePermissionQuery
from inventory.database.supabase_client import get_supabase
from inventory.main import app
from tests.utils import FakeSupabase

ADMIN_ID = "admin-1"
USER_ID = "user-1"
NO_ROLE_ID = "guest-1"


def seed_tables() -> dict:
    permissions = [
        {"id": f"perm-{index}", **perm}
        for index, perm in enumerate(PERMISSION_MATRIX["permissions"], start=1)
    ]
    ids_by_name = {perm["name"]: perm["id"] for perm in permissions}
    role_permissions = [
        {"id": f"rp-{role['name']}-{name}", "role": role["name"], "permission_id": ids_by_name[name]}
        for role in PERMISSION_MATRIX["roles"]
        for name in role["permissions"]
    ]
    return {
        "permissions": permissions,
        "role_permissions": role_permissions,
        "profiles": [
            {"id": ADMIN_ID, "email": "admin@example.com", "full_name": "Admin", "created_at": "2024-01-01T00:00:00+00:00"},
            {"id": USER_ID, "email": "user@example.com", "full_name": "User", "created_at": "2024-02-01T00:00:00+00:00"},
            {"id": NO_ROLE_ID, "email": "guest@example.com", "full_name": "Guest", "created_at": "2024-03-01T00:00:00+00:00"},
        ],
        "user_roles": [
            {"id": "ur-1", "user_id": ADMIN_ID, "role": "admin"},
            {"id": "ur-2", "user_id": USER_ID, "role": "user"},
        ],
        "materials": [],
        "machines": [],
        "material_transactions": [],
        "machine_transactions": [],
    }


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {user_id}"}


@pytest.fixture()
def fake_supabase() -> FakeSupabase:
    return FakeSupabase(seed_tables())


@pytest.fixture()
def gate(fake_supabase) -> AuthorizationGate:
    return AuthorizationGate(SupabasePermissionQuery(fake_supabase), fetch_timeout=2.0)


@pytest.fixture()
def client(fake_supabase, gate):
    def current_user(token: str = Depends(dependencies.get_current_token)) -> dict:
        return {"id": token, "email": f"{token}@example.com"}

    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[dependencies.get_authorization_gate] = lambda: gate
    app.dependency_overrides[dependencies.get_current_user_id] = current_user
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
